"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization. Keys are snake_case.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


# --- Catalog ---


class ProductResponse(BaseModel):
    """Product with its current balance."""

    id: int = Field(..., description="Product ID")
    sku: str = Field(..., description="Generated stock-keeping code")
    name: str
    description: str | None = None
    unit_type: str = Field(..., description="unit or weight")
    unit_label: str = Field(..., description="Short unit label (un / kg)")
    quantity: float = Field(..., ge=0, description="Stock on hand")
    cost_price: float = Field(..., ge=0, description="Weighted-average cost per unit")
    min_stock: float = Field(default=0.0, ge=0)
    stock_value: float = Field(..., description="quantity * cost_price")
    is_low_stock: bool = Field(..., description="quantity <= min_stock")
    supplier_id: int | None = None
    supplier_name: str | None = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    products: list[ProductResponse] = Field(default=[])
    total: int = Field(..., ge=0)


class SupplierResponse(BaseModel):
    id: int
    name: str
    contact: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    created_at: datetime


class SupplierListResponse(BaseModel):
    suppliers: list[SupplierResponse] = Field(default=[])
    total: int = Field(..., ge=0)


class VendorResponse(BaseModel):
    id: int
    name: str
    phone: str | None = None
    created_at: datetime


class VendorListResponse(BaseModel):
    vendors: list[VendorResponse] = Field(default=[])
    total: int = Field(..., ge=0)


# --- Movements ---


class MovementResponse(BaseModel):
    """A movement, joined with product and vendor names when listed."""

    id: int = Field(..., description="Movement ID")
    product_id: int
    type: str = Field(..., description="entry, exit or loss")
    quantity: float = Field(..., gt=0)
    unit_cost: float = Field(..., ge=0, description="Cost per unit at the time of the movement")
    total_value: float = Field(..., description="quantity * unit_cost")
    notes: str | None = None
    vendor_id: int | None = None
    created_at: datetime
    product_name: str | None = None
    product_sku: str | None = None
    product_unit_type: str | None = None
    vendor_name: str | None = None


class MovementListResponse(BaseModel):
    movements: list[MovementResponse] = Field(default=[])
    total: int = Field(..., ge=0)


class EntryResponse(BaseModel):
    """Result of an entry, with the cost before and after averaging."""

    product: ProductResponse
    movement: MovementResponse
    previous_cost: float = Field(..., description="cost_price before the entry")
    new_average_cost: float = Field(..., description="Weighted-average cost after the entry")


class StockMovementResponse(BaseModel):
    """Result of an exit or a loss."""

    product: ProductResponse
    movement: MovementResponse


class ExitReturnResponse(BaseModel):
    product: ProductResponse
    movement: MovementResponse
    consumed: float = Field(..., gt=0, description="quantity_out - quantity_return")


class EditMovementResponse(BaseModel):
    movement: MovementResponse
    inventory_change: float = Field(..., description="Signed change applied to stock")
    new_inventory: float = Field(..., ge=0)


class DeleteMovementResponse(BaseModel):
    movement_id: int
    deleted: bool = True
    inventory_change: float = Field(..., description="Signed change applied to stock")
    new_inventory: float = Field(..., ge=0)


class LedgerCheckResponse(BaseModel):
    """Stored balance against a replay of the product's movement history."""

    product_id: int
    consistent: bool
    stored_quantity: float
    replayed_quantity: float
    stored_cost_price: float
    replayed_cost_price: float
    entries_replayed: int
    quantity_matches: bool
    cost_matches: bool


# --- Reports ---


class ProductActivityResponse(ProductResponse):
    total_entries: float = 0.0
    total_exits: float = 0.0
    total_losses: float = 0.0


class InventorySummaryResponse(BaseModel):
    total_products: int = Field(..., ge=0)
    total_value: float
    low_stock_count: int = Field(..., ge=0)


class InventoryReportResponse(BaseModel):
    products: list[ProductActivityResponse] = Field(default=[])
    summary: InventorySummaryResponse


class MonthlyExpenseResponse(BaseModel):
    month: str = Field(..., description="Calendar month, YYYY-MM")
    entries_value: float
    exits_value: float
    losses_value: float


class ExpensesReportResponse(BaseModel):
    months: list[MonthlyExpenseResponse] = Field(default=[])
    average_entries: float = 0.0
    average_exits: float = 0.0


class TodayCountsResponse(BaseModel):
    entries: int = 0
    exits: int = 0
    losses: int = 0


class MonthComparisonResponse(BaseModel):
    this_month: float
    last_month: float
    difference: float
    percentage: float = Field(..., description="Change against last month, 1 decimal")


class DashboardResponse(BaseModel):
    total_products: int
    stock_value: float
    low_stock_products: list[ProductResponse] = Field(default=[])
    recent_movements: list[MovementResponse] = Field(default=[])
    today: TodayCountsResponse
    comparison: MonthComparisonResponse


# --- Health and errors ---


class DatabaseHealthResponse(BaseModel):
    """State of the SQLite file behind the ledger."""

    name: str = "sqlite"
    available: bool
    schema_version: str | None = None
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: DatabaseHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. PRODUCT_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
