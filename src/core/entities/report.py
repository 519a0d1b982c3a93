"""Read-only report rows derived from products and movements."""

from pydantic import BaseModel, Field

from src.core.entities.movement import MovementRecord
from src.core.entities.product import Product


class ProductActivity(BaseModel):
    """Product with its lifetime movement totals."""

    product: Product
    total_entries: float = 0.0
    total_exits: float = 0.0
    total_losses: float = 0.0


class InventorySummary(BaseModel):
    total_products: int = 0
    total_value: float = 0.0
    low_stock_count: int = 0


class InventoryReport(BaseModel):
    products: list[ProductActivity] = Field(default_factory=list)
    summary: InventorySummary = Field(default_factory=InventorySummary)


class MonthlyExpense(BaseModel):
    """Movement value per type for one calendar month (YYYY-MM)."""

    month: str
    entries_value: float = 0.0
    exits_value: float = 0.0
    losses_value: float = 0.0


class ExpensesReport(BaseModel):
    months: list[MonthlyExpense] = Field(default_factory=list)
    average_entries: float = 0.0
    average_exits: float = 0.0


class TodayMovementCounts(BaseModel):
    entries: int = 0
    exits: int = 0
    losses: int = 0


class MonthComparison(BaseModel):
    """Entry spend this month against last month."""

    this_month: float = 0.0
    last_month: float = 0.0
    difference: float = 0.0
    percentage: float = 0.0


class Dashboard(BaseModel):
    total_products: int = 0
    stock_value: float = 0.0
    low_stock_products: list[Product] = Field(default_factory=list)
    recent_movements: list[MovementRecord] = Field(default_factory=list)
    today: TodayMovementCounts = Field(default_factory=TodayMovementCounts)
    comparison: MonthComparison = Field(default_factory=MonthComparison)
