"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from src.application.dto.requests import (
    EditMovementRequest,
    EntryRequest,
    ExitRequest,
    ExitReturnRequest,
    LossRequest,
    ProductCreateRequest,
    ProductUpdateRequest,
    SupplierCreateRequest,
    SupplierUpdateRequest,
    VendorCreateRequest,
    VendorUpdateRequest,
)
from src.application.dto.responses import (
    DashboardResponse,
    DatabaseHealthResponse,
    DeleteMovementResponse,
    EditMovementResponse,
    EntryResponse,
    ErrorResponse,
    ExitReturnResponse,
    ExpensesReportResponse,
    HealthResponse,
    InventoryReportResponse,
    LedgerCheckResponse,
    MovementListResponse,
    MovementResponse,
    ProductListResponse,
    ProductResponse,
    StockMovementResponse,
    SupplierListResponse,
    SupplierResponse,
    VendorListResponse,
    VendorResponse,
)

__all__ = [
    # Requests
    "EntryRequest",
    "ExitRequest",
    "LossRequest",
    "ExitReturnRequest",
    "EditMovementRequest",
    "ProductCreateRequest",
    "ProductUpdateRequest",
    "SupplierCreateRequest",
    "SupplierUpdateRequest",
    "VendorCreateRequest",
    "VendorUpdateRequest",
    # Responses
    "ProductResponse",
    "ProductListResponse",
    "SupplierResponse",
    "SupplierListResponse",
    "VendorResponse",
    "VendorListResponse",
    "MovementResponse",
    "MovementListResponse",
    "EntryResponse",
    "StockMovementResponse",
    "ExitReturnResponse",
    "EditMovementResponse",
    "DeleteMovementResponse",
    "LedgerCheckResponse",
    "InventoryReportResponse",
    "ExpensesReportResponse",
    "DashboardResponse",
    "HealthResponse",
    "DatabaseHealthResponse",
    "ErrorResponse",
]
