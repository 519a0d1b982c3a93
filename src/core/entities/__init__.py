"""Core domain entities."""

from src.core.entities.movement import (
    Movement,
    MovementFilter,
    MovementPeriod,
    MovementRecord,
    MovementType,
)
from src.core.entities.partner import Supplier, Vendor
from src.core.entities.product import Product, ProductFilter, UnitType, utc_now
from src.core.entities.report import (
    Dashboard,
    ExpensesReport,
    InventoryReport,
    InventorySummary,
    MonthComparison,
    MonthlyExpense,
    ProductActivity,
    TodayMovementCounts,
)

__all__ = [
    # Catalog
    "Product",
    "ProductFilter",
    "UnitType",
    "Supplier",
    "Vendor",
    # Ledger
    "Movement",
    "MovementRecord",
    "MovementType",
    "MovementFilter",
    "MovementPeriod",
    # Reports
    "ProductActivity",
    "InventorySummary",
    "InventoryReport",
    "MonthlyExpense",
    "ExpensesReport",
    "TodayMovementCounts",
    "MonthComparison",
    "Dashboard",
    # Helpers
    "utc_now",
]
