"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.inventory_store import IInventoryStore
from src.core.interfaces.partner_store import ISupplierStore, IVendorStore
from src.core.interfaces.product_store import IProductStore
from src.core.interfaces.report_store import IReportStore

__all__ = [
    "IInventoryStore",
    "IProductStore",
    "ISupplierStore",
    "IVendorStore",
    "IReportStore",
]
