"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from src.infrastructure.storage.sqlite.locks import KeyedLock, product_locks
from src.infrastructure.storage.sqlite.partner_store import (
    SQLiteSupplierStore,
    SQLiteVendorStore,
)
from src.infrastructure.storage.sqlite.product_store import SQLiteProductStore
from src.infrastructure.storage.sqlite.report_store import SQLiteReportStore

# Aliases used by the API lifespan
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances
_inventory_store: SQLiteInventoryStore | None = None
_product_store: SQLiteProductStore | None = None
_supplier_store: SQLiteSupplierStore | None = None
_vendor_store: SQLiteVendorStore | None = None
_report_store: SQLiteReportStore | None = None


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


async def get_product_store() -> SQLiteProductStore:
    global _product_store
    if _product_store is None:
        _product_store = SQLiteProductStore()
    return _product_store


async def get_supplier_store() -> SQLiteSupplierStore:
    global _supplier_store
    if _supplier_store is None:
        _supplier_store = SQLiteSupplierStore()
    return _supplier_store


async def get_vendor_store() -> SQLiteVendorStore:
    global _vendor_store
    if _vendor_store is None:
        _vendor_store = SQLiteVendorStore()
    return _vendor_store


async def get_report_store() -> SQLiteReportStore:
    global _report_store
    if _report_store is None:
        _report_store = SQLiteReportStore()
    return _report_store


def reset_stores() -> None:
    """Drop singleton stores (tests point them at a fresh database)."""
    global _inventory_store, _product_store, _supplier_store, _vendor_store, _report_store
    _inventory_store = None
    _product_store = None
    _supplier_store = None
    _vendor_store = None
    _report_store = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Locking
    "KeyedLock",
    "product_locks",
    # Store classes
    "SQLiteInventoryStore",
    "SQLiteProductStore",
    "SQLiteSupplierStore",
    "SQLiteVendorStore",
    "SQLiteReportStore",
    # Factory functions
    "get_inventory_store",
    "get_product_store",
    "get_supplier_store",
    "get_vendor_store",
    "get_report_store",
    "reset_stores",
]
