"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteProductStore,
    SQLiteReportStore,
    SQLiteSupplierStore,
    SQLiteVendorStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteInventoryStore",
    "SQLiteProductStore",
    "SQLiteSupplierStore",
    "SQLiteVendorStore",
    "SQLiteReportStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
