"""Pytest fixtures for SQLite storage tests."""

from pathlib import Path

import pytest

from src.core.entities import Supplier, Vendor
from src.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteProductStore,
    SQLiteReportStore,
    SQLiteSupplierStore,
    SQLiteVendorStore,
    product_locks,
)


@pytest.fixture
def inventory_store(sqlite_db: Path) -> SQLiteInventoryStore:
    return SQLiteInventoryStore(locks=product_locks)


@pytest.fixture
def product_store(sqlite_db: Path) -> SQLiteProductStore:
    return SQLiteProductStore()


@pytest.fixture
def supplier_store(sqlite_db: Path) -> SQLiteSupplierStore:
    return SQLiteSupplierStore()


@pytest.fixture
def vendor_store(sqlite_db: Path) -> SQLiteVendorStore:
    return SQLiteVendorStore()


@pytest.fixture
def report_store(sqlite_db: Path) -> SQLiteReportStore:
    return SQLiteReportStore()


@pytest.fixture
async def supplier(supplier_store: SQLiteSupplierStore) -> Supplier:
    return await supplier_store.create_supplier(
        Supplier(name="Vonixx Distribuidora", contact="Marcos", email="vendas@vonixx.test")
    )


@pytest.fixture
async def vendor(vendor_store: SQLiteVendorStore) -> Vendor:
    return await vendor_store.create_vendor(Vendor(name="Loja do Polimento", phone="11 99999-0000"))
