"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import src.infrastructure.storage.sqlite.connection as conn_module
from src.application.services import reset_services
from src.core.entities import Product, UnitType
from src.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteProductStore,
    close_pool,
    reset_stores,
)
from src.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "stock.db"


@pytest.fixture
def mock_settings(temp_db_path: Path) -> MagicMock:
    """Settings double pointing storage at the temporary database."""
    settings = MagicMock()
    settings.storage.db_path = temp_db_path
    settings.storage.pool_size = 3
    settings.storage.busy_timeout = 5000
    return settings


@pytest.fixture
async def sqlite_db(temp_db_path: Path, mock_settings: MagicMock) -> AsyncGenerator[Path, None]:
    """Migrated temporary database with the global pool pointed at it."""
    await initialize_database(temp_db_path, create_backup_before=False)

    conn_module._pool = None
    reset_stores()
    reset_services()
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield temp_db_path
        finally:
            await close_pool()
            reset_stores()
            reset_services()


@pytest.fixture
def product_factory(sqlite_db: Path):
    """Create a product and optionally seed its balance directly."""

    async def create(
        name: str = "Shampoo automotivo",
        quantity: float = 0.0,
        cost_price: float = 0.0,
        min_stock: float = 0.0,
        unit_type: UnitType = UnitType.UNIT,
        sku: str | None = None,
    ) -> Product:
        products = SQLiteProductStore()
        product = await products.create_product(
            Product(
                sku=sku or f"TEST-{name.upper().replace(' ', '-')}",
                name=name,
                unit_type=unit_type,
                cost_price=cost_price,
                min_stock=min_stock,
            )
        )
        if quantity:
            await SQLiteInventoryStore().update_product_stock(product.id, quantity, cost_price)
            product = await products.get_product(product.id)
        return product

    return create
