"""Fixtures for unit service tests.

Stores are AsyncMock doubles; nothing here touches SQLite.
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.entities import Product, UnitType


@pytest.fixture
def inventory_store() -> AsyncMock:
    """Inventory store whose transaction() yields the store itself."""
    store = AsyncMock()

    @asynccontextmanager
    async def transaction(product_id):
        yield store

    store.transaction = MagicMock(side_effect=transaction)

    async def insert_movement(movement):
        return movement.model_copy(update={"id": 1})

    async def update_movement(movement):
        return movement

    store.insert_movement.side_effect = insert_movement
    store.update_movement.side_effect = update_movement
    return store


@pytest.fixture
def vendor_store() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def make_product():
    def make(**overrides) -> Product:
        fields = {
            "id": 1,
            "sku": "EST-TEST-0001",
            "name": "Cera de Carnaúba",
            "quantity": 10.0,
            "cost_price": 5.0,
            "unit_type": UnitType.UNIT,
        }
        fields.update(overrides)
        return Product(**fields)

    return make
