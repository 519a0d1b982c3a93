"""API tests for product endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_catalog, get_processor
from src.api.main import app
from src.core.entities import Product, UnitType
from src.core.exceptions import InvalidInputError, ProductNotFoundError
from src.core.services import CatalogService, MovementProcessor
from src.core.services.movement_processor import LedgerCheck


def _product(**overrides) -> Product:
    fields = {
        "id": 1,
        "sku": "EST-M2K8F1QZ-7XA",
        "name": "Cera Líquida",
        "unit_type": UnitType.WEIGHT,
        "quantity": 2.0,
        "cost_price": 30.0,
        "min_stock": 1.0,
    }
    fields.update(overrides)
    return Product(**fields)


@pytest.fixture
def mock_catalog():
    return AsyncMock(spec=CatalogService)


@pytest.fixture
def mock_processor():
    return AsyncMock(spec=MovementProcessor)


@pytest.fixture
async def client(mock_catalog, mock_processor):
    app.dependency_overrides[get_catalog] = lambda: mock_catalog
    app.dependency_overrides[get_processor] = lambda: mock_processor
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_catalog, None)
    app.dependency_overrides.pop(get_processor, None)


class TestProductsAPI:
    async def test_list(self, client: AsyncClient, mock_catalog):
        mock_catalog.list_products.return_value = [_product()]

        response = await client.get(
            "/api/products", params={"search": "liquida", "low_stock": "true"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["products"][0]["unit_label"] == "kg"
        assert data["products"][0]["stock_value"] == 60.0
        filters = mock_catalog.list_products.await_args.args[0]
        assert filters.search == "liquida"
        assert filters.low_stock is True
        assert filters.accent_insensitive is True

    async def test_create(self, client: AsyncClient, mock_catalog):
        mock_catalog.create_product.return_value = _product(quantity=0)

        response = await client.post(
            "/api/products",
            json={"name": "Cera Líquida", "unit_type": "weight", "cost_price": 30},
        )

        assert response.status_code == 201
        assert response.json()["sku"].startswith("EST-")
        kwargs = mock_catalog.create_product.await_args.kwargs
        assert kwargs["unit_type"] is UnitType.WEIGHT
        assert kwargs["min_stock"] == 0

    async def test_create_requires_name(self, client: AsyncClient, mock_catalog):
        response = await client.post("/api/products", json={"name": ""})

        assert response.status_code == 422
        mock_catalog.create_product.assert_not_awaited()

    async def test_create_ignores_quantity(self, client: AsyncClient, mock_catalog):
        """Quantity is not part of the create body; stock starts at zero."""
        mock_catalog.create_product.return_value = _product(quantity=0)

        await client.post("/api/products", json={"name": "Cera", "quantity": 50})

        assert "quantity" not in mock_catalog.create_product.await_args.kwargs

    async def test_get_missing(self, client: AsyncClient, mock_catalog):
        mock_catalog.get_product.side_effect = ProductNotFoundError(7)

        response = await client.get("/api/products/7")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"

    async def test_update_sends_only_given_fields(self, client: AsyncClient, mock_catalog):
        mock_catalog.update_product.return_value = _product(min_stock=5)

        response = await client.put("/api/products/1", json={"min_stock": 5})

        assert response.status_code == 200
        mock_catalog.update_product.assert_awaited_once_with(1, {"min_stock": 5})

    async def test_update_invalid(self, client: AsyncClient, mock_catalog):
        mock_catalog.update_product.side_effect = InvalidInputError("name", "is required", " ")

        response = await client.put("/api/products/1", json={"name": " "})

        assert response.status_code == 400

    async def test_toggle_active(self, client: AsyncClient, mock_catalog):
        mock_catalog.toggle_active.return_value = _product(is_active=False)

        response = await client.patch("/api/products/1/toggle-active")

        assert response.status_code == 200
        assert response.json()["is_active"] is False

    async def test_delete(self, client: AsyncClient, mock_catalog):
        response = await client.delete("/api/products/1")

        assert response.status_code == 204
        mock_catalog.delete_product.assert_awaited_once_with(1)

    async def test_ledger_check(self, client: AsyncClient, mock_processor):
        mock_processor.verify_product_ledger.return_value = LedgerCheck(
            product_id=1,
            stored_quantity=2.0,
            stored_cost_price=30.0,
            replayed_quantity=2.0,
            replayed_cost_price=30.0,
            entries_replayed=1,
            quantity_matches=True,
            cost_matches=True,
        )

        response = await client.get("/api/products/1/ledger")

        assert response.status_code == 200
        assert response.json()["consistent"] is True
