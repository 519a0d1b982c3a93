"""End-to-end HTTP flow over a migrated SQLite database.

The ``sqlite_db`` fixture points the connection pool at a temporary
database, so the default service wiring is used unchanged.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.main import app


@pytest.fixture
async def client(sqlite_db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestStockFlow:
    async def test_full_flow(self, client: AsyncClient):
        """Catalog setup, movements, corrections and reports in one pass."""
        supplier = (await client.post("/api/suppliers", json={"name": "Vonixx"})).json()
        vendor = (await client.post("/api/vendors", json={"name": "Loja do Polimento"})).json()

        response = await client.post(
            "/api/products",
            json={
                "name": "Cera Líquida",
                "unit_type": "unit",
                "min_stock": 12,
                "supplier_id": supplier["id"],
            },
        )
        assert response.status_code == 201
        product = response.json()
        assert product["quantity"] == 0
        assert product["supplier_name"] == "Vonixx"
        product_id = product["id"]

        first = await client.post(
            "/api/movements/entry",
            json={"product_id": product_id, "quantity": 10, "unit_cost": 5.0, "vendor_id": vendor["id"]},
        )
        assert first.status_code == 201
        second = await client.post(
            "/api/movements/entry",
            json={"product_id": product_id, "quantity": 10, "unit_cost": 7.0},
        )
        assert second.json()["new_average_cost"] == 6.0

        assert (await client.post(
            "/api/movements/exit", json={"product_id": product_id, "quantity": 3}
        )).status_code == 201
        exit_return = await client.post(
            "/api/movements/exit-return",
            json={"product_id": product_id, "quantity_out": 10, "quantity_return": 3},
        )
        assert exit_return.json()["product"]["quantity"] == 10

        oversell = await client.post(
            "/api/movements/exit", json={"product_id": product_id, "quantity": 50}
        )
        assert oversell.status_code == 409

        listing = (await client.get("/api/movements", params={"product_id": product_id})).json()
        assert listing["total"] == 4
        assert listing["movements"][0]["id"] == exit_return.json()["movement"]["id"]

        edit = await client.put(
            f"/api/movements/{first.json()['movement']['id']}", json={"quantity": 4}
        )
        assert edit.status_code == 200
        assert edit.json()["inventory_change"] == -6
        assert edit.json()["new_inventory"] == 4

        delete = await client.delete(f"/api/movements/{exit_return.json()['movement']['id']}")
        assert delete.json()["new_inventory"] == 11

        stored = (await client.get(f"/api/products/{product_id}")).json()
        assert stored["quantity"] == 11
        assert stored["cost_price"] == 6.0
        assert stored["is_low_stock"] is True

        ledger = (await client.get(f"/api/products/{product_id}/ledger")).json()
        assert ledger["quantity_matches"] is True

        purchases = (await client.get(f"/api/vendors/{vendor['id']}/purchases")).json()
        assert purchases["total"] == 1
        assert purchases["movements"][0]["notes"] == "Fornecedor: Loja do Polimento"

        found = (await client.get("/api/products", params={"search": "liquida"})).json()
        assert [p["id"] for p in found["products"]] == [product_id]

        dashboard = (await client.get("/api/reports/dashboard")).json()
        assert dashboard["total_products"] == 1
        assert dashboard["stock_value"] == 66.0
        assert dashboard["low_stock_products"][0]["id"] == product_id
        assert dashboard["today"]["entries"] == 2

        inventory = (await client.get("/api/reports/inventory")).json()
        assert inventory["products"][0]["total_entries"] == 14

    async def test_delete_product_removes_history(self, client: AsyncClient):
        product = (await client.post("/api/products", json={"name": "Selante"})).json()
        await client.post(
            "/api/movements/entry",
            json={"product_id": product["id"], "quantity": 2, "unit_cost": 40.0},
        )

        response = await client.delete(f"/api/products/{product['id']}")

        assert response.status_code == 204
        assert (await client.get(f"/api/products/{product['id']}")).status_code == 404
        listing = (await client.get("/api/movements", params={"product_id": product["id"]})).json()
        assert listing["total"] == 0

    async def test_entry_for_missing_product(self, client: AsyncClient):
        response = await client.post(
            "/api/movements/entry", json={"product_id": 999, "quantity": 1, "unit_cost": 1.0}
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"
