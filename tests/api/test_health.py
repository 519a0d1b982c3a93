"""API tests for health endpoints and request middleware."""

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.main import app


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealthAPI:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["uptime_seconds"] >= 0

    async def test_root_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.json()["status"] == "healthy"

    async def test_db_health(self, client: AsyncClient, sqlite_db):
        response = await client.get("/api/health/db")

        assert response.status_code == 200
        database = response.json()["database"]
        assert database["name"] == "sqlite"
        assert database["available"] is True
        assert database["schema_version"] == "001"

    async def test_request_id_headers(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert len(response.headers["X-Request-ID"]) == 8
        assert "X-Response-Time" in response.headers

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/nope")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    async def test_request_id_is_propagated(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"X-Request-ID": "trace-42"})

        assert response.headers["X-Request-ID"] == "trace-42"
