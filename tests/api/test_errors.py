"""Error envelope returned for domain and unexpected failures."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_reports
from src.api.main import app
from src.core.exceptions import DatabaseError
from src.core.services import ReportService


@pytest.fixture
def mock_reports():
    return AsyncMock(spec=ReportService)


@pytest.fixture
async def client(mock_reports):
    app.dependency_overrides[get_reports] = lambda: mock_reports
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_reports, None)


class TestErrorEnvelope:
    async def test_storage_error_is_500(self, client: AsyncClient, mock_reports):
        mock_reports.dashboard.side_effect = DatabaseError("dashboard", "disk I/O error")

        response = await client.get("/api/reports/dashboard")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "DATABASE_ERROR"
        assert body["path"] == "/api/reports/dashboard"
        assert body["hint"]

    async def test_unexpected_error_is_caught(self, client: AsyncClient, mock_reports):
        mock_reports.dashboard.side_effect = RuntimeError("boom")

        response = await client.get("/api/reports/dashboard")

        assert response.status_code == 500
        assert response.json()["error_code"] == "RuntimeError"

    async def test_value_error_is_400(self, client: AsyncClient, mock_reports):
        mock_reports.inventory_report.side_effect = ValueError("bad value")

        response = await client.get("/api/reports/inventory")

        assert response.status_code == 400
        assert response.json()["message"] == "bad value"

    async def test_validation_error_lists_fields(self, client: AsyncClient):
        response = await client.post("/api/movements/exit", json={"product_id": 1})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert "quantity" in body["detail"]
