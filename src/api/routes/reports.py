"""
Report endpoints: inventory valuation, monthly expenses, dashboard.
"""

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_reports
from src.application.dto.mappers import (
    to_dashboard_response,
    to_expenses_response,
    to_inventory_report_response,
)
from src.application.dto.responses import (
    DashboardResponse,
    ExpensesReportResponse,
    InventoryReportResponse,
)
from src.core.services import ReportService

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/inventory", response_model=InventoryReportResponse)
async def inventory_report(
    reports: ReportService = Depends(get_reports),
) -> InventoryReportResponse:
    """Every product with its entry / exit / loss totals and a value summary."""
    return to_inventory_report_response(await reports.inventory_report())


@router.get("/expenses", response_model=ExpensesReportResponse)
async def expenses_report(
    months: int | None = Query(default=None, ge=1, le=120, description="Months with activity to include"),
    reports: ReportService = Depends(get_reports),
) -> ExpensesReportResponse:
    """Movement value per month, oldest first, with monthly averages."""
    return to_expenses_response(await reports.expenses_report(months))


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    reports: ReportService = Depends(get_reports),
) -> DashboardResponse:
    return to_dashboard_response(await reports.dashboard())
