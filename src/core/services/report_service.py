"""
Reporting service.

Read-only views derived from the product ledger and movement log:
inventory summary, monthly expenses, and the dashboard.
"""

from datetime import UTC, datetime, time

from src.config import get_logger
from src.core.entities.movement import MovementType
from src.core.entities.report import (
    Dashboard,
    ExpensesReport,
    InventoryReport,
    InventorySummary,
    MonthComparison,
    TodayMovementCounts,
)
from src.core.interfaces.report_store import IReportStore
from src.core.services.stock_ledger import COST_DECIMALS, round_half_up

logger = get_logger(__name__)


def month_start(moment: datetime, months_back: int = 0) -> datetime:
    """First instant (UTC) of the month ``months_back`` months before ``moment``."""
    index = moment.year * 12 + (moment.month - 1) - months_back
    year, month = divmod(index, 12)
    return datetime(year, month + 1, 1, tzinfo=UTC)


def month_comparison(this_month: float, last_month: float) -> MonthComparison:
    """Difference and percentage change; percentage is 0 when last month is 0."""
    difference = round_half_up(this_month - last_month, COST_DECIMALS)
    percentage = round_half_up(difference / last_month * 100, 1) if last_month else 0.0
    return MonthComparison(
        this_month=this_month,
        last_month=last_month,
        difference=difference,
        percentage=percentage,
    )


class ReportService:
    """Aggregates report views from an injected report store."""

    def __init__(
        self,
        report_store: IReportStore,
        *,
        low_stock_limit: int = 10,
        recent_movements_limit: int = 10,
        expense_months: int = 12,
        cost_decimals: int = COST_DECIMALS,
    ):
        self._store = report_store
        self._low_stock_limit = low_stock_limit
        self._recent_limit = recent_movements_limit
        self._expense_months = expense_months
        self._cost_decimals = cost_decimals

    async def inventory_report(self) -> InventoryReport:
        """Every product with movement totals, plus a value summary."""
        activity = await self._store.product_activity()
        total_value = sum(row.product.stock_value for row in activity)
        summary = InventorySummary(
            total_products=len(activity),
            total_value=round_half_up(total_value, self._cost_decimals),
            low_stock_count=sum(1 for row in activity if row.product.is_low_stock),
        )
        return InventoryReport(products=activity, summary=summary)

    async def expenses_report(self, months: int | None = None) -> ExpensesReport:
        """Entry / exit / loss value per month with monthly averages."""
        rows = await self._store.monthly_expenses(months or self._expense_months)
        if not rows:
            return ExpensesReport()
        return ExpensesReport(
            months=rows,
            average_entries=round_half_up(
                sum(r.entries_value for r in rows) / len(rows), self._cost_decimals
            ),
            average_exits=round_half_up(
                sum(r.exits_value for r in rows) / len(rows), self._cost_decimals
            ),
        )

    async def dashboard(self, now: datetime | None = None) -> Dashboard:
        now = now or datetime.now(UTC)
        today_start = datetime.combine(now.date(), time.min, tzinfo=UTC)
        this_month_start = month_start(now)
        last_month_start = month_start(now, months_back=1)
        next_month_start = month_start(now, months_back=-1)

        summary = await self._store.inventory_summary()
        counts = await self._store.count_movements_since(today_start)
        this_month = await self._store.entry_value_between(this_month_start, next_month_start)
        last_month = await self._store.entry_value_between(last_month_start, this_month_start)

        dashboard = Dashboard(
            total_products=summary.total_products,
            stock_value=round_half_up(summary.total_value, self._cost_decimals),
            low_stock_products=await self._store.low_stock_products(self._low_stock_limit),
            recent_movements=await self._store.recent_movements(self._recent_limit),
            today=TodayMovementCounts(
                entries=counts.get(MovementType.ENTRY, 0),
                exits=counts.get(MovementType.EXIT, 0),
                losses=counts.get(MovementType.LOSS, 0),
            ),
            comparison=month_comparison(
                round_half_up(this_month, self._cost_decimals),
                round_half_up(last_month, self._cost_decimals),
            ),
        )
        logger.debug(
            "dashboard_built",
            total_products=dashboard.total_products,
            low_stock=len(dashboard.low_stock_products),
        )
        return dashboard
