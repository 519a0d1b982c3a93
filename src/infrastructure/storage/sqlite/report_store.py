"""SQLite aggregate queries for reports and the dashboard."""

from datetime import datetime

from src.config import get_logger
from src.core.entities.movement import MovementRecord, MovementType
from src.core.entities.product import Product
from src.core.entities.report import InventorySummary, MonthlyExpense, ProductActivity
from src.core.interfaces.report_store import IReportStore
from src.infrastructure.storage.sqlite.connection import get_connection
from src.infrastructure.storage.sqlite.sql_helpers import (
    MOVEMENT_RECORD_COLUMNS,
    PRODUCT_COLUMNS,
    row_to_product,
    row_to_record,
    to_db_time,
)

logger = get_logger(__name__)


class SQLiteReportStore(IReportStore):
    """Read-only report queries."""

    async def product_activity(self) -> list[ProductActivity]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT
                    p.*, s.name AS supplier_name,
                    totals.total_entries, totals.total_exits, totals.total_losses
                FROM products p
                LEFT JOIN suppliers s ON s.id = p.supplier_id
                LEFT JOIN (
                    SELECT
                        product_id,
                        SUM(CASE WHEN type = 'entry' THEN quantity ELSE 0 END) AS total_entries,
                        SUM(CASE WHEN type = 'exit' THEN quantity ELSE 0 END) AS total_exits,
                        SUM(CASE WHEN type = 'loss' THEN quantity ELSE 0 END) AS total_losses
                    FROM movements
                    GROUP BY product_id
                ) totals ON totals.product_id = p.id
                ORDER BY p.name COLLATE NOCASE, p.id
                """
            )
            rows = await cursor.fetchall()

        return [
            ProductActivity(
                product=row_to_product(row),
                total_entries=row["total_entries"] or 0.0,
                total_exits=row["total_exits"] or 0.0,
                total_losses=row["total_losses"] or 0.0,
            )
            for row in rows
        ]

    async def inventory_summary(self) -> InventorySummary:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT
                    COUNT(*) AS total_products,
                    COALESCE(SUM(quantity * cost_price), 0) AS total_value,
                    COALESCE(SUM(CASE WHEN quantity <= min_stock THEN 1 ELSE 0 END), 0)
                        AS low_stock_count
                FROM products
                """
            )
            row = await cursor.fetchone()

        return InventorySummary(
            total_products=row["total_products"],
            total_value=row["total_value"],
            low_stock_count=row["low_stock_count"],
        )

    async def monthly_expenses(self, months: int) -> list[MonthlyExpense]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM (
                    SELECT
                        substr(created_at, 1, 7) AS month,
                        SUM(CASE WHEN type = 'entry' THEN quantity * unit_cost ELSE 0 END)
                            AS entries_value,
                        SUM(CASE WHEN type = 'exit' THEN quantity * unit_cost ELSE 0 END)
                            AS exits_value,
                        SUM(CASE WHEN type = 'loss' THEN quantity * unit_cost ELSE 0 END)
                            AS losses_value
                    FROM movements
                    GROUP BY month
                    ORDER BY month DESC
                    LIMIT ?
                )
                ORDER BY month ASC
                """,
                (months,),
            )
            rows = await cursor.fetchall()

        return [
            MonthlyExpense(
                month=row["month"],
                entries_value=row["entries_value"] or 0.0,
                exits_value=row["exits_value"] or 0.0,
                losses_value=row["losses_value"] or 0.0,
            )
            for row in rows
        ]

    async def low_stock_products(self, limit: int) -> list[Product]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT {PRODUCT_COLUMNS}
                WHERE p.quantity <= p.min_stock AND p.is_active = 1
                ORDER BY p.quantity ASC, p.name COLLATE NOCASE
                LIMIT ?
                """,
                (limit,),
            )
            rows = await cursor.fetchall()
            return [row_to_product(row) for row in rows]

    async def recent_movements(self, limit: int) -> list[MovementRecord]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT {MOVEMENT_RECORD_COLUMNS}
                ORDER BY m.created_at DESC, m.id DESC
                LIMIT ?
                """,
                (limit,),
            )
            rows = await cursor.fetchall()
            return [row_to_record(row) for row in rows]

    async def count_movements_since(self, since: datetime) -> dict[MovementType, int]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT type, COUNT(*) AS total
                FROM movements
                WHERE created_at >= ?
                GROUP BY type
                """,
                (to_db_time(since),),
            )
            rows = await cursor.fetchall()
            return {MovementType(row["type"]): row["total"] for row in rows}

    async def entry_value_between(self, start: datetime, end: datetime) -> float:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT COALESCE(SUM(quantity * unit_cost), 0) AS total
                FROM movements
                WHERE type = 'entry' AND created_at >= ? AND created_at < ?
                """,
                (to_db_time(start), to_db_time(end)),
            )
            row = await cursor.fetchone()
            return float(row["total"])
