"""Tests for SQLiteReportStore aggregates."""

from datetime import UTC, datetime

import pytest

from src.core.entities import Movement, MovementType


async def _add(store, product_id, movement_type, quantity, unit_cost, created_at):
    return await store.insert_movement(
        Movement(
            product_id=product_id,
            type=movement_type,
            quantity=quantity,
            unit_cost=unit_cost,
            created_at=created_at,
        )
    )


class TestProductActivity:
    async def test_totals_per_product(self, report_store, inventory_store, product_factory):
        cera = await product_factory("Cera", quantity=6, cost_price=5.0)
        idle = await product_factory("Aplicador")
        now = datetime.now(UTC)
        await _add(inventory_store, cera.id, MovementType.ENTRY, 10, 5.0, now)
        await _add(inventory_store, cera.id, MovementType.EXIT, 3, 5.0, now)
        await _add(inventory_store, cera.id, MovementType.LOSS, 1, 5.0, now)

        activity = await report_store.product_activity()

        assert [a.product.id for a in activity] == [idle.id, cera.id]
        assert activity[0].total_entries == 0
        assert activity[1].total_entries == 10
        assert activity[1].total_exits == 3
        assert activity[1].total_losses == 1


class TestSummary:
    async def test_empty_database(self, report_store, sqlite_db):
        summary = await report_store.inventory_summary()
        assert summary.total_products == 0
        assert summary.total_value == 0
        assert summary.low_stock_count == 0

    async def test_values(self, report_store, product_factory):
        await product_factory("Cera", quantity=2, cost_price=10.0, min_stock=5)
        await product_factory("Shampoo", quantity=4, cost_price=2.5)

        summary = await report_store.inventory_summary()

        assert summary.total_products == 2
        assert summary.total_value == pytest.approx(30.0)
        assert summary.low_stock_count == 1

    async def test_low_stock_products_active_only(self, report_store, product_store, product_factory):
        low = await product_factory("Cera", quantity=1, min_stock=3)
        lower = await product_factory("Selante", quantity=0, min_stock=1)
        hidden = await product_factory("Antigo", quantity=0, min_stock=1)
        await product_store.set_active(hidden.id, False)

        products = await report_store.low_stock_products(limit=10)

        assert [p.id for p in products] == [lower.id, low.id]


class TestMonthlyExpenses:
    @pytest.fixture
    async def history(self, inventory_store, product_factory):
        product = await product_factory("Cera")
        for month, value in [(1, 100.0), (2, 50.0), (3, 80.0)]:
            moment = datetime(2024, month, 10, tzinfo=UTC)
            await _add(inventory_store, product.id, MovementType.ENTRY, 1, value, moment)
        await _add(
            inventory_store, product.id, MovementType.EXIT, 2, 10.0, datetime(2024, 3, 11, tzinfo=UTC)
        )
        await _add(
            inventory_store, product.id, MovementType.LOSS, 1, 10.0, datetime(2024, 3, 12, tzinfo=UTC)
        )
        return product

    async def test_latest_months_ascending(self, report_store, history):
        rows = await report_store.monthly_expenses(2)

        assert [r.month for r in rows] == ["2024-02", "2024-03"]
        assert rows[1].entries_value == 80.0
        assert rows[1].exits_value == 20.0
        assert rows[1].losses_value == 10.0

    async def test_entry_value_half_open(self, report_store, history):
        march = await report_store.entry_value_between(
            datetime(2024, 3, 1, tzinfo=UTC), datetime(2024, 4, 1, tzinfo=UTC)
        )
        before_march = await report_store.entry_value_between(
            datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 3, 1, tzinfo=UTC)
        )
        assert march == 80.0
        assert before_march == 150.0


class TestRecentAndCounts:
    async def test_recent_movements(self, report_store, inventory_store, product_factory):
        product = await product_factory("Cera")
        first = await _add(
            inventory_store, product.id, MovementType.ENTRY, 1, 1.0, datetime(2024, 1, 1, tzinfo=UTC)
        )
        second = await _add(
            inventory_store, product.id, MovementType.ENTRY, 1, 1.0, datetime(2024, 1, 2, tzinfo=UTC)
        )

        recent = await report_store.recent_movements(limit=1)

        assert [r.id for r in recent] == [second.id]
        assert first.id != second.id

    async def test_count_since(self, report_store, inventory_store, product_factory):
        product = await product_factory("Cera")
        since = datetime(2024, 6, 1, tzinfo=UTC)
        await _add(inventory_store, product.id, MovementType.ENTRY, 1, 1.0, since)
        await _add(inventory_store, product.id, MovementType.ENTRY, 1, 1.0, datetime(2024, 6, 2, tzinfo=UTC))
        await _add(inventory_store, product.id, MovementType.LOSS, 1, 1.0, datetime(2024, 5, 31, tzinfo=UTC))

        counts = await report_store.count_movements_since(since)

        assert counts == {MovementType.ENTRY: 2}
