"""Abstract interface for report aggregation queries."""

from abc import ABC, abstractmethod
from datetime import datetime

from src.core.entities.movement import MovementRecord, MovementType
from src.core.entities.product import Product
from src.core.entities.report import InventorySummary, MonthlyExpense, ProductActivity


class IReportStore(ABC):
    """Read-only aggregate queries over products and movements."""

    @abstractmethod
    async def product_activity(self) -> list[ProductActivity]:
        """Every product with lifetime entry / exit / loss totals."""
        pass

    @abstractmethod
    async def inventory_summary(self) -> InventorySummary:
        """Product count, stock value and low-stock count."""
        pass

    @abstractmethod
    async def monthly_expenses(self, months: int) -> list[MonthlyExpense]:
        """Movement value per type for the latest ``months`` months that
        have movements, oldest first."""
        pass

    @abstractmethod
    async def low_stock_products(self, limit: int) -> list[Product]:
        """Products at or below min_stock, lowest quantity first."""
        pass

    @abstractmethod
    async def recent_movements(self, limit: int) -> list[MovementRecord]:
        """Most recent movements, newest first."""
        pass

    @abstractmethod
    async def count_movements_since(self, since: datetime) -> dict[MovementType, int]:
        """Number of movements per type created at or after ``since``."""
        pass

    @abstractmethod
    async def entry_value_between(self, start: datetime, end: datetime) -> float:
        """Sum of quantity * unit_cost for entries in [start, end)."""
        pass
