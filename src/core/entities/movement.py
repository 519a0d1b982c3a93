"""Stock movement entities."""

from datetime import UTC, date, datetime, time, timedelta
from enum import Enum

from pydantic import BaseModel, Field

from src.core.entities.product import UnitType, utc_now


class MovementType(str, Enum):
    """Types of stock movements.

    Exit-with-return is not a separate type: it is stored as an EXIT of the
    consumed quantity.
    """

    ENTRY = "entry"
    EXIT = "exit"
    LOSS = "loss"


class Movement(BaseModel):
    """A single stock-affecting event against one product."""

    id: int | None = None
    product_id: int  # FK → products.id, cascade delete
    type: MovementType
    quantity: float = Field(gt=0)
    unit_cost: float = Field(default=0.0, ge=0)  # snapshot at creation time
    notes: str | None = None
    vendor_id: int | None = None  # weak ref, entries only
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def total_value(self) -> float:
        return self.quantity * self.unit_cost


class MovementRecord(Movement):
    """Movement joined with the product (and vendor) it belongs to."""

    product_name: str | None = None
    product_sku: str | None = None
    product_unit_type: UnitType | None = None
    vendor_name: str | None = None


_PERIOD_ALIASES = {
    "daily": "today",
    "weekly": "7d",
    "biweekly": "14d",
    "monthly": "30d",
}

_PERIOD_DAYS = {"7d": 7, "14d": 14, "30d": 30}


class MovementPeriod(str, Enum):
    """Relative time windows for movement listings."""

    TODAY = "today"
    LAST_7_DAYS = "7d"
    LAST_14_DAYS = "14d"
    LAST_30_DAYS = "30d"

    @classmethod
    def parse(cls, value: str) -> "MovementPeriod":
        """Parse a period, accepting daily/weekly/biweekly/monthly aliases."""
        key = value.strip().lower()
        return cls(_PERIOD_ALIASES.get(key, key))

    def since(self, now: datetime | None = None) -> datetime:
        """Start of the window ending at ``now`` (UTC)."""
        now = now or datetime.now(UTC)
        if self is MovementPeriod.TODAY:
            return datetime.combine(now.date(), time.min, tzinfo=UTC)
        return now - timedelta(days=_PERIOD_DAYS[self.value])


class MovementFilter(BaseModel):
    """Predicates for movement listing.

    A period takes precedence over an explicit date range. Dates in the
    range are inclusive on both ends.
    """

    product_id: int | None = None
    type: MovementType | None = None
    vendor_id: int | None = None
    period: MovementPeriod | None = None
    start_date: date | None = None
    end_date: date | None = None
    limit: int | None = Field(default=None, gt=0)
