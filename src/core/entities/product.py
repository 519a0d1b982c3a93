"""Product catalog entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Timezone-aware current time used for every stored timestamp."""
    return datetime.now(UTC)


class UnitType(str, Enum):
    """How a product is counted."""

    UNIT = "unit"
    WEIGHT = "weight"

    @property
    def label(self) -> str:
        """Short label used in human-readable notes."""
        return "kg" if self is UnitType.WEIGHT else "un"


class Product(BaseModel):
    """A stocked product and its running balance.

    quantity and cost_price are a projection of the movement log: they are
    only written by the movement processor (and cost_price by direct edits).
    """

    id: int | None = None
    sku: str
    name: str
    description: str | None = None
    unit_type: UnitType = UnitType.UNIT
    quantity: float = Field(default=0.0, ge=0)
    cost_price: float = Field(default=0.0, ge=0)  # weighted average
    min_stock: float = Field(default=0.0, ge=0)
    supplier_id: int | None = None  # weak ref, SET NULL on supplier delete
    supplier_name: str | None = None  # joined on read
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def stock_value(self) -> float:
        """Value of stock on hand = quantity * cost_price."""
        return self.quantity * self.cost_price

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_stock


class ProductFilter(BaseModel):
    """Predicates for product listing. All are ANDed together."""

    search: str | None = None  # substring over name / sku / description
    supplier_id: int | None = None
    low_stock: bool = False  # quantity <= min_stock
    active_only: bool = False
    accent_insensitive: bool = True
