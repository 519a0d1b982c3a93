"""Supplier and vendor reference entities.

A supplier is catalog-level ("where we usually buy this product"); a vendor
is the actual source recorded on an entry movement.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.entities.product import utc_now


class Supplier(BaseModel):
    """Catalog supplier linked from products."""

    id: int | None = None
    name: str
    contact: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    created_at: datetime = Field(default_factory=utc_now)


class Vendor(BaseModel):
    """Vendor an entry movement was purchased from."""

    id: int | None = None
    name: str
    phone: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
