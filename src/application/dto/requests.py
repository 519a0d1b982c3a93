"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation. They check shape and
types only: numeric ranges (quantity > 0, cost >= 0) belong to the core
services, so an out-of-range value answers INVALID_INPUT however it arrives.
"""

from pydantic import BaseModel, Field

from src.core.entities.product import UnitType


# --- Movements ---


class EntryRequest(BaseModel):
    """Stock coming in from a purchase."""

    product_id: int = Field(..., description="Product receiving the stock")
    quantity: float = Field(..., description="Quantity received", examples=[10, 2.5])
    unit_cost: float | None = Field(
        default=None,
        description="Purchase cost per unit; defaults to the product's current cost",
    )
    vendor_id: int | None = Field(default=None, description="Vendor the stock came from")
    notes: str | None = Field(default=None, max_length=1000)


class ExitRequest(BaseModel):
    """Stock leaving for use."""

    product_id: int
    quantity: float = Field(..., description="Quantity taken out")
    notes: str | None = Field(default=None, max_length=1000)


class LossRequest(BaseModel):
    """Stock lost, spilled or damaged."""

    product_id: int
    quantity: float = Field(..., description="Quantity lost")
    notes: str | None = Field(default=None, max_length=1000)


class ExitReturnRequest(BaseModel):
    """Stock taken out for a job, with part of it brought back.

    Only ``quantity_out - quantity_return`` is drawn from stock.
    """

    product_id: int
    quantity_out: float = Field(..., description="Quantity that left stock")
    quantity_return: float = Field(..., description="Quantity that came back unused")
    notes: str | None = Field(default=None, max_length=1000)


class EditMovementRequest(BaseModel):
    """Correction of a past movement. Omitted fields keep their value."""

    quantity: float | None = None
    unit_cost: float | None = None
    notes: str | None = Field(
        default=None,
        max_length=1000,
        description="Replacement notes; an empty string clears them",
    )


# --- Catalog ---


class ProductCreateRequest(BaseModel):
    """New product. SKU is generated and stock starts at zero."""

    name: str = Field(..., min_length=1, max_length=200, examples=["Cera de carnaúba"])
    description: str | None = Field(default=None, max_length=1000)
    unit_type: UnitType = Field(default=UnitType.UNIT)
    cost_price: float = 0.0
    min_stock: float = 0.0
    supplier_id: int | None = None


class ProductUpdateRequest(BaseModel):
    """Partial product update. SKU and quantity cannot be changed here."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    unit_type: UnitType | None = None
    cost_price: float | None = None
    min_stock: float | None = None
    supplier_id: int | None = None


class SupplierCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    contact: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=200)
    address: str | None = Field(default=None, max_length=500)


class SupplierUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    contact: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=200)
    address: str | None = Field(default=None, max_length=500)


class VendorCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: str | None = Field(default=None, max_length=50)


class VendorUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = Field(default=None, max_length=50)
