"""
Catalog service.

Product, supplier and vendor maintenance. Stock quantity is never written
here: it only changes through the movement processor.
"""

import random
import time
from typing import Any

from src.config import get_logger
from src.core.entities.movement import MovementRecord
from src.core.entities.partner import Supplier, Vendor
from src.core.entities.product import Product, ProductFilter, UnitType
from src.core.exceptions import (
    DuplicateSkuError,
    InvalidInputError,
    ProductNotFoundError,
    SupplierNotFoundError,
    VendorNotFoundError,
)
from src.core.interfaces.partner_store import ISupplierStore, IVendorStore
from src.core.interfaces.product_store import IProductStore
from src.core.services.stock_ledger import require_non_negative

logger = get_logger(__name__)

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Catalog fields a product update may touch
PRODUCT_EDITABLE_FIELDS = frozenset(
    {"name", "description", "unit_type", "cost_price", "min_stock", "supplier_id"}
)
SUPPLIER_EDITABLE_FIELDS = frozenset({"name", "contact", "phone", "email", "address"})
VENDOR_EDITABLE_FIELDS = frozenset({"name", "phone"})


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 encoding needs a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_sku(
    prefix: str = "EST",
    now_ms: int | None = None,
    rng: random.Random | None = None,
) -> str:
    """SKU like ``EST-M2K8F1QZ-7XA``: base36 epoch millis plus 3 random chars."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    rng = rng or random.SystemRandom()
    suffix = "".join(rng.choice(_BASE36) for _ in range(3))
    return f"{prefix}-{to_base36(now_ms)}-{suffix}"


def _clean_name(value: Any) -> str:
    name = (value or "").strip() if isinstance(value, str) else ""
    if not name:
        raise InvalidInputError("name", "is required", value)
    return name


class CatalogService:
    """Catalog maintenance for products, suppliers and vendors."""

    # Fresh SKUs colliding is unlikely; give up after a few tries
    SKU_ATTEMPTS = 3

    def __init__(
        self,
        product_store: IProductStore,
        supplier_store: ISupplierStore,
        vendor_store: IVendorStore,
        *,
        sku_prefix: str = "EST",
    ):
        self._products = product_store
        self._suppliers = supplier_store
        self._vendors = vendor_store
        self._sku_prefix = sku_prefix

    # Products

    async def list_products(self, filters: ProductFilter | None = None) -> list[Product]:
        return await self._products.list_products(filters or ProductFilter())

    async def get_product(self, product_id: int) -> Product:
        product = await self._products.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def create_product(
        self,
        name: str,
        description: str | None = None,
        unit_type: UnitType = UnitType.UNIT,
        cost_price: float = 0.0,
        min_stock: float = 0.0,
        supplier_id: int | None = None,
    ) -> Product:
        """Create a product with a generated SKU and zero stock."""
        name = _clean_name(name)
        cost_price = require_non_negative("cost_price", cost_price)
        min_stock = require_non_negative("min_stock", min_stock)
        await self._require_supplier(supplier_id)

        for attempt in range(1, self.SKU_ATTEMPTS + 1):
            sku = generate_sku(self._sku_prefix)
            if await self._products.get_by_sku(sku) is not None:
                logger.warning("sku_collision", sku=sku, attempt=attempt)
                continue
            product = await self._products.create_product(
                Product(
                    sku=sku,
                    name=name,
                    description=description or None,
                    unit_type=UnitType(unit_type),
                    quantity=0.0,
                    cost_price=cost_price,
                    min_stock=min_stock,
                    supplier_id=supplier_id,
                )
            )
            logger.info("product_created", product_id=product.id, sku=product.sku)
            return product

        raise DuplicateSkuError(sku)

    async def update_product(self, product_id: int, changes: dict[str, Any]) -> Product:
        """
        Apply a partial update of catalog fields.

        SKU and quantity are immutable here; unknown keys are rejected. Only
        the fields present in ``changes`` are written, so an omitted
        cost_price keeps whatever the ledger last stored.
        """
        unknown = set(changes) - PRODUCT_EDITABLE_FIELDS
        if unknown:
            field = sorted(unknown)[0]
            raise InvalidInputError(field, "cannot be changed through the catalog")

        changes = dict(changes)
        if "name" in changes:
            changes["name"] = _clean_name(changes["name"])
        if "cost_price" in changes:
            changes["cost_price"] = require_non_negative("cost_price", changes["cost_price"])
        if "min_stock" in changes:
            changes["min_stock"] = require_non_negative("min_stock", changes["min_stock"])
        if "unit_type" in changes:
            changes["unit_type"] = UnitType(changes["unit_type"])
        if changes.get("supplier_id") is not None:
            await self._require_supplier(changes["supplier_id"])

        updated = await self._products.update_product(product_id, changes)
        if updated is None:
            raise ProductNotFoundError(product_id)
        logger.info("product_updated", product_id=product_id, fields=sorted(changes))
        return updated

    async def toggle_active(self, product_id: int) -> Product:
        product = await self.get_product(product_id)
        await self._products.set_active(product_id, not product.is_active)
        logger.info("product_active_toggled", product_id=product_id, is_active=not product.is_active)
        return product.model_copy(update={"is_active": not product.is_active})

    async def delete_product(self, product_id: int) -> None:
        """Delete a product together with its movement history."""
        if not await self._products.delete_product(product_id):
            raise ProductNotFoundError(product_id)
        logger.info("product_deleted", product_id=product_id)

    # Suppliers

    async def list_suppliers(self, search: str | None = None) -> list[Supplier]:
        return await self._suppliers.list_suppliers(search or None)

    async def get_supplier(self, supplier_id: int) -> Supplier:
        supplier = await self._suppliers.get_supplier(supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(supplier_id)
        return supplier

    async def create_supplier(self, **fields: Any) -> Supplier:
        fields["name"] = _clean_name(fields.get("name"))
        supplier = await self._suppliers.create_supplier(Supplier(**fields))
        logger.info("supplier_created", supplier_id=supplier.id)
        return supplier

    async def update_supplier(self, supplier_id: int, changes: dict[str, Any]) -> Supplier:
        self._check_fields(changes, SUPPLIER_EDITABLE_FIELDS)
        supplier = await self.get_supplier(supplier_id)
        if "name" in changes:
            changes["name"] = _clean_name(changes["name"])
        updated = await self._suppliers.update_supplier(supplier.model_copy(update=changes))
        logger.info("supplier_updated", supplier_id=supplier_id)
        return updated

    async def delete_supplier(self, supplier_id: int) -> None:
        if not await self._suppliers.delete_supplier(supplier_id):
            raise SupplierNotFoundError(supplier_id)
        logger.info("supplier_deleted", supplier_id=supplier_id)

    # Vendors

    async def list_vendors(self, search: str | None = None) -> list[Vendor]:
        return await self._vendors.list_vendors(search or None)

    async def get_vendor(self, vendor_id: int) -> Vendor:
        vendor = await self._vendors.get_vendor(vendor_id)
        if vendor is None:
            raise VendorNotFoundError(vendor_id)
        return vendor

    async def create_vendor(self, name: str, phone: str | None = None) -> Vendor:
        vendor = await self._vendors.create_vendor(
            Vendor(name=_clean_name(name), phone=phone or None)
        )
        logger.info("vendor_created", vendor_id=vendor.id)
        return vendor

    async def update_vendor(self, vendor_id: int, changes: dict[str, Any]) -> Vendor:
        self._check_fields(changes, VENDOR_EDITABLE_FIELDS)
        vendor = await self.get_vendor(vendor_id)
        if "name" in changes:
            changes["name"] = _clean_name(changes["name"])
        updated = await self._vendors.update_vendor(vendor.model_copy(update=changes))
        logger.info("vendor_updated", vendor_id=vendor_id)
        return updated

    async def delete_vendor(self, vendor_id: int) -> None:
        if not await self._vendors.delete_vendor(vendor_id):
            raise VendorNotFoundError(vendor_id)
        logger.info("vendor_deleted", vendor_id=vendor_id)

    async def vendor_purchases(self, vendor_id: int) -> list[MovementRecord]:
        """Entry movements bought from a vendor, newest first."""
        await self.get_vendor(vendor_id)
        return await self._vendors.list_purchases(vendor_id)

    # Helpers

    async def _require_supplier(self, supplier_id: int | None) -> None:
        if supplier_id is not None:
            await self.get_supplier(supplier_id)

    @staticmethod
    def _check_fields(changes: dict[str, Any], allowed: frozenset[str]) -> None:
        unknown = set(changes) - allowed
        if unknown:
            raise InvalidInputError(sorted(unknown)[0], "is not an editable field")
