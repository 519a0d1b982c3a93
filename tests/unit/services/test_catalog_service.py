"""Tests for CatalogService and SKU generation."""

import random
from unittest.mock import AsyncMock

import pytest

from src.core.entities import Product, Supplier, UnitType, Vendor
from src.core.exceptions import (
    DuplicateSkuError,
    InvalidInputError,
    ProductNotFoundError,
    SupplierNotFoundError,
    VendorNotFoundError,
)
from src.core.services.catalog_service import CatalogService, generate_sku, to_base36


class TestSkuGeneration:
    def test_to_base36(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "Z"
        assert to_base36(36) == "10"

    def test_to_base36_negative(self):
        with pytest.raises(ValueError):
            to_base36(-1)

    def test_sku_shape(self):
        sku = generate_sku("EST", now_ms=36**3, rng=random.Random(7))
        prefix, stamp, suffix = sku.split("-")
        assert prefix == "EST"
        assert stamp == "1000"
        assert len(suffix) == 3
        assert suffix.isalnum() and suffix.upper() == suffix

    def test_sku_is_random(self):
        skus = {generate_sku(now_ms=1) for _ in range(20)}
        assert len(skus) > 1


@pytest.fixture
def product_store():
    store = AsyncMock()
    store.get_by_sku.return_value = None

    async def create_product(product):
        return product.model_copy(update={"id": 1})

    async def update_product(product_id, changes):
        stored = Product(id=product_id, sku="EST-1", name="Cera", quantity=4, cost_price=6.0)
        return stored.model_copy(update=changes)

    store.create_product.side_effect = create_product
    store.update_product.side_effect = update_product
    return store


@pytest.fixture
def supplier_store():
    return AsyncMock()


@pytest.fixture
def vendor_store():
    return AsyncMock()


@pytest.fixture
def service(product_store, supplier_store, vendor_store):
    return CatalogService(product_store, supplier_store, vendor_store, sku_prefix="EST")


class TestProducts:
    async def test_create_product(self, service, product_store):
        product = await service.create_product(
            "  Cera Líquida  ", unit_type="weight", cost_price=30.0, min_stock=1
        )

        assert product.id == 1
        assert product.name == "Cera Líquida"
        assert product.sku.startswith("EST-")
        assert product.quantity == 0.0
        assert product.unit_type is UnitType.WEIGHT

    async def test_create_requires_name(self, service, product_store):
        with pytest.raises(InvalidInputError):
            await service.create_product("   ")
        product_store.create_product.assert_not_awaited()

    async def test_create_rejects_negative_cost(self, service):
        with pytest.raises(InvalidInputError):
            await service.create_product("Cera", cost_price=-1)

    async def test_create_checks_supplier(self, service, supplier_store):
        supplier_store.get_supplier.return_value = None
        with pytest.raises(SupplierNotFoundError):
            await service.create_product("Cera", supplier_id=5)

    async def test_create_retries_on_sku_collision(self, service, product_store):
        taken = Product(id=9, sku="EST-X-AAA", name="Outro")
        product_store.get_by_sku.side_effect = [taken, None]

        await service.create_product("Cera")

        assert product_store.get_by_sku.await_count == 2
        product_store.create_product.assert_awaited_once()

    async def test_create_gives_up_after_collisions(self, service, product_store):
        product_store.get_by_sku.return_value = Product(id=9, sku="EST-X-AAA", name="Outro")

        with pytest.raises(DuplicateSkuError):
            await service.create_product("Cera")
        assert product_store.get_by_sku.await_count == CatalogService.SKU_ATTEMPTS

    async def test_update_product(self, service, product_store):
        updated = await service.update_product(1, {"name": "Cera Premium", "min_stock": 2})

        assert updated.name == "Cera Premium"
        assert updated.min_stock == 2
        assert updated.quantity == 4

    async def test_update_writes_only_given_fields(self, service, product_store):
        """A rename leaves cost_price to whatever the ledger stored."""
        updated = await service.update_product(1, {"name": " Cera Premium "})

        product_store.update_product.assert_awaited_once_with(1, {"name": "Cera Premium"})
        assert updated.cost_price == 6.0

    async def test_update_normalizes_values(self, service, product_store):
        await service.update_product(1, {"unit_type": "weight", "cost_price": 7})

        _, changes = product_store.update_product.await_args.args
        assert changes == {"unit_type": UnitType.WEIGHT, "cost_price": 7.0}

    @pytest.mark.parametrize("field", ["quantity", "sku"])
    async def test_update_rejects_ledger_fields(self, service, product_store, field):
        with pytest.raises(InvalidInputError):
            await service.update_product(1, {field: 1})
        product_store.update_product.assert_not_awaited()

    async def test_update_missing(self, service, product_store):
        product_store.update_product.side_effect = None
        product_store.update_product.return_value = None
        with pytest.raises(ProductNotFoundError):
            await service.update_product(1, {"name": "x"})

    async def test_toggle_active(self, service, product_store):
        product_store.get_product.return_value = Product(id=1, sku="EST-1", name="Cera")

        toggled = await service.toggle_active(1)

        assert toggled.is_active is False
        product_store.set_active.assert_awaited_once_with(1, False)

    async def test_delete_missing(self, service, product_store):
        product_store.delete_product.return_value = False
        with pytest.raises(ProductNotFoundError):
            await service.delete_product(1)


class TestPartners:
    async def test_create_supplier(self, service, supplier_store):
        supplier_store.create_supplier.side_effect = lambda s: s.model_copy(update={"id": 2})

        supplier = await service.create_supplier(name="Vonixx", email="a@b.test")

        assert supplier.id == 2
        assert supplier.email == "a@b.test"

    async def test_update_supplier_unknown_field(self, service):
        with pytest.raises(InvalidInputError):
            await service.update_supplier(1, {"website": "x"})

    async def test_delete_supplier_missing(self, service, supplier_store):
        supplier_store.delete_supplier.return_value = False
        with pytest.raises(SupplierNotFoundError):
            await service.delete_supplier(1)

    async def test_create_vendor(self, service, vendor_store):
        vendor_store.create_vendor.side_effect = lambda v: v.model_copy(update={"id": 3})

        vendor = await service.create_vendor("Loja do Polimento", phone="")

        assert vendor.id == 3
        assert vendor.phone is None

    async def test_update_vendor(self, service, vendor_store):
        vendor_store.get_vendor.return_value = Vendor(id=3, name="Loja")
        vendor_store.update_vendor.side_effect = lambda v: v

        vendor = await service.update_vendor(3, {"phone": "11 4000-0000"})

        assert vendor.phone == "11 4000-0000"
        assert vendor.name == "Loja"

    async def test_vendor_purchases_missing_vendor(self, service, vendor_store):
        vendor_store.get_vendor.return_value = None
        with pytest.raises(VendorNotFoundError):
            await service.vendor_purchases(3)
        vendor_store.list_purchases.assert_not_awaited()

    async def test_list_suppliers_blank_search(self, service, supplier_store):
        supplier_store.list_suppliers.return_value = [Supplier(id=1, name="Vonixx")]

        await service.list_suppliers("")

        supplier_store.list_suppliers.assert_awaited_once_with(None)
