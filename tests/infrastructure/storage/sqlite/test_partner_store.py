"""Tests for SQLite supplier and vendor stores."""

from datetime import UTC, datetime, timedelta

from src.core.entities import Movement, MovementType, Supplier, Vendor


class TestSupplierStore:
    async def test_create_and_get(self, supplier_store, supplier):
        loaded = await supplier_store.get_supplier(supplier.id)
        assert loaded.name == "Vonixx Distribuidora"
        assert loaded.email == "vendas@vonixx.test"

    async def test_get_missing(self, supplier_store, sqlite_db):
        assert await supplier_store.get_supplier(404) is None

    async def test_list_search(self, supplier_store, supplier):
        await supplier_store.create_supplier(Supplier(name="Alcance Química", contact="Rita"))

        everyone = await supplier_store.list_suppliers()
        by_contact = await supplier_store.list_suppliers("rita")

        assert [s.name for s in everyone] == ["Alcance Química", "Vonixx Distribuidora"]
        assert [s.name for s in by_contact] == ["Alcance Química"]

    async def test_update(self, supplier_store, supplier):
        await supplier_store.update_supplier(supplier.model_copy(update={"phone": "11 3000-0000"}))
        assert (await supplier_store.get_supplier(supplier.id)).phone == "11 3000-0000"

    async def test_delete(self, supplier_store, supplier):
        assert await supplier_store.delete_supplier(supplier.id) is True
        assert await supplier_store.delete_supplier(supplier.id) is False


class TestVendorStore:
    async def test_list_search_by_phone(self, vendor_store, vendor):
        await vendor_store.create_vendor(Vendor(name="Mercado Livre"))

        found = await vendor_store.list_vendors("99999")

        assert [v.id for v in found] == [vendor.id]

    async def test_update_and_delete(self, vendor_store, vendor):
        await vendor_store.update_vendor(vendor.model_copy(update={"name": "Loja Nova"}))
        assert (await vendor_store.get_vendor(vendor.id)).name == "Loja Nova"

        assert await vendor_store.delete_vendor(vendor.id) is True
        assert await vendor_store.get_vendor(vendor.id) is None

    async def test_purchases_are_entries_newest_first(
        self, vendor_store, inventory_store, product_factory, vendor
    ):
        product = await product_factory("Cera")
        base = datetime(2024, 5, 1, tzinfo=UTC)
        older = await inventory_store.insert_movement(
            Movement(product_id=product.id, type=MovementType.ENTRY, quantity=1,
                     vendor_id=vendor.id, created_at=base)
        )
        newer = await inventory_store.insert_movement(
            Movement(product_id=product.id, type=MovementType.ENTRY, quantity=2,
                     vendor_id=vendor.id, created_at=base + timedelta(days=1))
        )
        await inventory_store.insert_movement(
            Movement(product_id=product.id, type=MovementType.EXIT, quantity=1)
        )

        purchases = await vendor_store.list_purchases(vendor.id)

        assert [p.id for p in purchases] == [newer.id, older.id]
        assert purchases[0].product_name == "Cera"

    async def test_vendor_delete_keeps_movements(
        self, vendor_store, inventory_store, product_factory, vendor
    ):
        product = await product_factory("Cera")
        movement = await inventory_store.insert_movement(
            Movement(product_id=product.id, type=MovementType.ENTRY, quantity=1, vendor_id=vendor.id)
        )

        await vendor_store.delete_vendor(vendor.id)

        assert (await inventory_store.get_movement(movement.id)).vendor_id is None
