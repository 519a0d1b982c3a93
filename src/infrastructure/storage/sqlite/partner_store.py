"""SQLite implementations of supplier and vendor storage."""

import aiosqlite

from src.config import get_logger
from src.core.entities.movement import MovementRecord, MovementType
from src.core.entities.partner import Supplier, Vendor
from src.core.interfaces.partner_store import ISupplierStore, IVendorStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from src.infrastructure.storage.sqlite.sql_helpers import (
    MOVEMENT_RECORD_COLUMNS,
    from_db_time,
    like_pattern,
    row_to_record,
    to_db_time,
)

logger = get_logger(__name__)


class SQLiteSupplierStore(ISupplierStore):
    """SQLite supplier storage."""

    async def create_supplier(self, supplier: Supplier) -> Supplier:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO suppliers (name, contact, phone, email, address, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    supplier.name,
                    supplier.contact,
                    supplier.phone,
                    supplier.email,
                    supplier.address,
                    to_db_time(supplier.created_at),
                ),
            )
            created = supplier.model_copy(update={"id": cursor.lastrowid})
        logger.info("supplier_row_created", supplier_id=created.id)
        return created

    async def get_supplier(self, supplier_id: int) -> Supplier | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM suppliers WHERE id = ?", (supplier_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_supplier(row) if row else None

    async def list_suppliers(self, search: str | None = None) -> list[Supplier]:
        query = "SELECT * FROM suppliers"
        params: list = []
        if search:
            pattern = like_pattern(search.strip())
            query += (
                " WHERE name LIKE ? ESCAPE '\\'"
                " OR contact LIKE ? ESCAPE '\\'"
                " OR email LIKE ? ESCAPE '\\'"
            )
            params = [pattern, pattern, pattern]
        query += " ORDER BY name COLLATE NOCASE, id"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_supplier(row) for row in rows]

    async def update_supplier(self, supplier: Supplier) -> Supplier:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE suppliers SET name = ?, contact = ?, phone = ?, email = ?, address = ?
                WHERE id = ?
                """,
                (
                    supplier.name,
                    supplier.contact,
                    supplier.phone,
                    supplier.email,
                    supplier.address,
                    supplier.id,
                ),
            )
        return supplier

    async def delete_supplier(self, supplier_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM suppliers WHERE id = ?", (supplier_id,))
            return cursor.rowcount > 0

    @staticmethod
    def _row_to_supplier(row: aiosqlite.Row) -> Supplier:
        return Supplier(
            id=row["id"],
            name=row["name"],
            contact=row["contact"],
            phone=row["phone"],
            email=row["email"],
            address=row["address"],
            created_at=from_db_time(row["created_at"]),
        )


class SQLiteVendorStore(IVendorStore):
    """SQLite vendor storage."""

    async def create_vendor(self, vendor: Vendor) -> Vendor:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "INSERT INTO vendors (name, phone, created_at) VALUES (?, ?, ?)",
                (vendor.name, vendor.phone, to_db_time(vendor.created_at)),
            )
            created = vendor.model_copy(update={"id": cursor.lastrowid})
        logger.info("vendor_row_created", vendor_id=created.id)
        return created

    async def get_vendor(self, vendor_id: int) -> Vendor | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM vendors WHERE id = ?", (vendor_id,))
            row = await cursor.fetchone()
            return self._row_to_vendor(row) if row else None

    async def list_vendors(self, search: str | None = None) -> list[Vendor]:
        query = "SELECT * FROM vendors"
        params: list = []
        if search:
            pattern = like_pattern(search.strip())
            query += " WHERE name LIKE ? ESCAPE '\\' OR phone LIKE ? ESCAPE '\\'"
            params = [pattern, pattern]
        query += " ORDER BY name COLLATE NOCASE, id"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_vendor(row) for row in rows]

    async def update_vendor(self, vendor: Vendor) -> Vendor:
        async with get_transaction() as conn:
            await conn.execute(
                "UPDATE vendors SET name = ?, phone = ? WHERE id = ?",
                (vendor.name, vendor.phone, vendor.id),
            )
        return vendor

    async def delete_vendor(self, vendor_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM vendors WHERE id = ?", (vendor_id,))
            return cursor.rowcount > 0

    async def list_purchases(self, vendor_id: int) -> list[MovementRecord]:
        """Entry movements bought from this vendor, newest first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT {MOVEMENT_RECORD_COLUMNS}
                WHERE m.vendor_id = ? AND m.type = ?
                ORDER BY m.created_at DESC, m.id DESC
                """,
                (vendor_id, MovementType.ENTRY.value),
            )
            rows = await cursor.fetchall()
            return [row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_vendor(row: aiosqlite.Row) -> Vendor:
        return Vendor(
            id=row["id"],
            name=row["name"],
            phone=row["phone"],
            created_at=from_db_time(row["created_at"]),
        )
