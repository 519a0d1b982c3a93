"""SQLite implementation of the product ledger and movement log."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from src.config import get_logger
from src.core.entities.movement import Movement, MovementFilter, MovementRecord
from src.core.entities.product import Product, utc_now
from src.core.exceptions import DatabaseError, StorageError
from src.core.interfaces.inventory_store import IInventoryStore
from src.core.services.movement_query import movement_window
from src.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.locks import KeyedLock, product_locks
from src.infrastructure.storage.sqlite.sql_helpers import (
    MOVEMENT_RECORD_COLUMNS,
    PRODUCT_COLUMNS,
    row_to_movement,
    row_to_product,
    row_to_record,
    to_db_time,
)

logger = get_logger(__name__)


class SQLiteInventoryStore(IInventoryStore):
    """
    SQLite product ledger and movement log.

    An unbound store takes a pooled connection per call and commits each
    write on its own. ``transaction()`` yields a store bound to a single
    connection inside BEGIN IMMEDIATE; its writes commit together when the
    block exits.
    """

    def __init__(
        self,
        connection: aiosqlite.Connection | None = None,
        locks: KeyedLock | None = None,
    ):
        self._conn = connection
        self._locks = product_locks if locks is None else locks

    @asynccontextmanager
    async def transaction(self, product_id: int) -> AsyncIterator["SQLiteInventoryStore"]:
        if self._conn is not None:
            raise StorageError(
                "Inventory transactions cannot be nested",
                code="NESTED_TRANSACTION",
                details={"product_id": product_id},
            )
        async with self._locks.hold(product_id):
            pool = await get_pool()
            async with pool.transaction(immediate=True) as conn:
                yield SQLiteInventoryStore(connection=conn, locks=self._locks)

    @asynccontextmanager
    async def _reader(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
        else:
            async with get_connection() as conn:
                yield conn

    @asynccontextmanager
    async def _writer(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
        else:
            async with get_transaction() as conn:
                yield conn

    # Product ledger

    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID."""
        async with self._reader() as conn:
            cursor = await conn.execute(
                f"SELECT {PRODUCT_COLUMNS} WHERE p.id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_product(row)

    async def update_product_stock(
        self,
        product_id: int,
        quantity: float,
        cost_price: float | None = None,
    ) -> None:
        """Set product balance."""
        now = to_db_time(utc_now())
        try:
            async with self._writer() as conn:
                if cost_price is None:
                    await conn.execute(
                        "UPDATE products SET quantity = ?, updated_at = ? WHERE id = ?",
                        (quantity, now, product_id),
                    )
                else:
                    await conn.execute(
                        """
                        UPDATE products SET quantity = ?, cost_price = ?, updated_at = ?
                        WHERE id = ?
                        """,
                        (quantity, cost_price, now, product_id),
                    )
        except aiosqlite.IntegrityError as e:
            # CHECK (quantity >= 0) is the last line of defence
            raise DatabaseError("update_product_stock", str(e)) from e

        logger.debug(
            "product_stock_updated",
            product_id=product_id,
            quantity=quantity,
            cost_price=cost_price,
        )

    # Movement log

    async def insert_movement(self, movement: Movement) -> Movement:
        """Persist a new movement."""
        try:
            async with self._writer() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO movements (
                        product_id, type, quantity, unit_cost,
                        notes, vendor_id, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        movement.product_id,
                        movement.type.value,
                        movement.quantity,
                        movement.unit_cost,
                        movement.notes,
                        movement.vendor_id,
                        to_db_time(movement.created_at),
                    ),
                )
                saved = movement.model_copy(update={"id": cursor.lastrowid})
        except aiosqlite.IntegrityError as e:
            raise DatabaseError("insert_movement", str(e)) from e

        logger.debug(
            "movement_inserted",
            movement_id=saved.id,
            product_id=saved.product_id,
            type=saved.type.value,
            quantity=saved.quantity,
        )
        return saved

    async def get_movement(self, movement_id: int) -> Movement | None:
        """Get movement by ID."""
        async with self._reader() as conn:
            cursor = await conn.execute(
                "SELECT * FROM movements WHERE id = ?", (movement_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_movement(row)

    async def update_movement(self, movement: Movement) -> Movement:
        """Persist quantity, unit_cost and notes."""
        try:
            async with self._writer() as conn:
                await conn.execute(
                    """
                    UPDATE movements SET quantity = ?, unit_cost = ?, notes = ?
                    WHERE id = ?
                    """,
                    (movement.quantity, movement.unit_cost, movement.notes, movement.id),
                )
        except aiosqlite.IntegrityError as e:
            raise DatabaseError("update_movement", str(e)) from e
        logger.debug("movement_updated", movement_id=movement.id)
        return movement

    async def delete_movement(self, movement_id: int) -> bool:
        """Delete movement row."""
        async with self._writer() as conn:
            cursor = await conn.execute(
                "DELETE FROM movements WHERE id = ?", (movement_id,)
            )
            deleted = cursor.rowcount > 0
        logger.debug("movement_row_deleted", movement_id=movement_id, deleted=deleted)
        return deleted

    async def get_movement_record(self, movement_id: int) -> MovementRecord | None:
        """Get movement joined with product and vendor."""
        async with self._reader() as conn:
            cursor = await conn.execute(
                f"SELECT {MOVEMENT_RECORD_COLUMNS} WHERE m.id = ?", (movement_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_record(row)

    async def list_movements(self, filters: MovementFilter) -> list[MovementRecord]:
        """List movements matching the filter, newest first."""
        since, until = movement_window(filters)

        clauses: list[str] = []
        params: list = []
        if filters.product_id is not None:
            clauses.append("m.product_id = ?")
            params.append(filters.product_id)
        if filters.type is not None:
            clauses.append("m.type = ?")
            params.append(filters.type.value)
        if filters.vendor_id is not None:
            clauses.append("m.vendor_id = ?")
            params.append(filters.vendor_id)
        if since is not None:
            clauses.append("m.created_at >= ?")
            params.append(to_db_time(since))
        if until is not None:
            clauses.append("m.created_at < ?")
            params.append(to_db_time(until))

        query = f"SELECT {MOVEMENT_RECORD_COLUMNS}"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY m.created_at DESC, m.id DESC"
        if filters.limit is not None:
            query += " LIMIT ?"
            params.append(filters.limit)

        async with self._reader() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [row_to_record(row) for row in rows]

    async def list_product_movements(self, product_id: int) -> list[Movement]:
        """Movements of a product, oldest first."""
        async with self._reader() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM movements
                WHERE product_id = ?
                ORDER BY created_at ASC, id ASC
                """,
                (product_id,),
            )
            rows = await cursor.fetchall()
            return [row_to_movement(row) for row in rows]

