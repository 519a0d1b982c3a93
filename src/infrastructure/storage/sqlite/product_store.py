"""SQLite implementation of the product catalog."""

from enum import Enum
from typing import Any

import aiosqlite

from src.config import get_logger
from src.core.entities.product import Product, ProductFilter, utc_now
from src.core.exceptions import DuplicateSkuError
from src.core.interfaces.product_store import IProductStore
from src.core.services.search_text import fold_text
from src.infrastructure.storage.sqlite.connection import get_connection, get_pool, get_transaction
from src.infrastructure.storage.sqlite.locks import KeyedLock, product_locks
from src.infrastructure.storage.sqlite.sql_helpers import (
    PRODUCT_COLUMNS,
    like_pattern,
    row_to_product,
    to_db_time,
)

logger = get_logger(__name__)

# Columns a catalog edit may write
CATALOG_COLUMNS = ("name", "description", "unit_type", "cost_price", "min_stock", "supplier_id")


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class SQLiteProductStore(IProductStore):
    """SQLite product catalog. Quantity is only ever set on insert (to zero)."""

    def __init__(self, locks: KeyedLock | None = None):
        self._locks = product_locks if locks is None else locks

    async def create_product(self, product: Product) -> Product:
        """Create a new product."""
        now = utc_now()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO products (
                        sku, name, description, unit_type, quantity, cost_price,
                        min_stock, supplier_id, is_active, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        product.sku,
                        product.name,
                        product.description,
                        product.unit_type.value,
                        product.quantity,
                        product.cost_price,
                        product.min_stock,
                        product.supplier_id,
                        int(product.is_active),
                        to_db_time(now),
                        to_db_time(now),
                    ),
                )
                product_id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            if "products.sku" in str(e):
                raise DuplicateSkuError(product.sku) from e
            raise

        logger.info("product_row_created", product_id=product_id, sku=product.sku)
        created = await self.get_product(product_id)  # type: ignore[arg-type]
        return created or product.model_copy(update={"id": product_id})

    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID, with supplier name."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT {PRODUCT_COLUMNS} WHERE p.id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            return row_to_product(row) if row else None

    async def get_by_sku(self, sku: str) -> Product | None:
        """Get product by SKU."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT {PRODUCT_COLUMNS} WHERE p.sku = ?", (sku,)
            )
            row = await cursor.fetchone()
            return row_to_product(row) if row else None

    async def list_products(self, filters: ProductFilter) -> list[Product]:
        """List products matching all given predicates, ordered by name."""
        clauses: list[str] = []
        params: list = []

        if filters.search and filters.search.strip():
            fold = "fold_accents" if filters.accent_insensitive else "fold_case"
            pattern = like_pattern(
                fold_text(filters.search.strip(), strip_accents=filters.accent_insensitive)
            )
            clauses.append(
                f"({fold}(p.name) LIKE ? ESCAPE '\\'"
                f" OR {fold}(p.sku) LIKE ? ESCAPE '\\'"
                f" OR {fold}(p.description) LIKE ? ESCAPE '\\')"
            )
            params.extend([pattern, pattern, pattern])
        if filters.supplier_id is not None:
            clauses.append("p.supplier_id = ?")
            params.append(filters.supplier_id)
        if filters.low_stock:
            clauses.append("p.quantity <= p.min_stock")
        if filters.active_only:
            clauses.append("p.is_active = 1")

        query = f"SELECT {PRODUCT_COLUMNS}"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY p.name COLLATE NOCASE, p.id"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [row_to_product(row) for row in rows]

    async def update_product(self, product_id: int, changes: dict[str, Any]) -> Product | None:
        """
        Write the given catalog columns and nothing else.

        Holds the product's lock and the database write lock, like every
        ledger write, so an entry recomputing cost_price is never undone by
        a stale catalog edit.
        """
        unknown = set(changes) - set(CATALOG_COLUMNS)
        if unknown:
            raise ValueError(f"Not a catalog column: {', '.join(sorted(unknown))}")

        columns = [column for column in CATALOG_COLUMNS if column in changes]
        assignments = ", ".join(f"{column} = ?" for column in [*columns, "updated_at"])
        params = [_db_value(changes[column]) for column in columns]
        params += [to_db_time(utc_now()), product_id]

        async with self._locks.hold(product_id):
            pool = await get_pool()
            async with pool.transaction(immediate=True) as conn:
                cursor = await conn.execute(
                    f"UPDATE products SET {assignments} WHERE id = ?", params
                )
                found = cursor.rowcount > 0

        if not found:
            return None
        logger.info("product_row_updated", product_id=product_id, columns=columns)
        return await self.get_product(product_id)

    async def set_active(self, product_id: int, is_active: bool) -> None:
        """Set the active flag."""
        async with get_transaction() as conn:
            await conn.execute(
                "UPDATE products SET is_active = ?, updated_at = ? WHERE id = ?",
                (int(is_active), to_db_time(utc_now()), product_id),
            )

    async def delete_product(self, product_id: int) -> bool:
        """Delete product; movements go with it (ON DELETE CASCADE)."""
        async with get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM products WHERE id = ?", (product_id,))
            return cursor.rowcount > 0
