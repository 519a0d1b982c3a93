"""Helpers shared by the SQLite stores: timestamps, LIKE patterns, row mapping."""

from datetime import UTC, datetime

import aiosqlite

from src.core.entities.movement import Movement, MovementRecord, MovementType
from src.core.entities.product import Product, UnitType


def to_db_time(value: datetime) -> str:
    """Store as UTC ISO-8601 with microseconds so text order is time order."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def from_db_time(value: str | None) -> datetime:
    """Parse a stored timestamp; naive values are taken as UTC."""
    if not value:
        return datetime.now(UTC)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def like_pattern(term: str) -> str:
    """Substring pattern with LIKE wildcards escaped (use with ESCAPE '\\')."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


# SELECT bodies shared by stores that return products or movement records
PRODUCT_COLUMNS = """
    p.*, s.name AS supplier_name
    FROM products p
    LEFT JOIN suppliers s ON s.id = p.supplier_id
"""

MOVEMENT_RECORD_COLUMNS = """
    m.*, p.name AS product_name, p.sku AS product_sku,
    p.unit_type AS product_unit_type, v.name AS vendor_name
    FROM movements m
    JOIN products p ON p.id = m.product_id
    LEFT JOIN vendors v ON v.id = m.vendor_id
"""


def row_to_product(row: aiosqlite.Row) -> Product:
    keys = row.keys()
    return Product(
        id=row["id"],
        sku=row["sku"],
        name=row["name"],
        description=row["description"],
        unit_type=UnitType(row["unit_type"]),
        quantity=row["quantity"],
        cost_price=row["cost_price"],
        min_stock=row["min_stock"],
        supplier_id=row["supplier_id"],
        supplier_name=row["supplier_name"] if "supplier_name" in keys else None,
        is_active=bool(row["is_active"]),
        created_at=from_db_time(row["created_at"]),
        updated_at=from_db_time(row["updated_at"]),
    )


def row_to_movement(row: aiosqlite.Row) -> Movement:
    return Movement(
        id=row["id"],
        product_id=row["product_id"],
        type=MovementType(row["type"]),
        quantity=row["quantity"],
        unit_cost=row["unit_cost"],
        notes=row["notes"],
        vendor_id=row["vendor_id"],
        created_at=from_db_time(row["created_at"]),
    )


def row_to_record(row: aiosqlite.Row) -> MovementRecord:
    """Movement row joined through MOVEMENT_RECORD_COLUMNS."""
    movement = row_to_movement(row)
    return MovementRecord(
        **movement.model_dump(),
        product_name=row["product_name"],
        product_sku=row["product_sku"],
        product_unit_type=UnitType(row["product_unit_type"]),
        vendor_name=row["vendor_name"],
    )
