"""Movement listing: filter validation and time windows."""

from datetime import UTC, datetime, time, timedelta

from src.core.entities.movement import MovementFilter, MovementRecord
from src.core.exceptions import InvalidInputError, MovementNotFoundError
from src.core.interfaces.inventory_store import IInventoryStore


def movement_window(
    filters: MovementFilter, now: datetime | None = None
) -> tuple[datetime | None, datetime | None]:
    """
    Resolve a filter to a half-open ``[since, until)`` UTC window.

    A relative period wins over an explicit range. An explicit range needs
    both dates, and end_date is included as a whole day.
    """
    if filters.period is not None:
        return filters.period.since(now), None

    start, end = filters.start_date, filters.end_date
    if start is None and end is None:
        return None, None
    if start is None or end is None:
        missing = "start_date" if start is None else "end_date"
        raise InvalidInputError(missing, "date range needs both start_date and end_date")
    if start > end:
        raise InvalidInputError("start_date", "must not be after end_date", start.isoformat())

    since = datetime.combine(start, time.min, tzinfo=UTC)
    until = datetime.combine(end + timedelta(days=1), time.min, tzinfo=UTC)
    return since, until


class MovementQueryService:
    """Read side of the movement log."""

    def __init__(self, inventory_store: IInventoryStore):
        self._store = inventory_store

    async def list_movements(self, filters: MovementFilter) -> list[MovementRecord]:
        # Fail fast on a malformed range before hitting storage
        movement_window(filters)
        return await self._store.list_movements(filters)

    async def get_movement(self, movement_id: int) -> MovementRecord:
        record = await self._store.get_movement_record(movement_id)
        if record is None:
            raise MovementNotFoundError(movement_id)
        return record
