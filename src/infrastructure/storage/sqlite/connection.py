"""
Pooled aiosqlite connections for the stock database.

Each connection runs in WAL mode with foreign keys on, waits on a busy
database instead of failing, and registers the text-folding SQL functions
catalog search relies on:

    fold_accents(text)  lower case, diacritics removed
    fold_case(text)     lower case only
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings
from src.core.services.search_text import fold_text

logger = get_logger(__name__)

_PRAGMAS = (
    "journal_mode=WAL",
    "synchronous=NORMAL",
    "foreign_keys=ON",
)


def _fold_accents(value: str | None) -> str:
    return fold_text(value, strip_accents=True)


def _fold_case(value: str | None) -> str:
    return fold_text(value, strip_accents=False)


async def open_connection(db_path: Path, busy_timeout: int) -> aiosqlite.Connection:
    """Open one configured connection."""
    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row

    await conn.execute(f"PRAGMA busy_timeout={int(busy_timeout)}")
    for pragma in _PRAGMAS:
        await conn.execute(f"PRAGMA {pragma}")

    await conn.create_function("fold_accents", 1, _fold_accents, deterministic=True)
    await conn.create_function("fold_case", 1, _fold_case, deterministic=True)
    return conn


class ConnectionPool:
    """Fixed-size set of connections lent out one request at a time."""

    def __init__(self, db_path: Path, pool_size: int = 5, busy_timeout: int = 30000):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.pool_size):
                conn = await open_connection(self.db_path, self.busy_timeout)
                self._connections.append(conn)
                self._pool.put_nowait(conn)

            self._initialized = True
            logger.info("connection_pool_opened", db_path=str(self.db_path), size=self.pool_size)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection; waits while all of them are lent out."""
        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            self._pool.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self, immediate: bool = False) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection inside a transaction.

        Commits when the block exits cleanly and rolls back otherwise.
        ``immediate`` issues BEGIN IMMEDIATE so the write lock is held from
        the first read, which keeps read-modify-write balance updates from
        acting on a stale product row.
        """
        async with self.acquire() as conn:
            if immediate:
                await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise

    async def close(self) -> None:
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._pool = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool built from storage settings on first use."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction(immediate: bool = False) -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.transaction(immediate=immediate) as conn:
        yield conn
