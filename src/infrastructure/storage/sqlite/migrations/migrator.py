"""
Versioned schema migrations for the stock database.

Files named ``vNNN_<name>.sql`` in this directory are applied in version
order. Each applied file is recorded in ``schema_migrations`` together with
a content checksum; editing a file after it shipped stops the run instead
of silently diverging from the recorded schema.

The database file is copied aside before migrating and put back if the run
blows up halfway.
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from src.config import get_logger, get_settings
from src.core.exceptions import StorageError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = ("schema_migrations", "suppliers", "vendors", "products", "movements")


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=digest[:16])

    def read_sql(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class SchemaCheck:
    """One line of the integrity report."""

    name: str
    passed: bool
    detail: dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """All well-formed migration files in version order."""
    found = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError:
            logger.warning("skipping_invalid_migration", path=str(path))
    return found


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to the checksum recorded when they ran."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # Fresh file, tracking table not created yet
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied, default=None)


def pending_migrations(
    applied: dict[str, str],
    available: list[MigrationInfo],
) -> list[MigrationInfo]:
    """
    Migrations still to run.

    Raises:
        StorageError: An applied migration file no longer matches its checksum
    """
    pending = []
    for migration in available:
        recorded = applied.get(migration.version)
        if recorded is None:
            pending.append(migration)
        elif recorded != migration.checksum:
            raise StorageError(
                f"Migration v{migration.version} was modified after being applied",
                code="MIGRATION_CHECKSUM_MISMATCH",
                details={
                    "version": migration.version,
                    "recorded": recorded,
                    "on_disk": migration.checksum,
                },
            )
    return pending


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """Run one script, record it, and report how it went."""
    started = time.perf_counter()
    error: str | None = None

    try:
        await conn.executescript(migration.read_sql())
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed_ms),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        error = str(e)

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    if error:
        logger.error("migration_failed", version=migration.version, error=error)
    else:
        logger.info("migration_applied", version=migration.version, elapsed_ms=elapsed_ms)

    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=error is None,
        execution_time_ms=elapsed_ms,
        error=error,
    )


def create_backup(db_path: Path) -> Path:
    """Copy the database file next to itself with a timestamp suffix."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the database up to the newest schema.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Copy an existing file aside first

    Returns:
        Results for the migrations that were attempted. Stops at the first
        failure; earlier migrations stay applied.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    backup_path = create_backup(db_path) if create_backup_before and db_path.exists() else None
    results: list[MigrationResult] = []

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            todo = pending_migrations(await get_applied_migrations(conn), discover_migrations())
            logger.info("migrations_pending", db_path=str(db_path), count=len(todo))

            for migration in todo:
                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    break
    except Exception:
        if backup_path and backup_path.exists():
            restore_backup(db_path, backup_path)
        raise

    if backup_path and all(r.success for r in results):
        backup_path.unlink()

    return results


# Name used by the API lifespan
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Current version with applied and pending versions."""
    db_path = db_path or get_settings().storage.db_path
    available = discover_migrations()

    applied: dict[str, str] = {}
    if db_path.exists():
        async with aiosqlite.connect(db_path) as conn:
            applied = await get_applied_migrations(conn)

    return {
        "exists": db_path.exists(),
        "current_version": max(applied, default=None),
        "applied_migrations": sorted(applied),
        "pending_migrations": [m.version for m in available if m.version not in applied],
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[SchemaCheck]:
    """Page integrity, foreign keys, required tables and stock sign."""
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()

        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = len(await cursor.fetchall())

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {name for (name,) in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in tables]

        negative = 0
        if "products" in tables:
            cursor = await conn.execute("SELECT COUNT(*) FROM products WHERE quantity < 0")
            (negative,) = await cursor.fetchone()

    return [
        SchemaCheck("integrity", integrity == "ok", {"result": integrity}),
        SchemaCheck("foreign_keys", fk_violations == 0, {"violations": fk_violations}),
        SchemaCheck("required_tables", not missing, {"missing": missing}),
        SchemaCheck("non_negative_stock", negative == 0, {"negative_products": negative}),
    ]


def main() -> None:
    """``detailstock-migrate`` command."""
    import argparse

    parser = argparse.ArgumentParser(description="Migrate the stock database")
    parser.add_argument("--db-path", type=Path, help="database file (default from settings)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="show applied and pending versions")
    group.add_argument("--verify", action="store_true", help="run integrity checks")
    parser.add_argument("--no-backup", action="store_true", help="do not copy the file first")
    args = parser.parse_args()

    async def run() -> int:
        if args.status:
            status = await get_migration_status(args.db_path)
            for key, value in status.items():
                print(f"{key}: {value}")
            return 0

        if args.verify:
            checks = await verify_schema_integrity(args.db_path)
            for check in checks:
                print(f"{check.status:4} {check.name} {check.detail}")
            return 0 if all(c.passed for c in checks) else 1

        results = await initialize_database(args.db_path, create_backup_before=not args.no_backup)
        if not results:
            print("schema up to date")
        for result in results:
            outcome = "ok" if result.success else f"FAILED: {result.error}"
            print(f"v{result.version} {result.name} ({result.execution_time_ms}ms) {outcome}")
        return 0 if all(r.success for r in results) else 1

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
