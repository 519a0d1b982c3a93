"""Database migrations module."""

from src.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    SchemaCheck,
    create_backup,
    discover_migrations,
    get_current_version,
    get_migration_status,
    initialize_database,
    pending_migrations,
    restore_backup,
    run_migrations,
    verify_schema_integrity,
)

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "SchemaCheck",
    "create_backup",
    "discover_migrations",
    "get_current_version",
    "get_migration_status",
    "initialize_database",
    "pending_migrations",
    "restore_backup",
    "run_migrations",
    "verify_schema_integrity",
]
