"""
Dependency injection container for FastAPI.

Provides service instances to route handlers. Tests swap any of these
through ``app.dependency_overrides``.
"""

from functools import lru_cache

from src.application.services import (
    get_catalog_service,
    get_movement_processor,
    get_movement_query_service,
    get_report_service,
)
from src.application.use_cases import CorrectMovementUseCase, RecordMovementUseCase
from src.config import Settings, get_settings
from src.core.services import (
    CatalogService,
    MovementProcessor,
    MovementQueryService,
    ReportService,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Service dependencies
async def get_processor() -> MovementProcessor:
    """Get movement processor."""
    return await get_movement_processor()


async def get_movement_queries() -> MovementQueryService:
    return await get_movement_query_service()


async def get_catalog() -> CatalogService:
    """Get catalog service."""
    return await get_catalog_service()


async def get_reports() -> ReportService:
    """Get report service."""
    return await get_report_service()


# Use case dependencies
async def get_record_movement_use_case() -> RecordMovementUseCase:
    """Get record movement use case."""
    return RecordMovementUseCase(await get_processor())


async def get_correct_movement_use_case() -> CorrectMovementUseCase:
    """Get correct movement use case."""
    return CorrectMovementUseCase(await get_processor())
