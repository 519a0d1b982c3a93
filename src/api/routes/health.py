"""Liveness and database readiness probes."""

import time

import aiosqlite
from fastapi import APIRouter, Depends

from src.api.dependencies import get_app_settings
from src.application.dto.responses import DatabaseHealthResponse, HealthResponse
from src.config import Settings, get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_started_at = time.monotonic()


def _uptime() -> float:
    return time.monotonic() - _started_at


@router.get("", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    return HealthResponse(status="healthy", version=settings.app_version, uptime_seconds=_uptime())


@router.get("/db", response_model=HealthResponse)
async def db_health(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """
    Round-trip to the stock database.

    Reports the applied schema version so a deploy that skipped migrations
    shows up here rather than as failing movements.
    """
    from src.infrastructure.storage.sqlite import get_connection_pool
    from src.infrastructure.storage.sqlite.migrations import get_current_version

    started = time.perf_counter()
    try:
        pool = await get_connection_pool()
        async with pool.acquire() as conn:
            version = await get_current_version(conn)
        database = DatabaseHealthResponse(
            available=True,
            schema_version=version,
            latency_ms=round((time.perf_counter() - started) * 1000, 2),
        )
    except (aiosqlite.Error, OSError) as e:
        logger.warning("database_health_failed", error=str(e))
        database = DatabaseHealthResponse(available=False, error=str(e))

    return HealthResponse(
        status="healthy" if database.available else "unhealthy",
        version=settings.app_version,
        uptime_seconds=_uptime(),
        database=database,
    )
