"""
FastAPI application factory.

``uvicorn src.api.main:app`` serves the stock API; the schema is migrated
before the first request is accepted.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from src.api.middleware.error_handler import setup_exception_handlers
from src.api.routes import (
    health_router,
    movements_router,
    products_router,
    reports_router,
    suppliers_router,
    vendors_router,
)
from src.api.routes.health import health_check
from src.application.dto.responses import HealthResponse
from src.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    products_router,
    movements_router,
    suppliers_router,
    vendors_router,
    reports_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Migrate and open the pool on startup, close the pool on shutdown."""
    from src.infrastructure.storage.sqlite import close_connection_pool, get_connection_pool
    from src.infrastructure.storage.sqlite.migrations import run_migrations

    settings = get_settings()
    logger.info(
        "application_starting",
        environment=settings.environment,
        db_path=str(settings.storage.db_path),
    )

    results = await run_migrations()
    failed = [r.version for r in results if not r.success]
    if failed:
        logger.error("startup_aborted_migration_failed", versions=failed)
        raise RuntimeError(f"Migrations failed: {', '.join(failed)}")

    await get_connection_pool()
    logger.info("application_started", migrations_applied=len(results))

    try:
        yield
    finally:
        await close_connection_pool()
        logger.info("application_stopped")


def create_app() -> FastAPI:
    """Build the API with middleware, error handlers and routers."""
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Stock movements, weighted-average cost and inventory reports",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Added last runs first: errors are caught inside the request log
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    # Container probes hit /health without the /api prefix
    app.add_api_route("/health", health_check, response_model=HealthResponse, include_in_schema=False)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
