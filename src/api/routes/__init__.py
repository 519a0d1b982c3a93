"""API route modules."""

from src.api.routes.health import router as health_router
from src.api.routes.movements import router as movements_router
from src.api.routes.products import router as products_router
from src.api.routes.reports import router as reports_router
from src.api.routes.suppliers import router as suppliers_router
from src.api.routes.vendors import router as vendors_router

__all__ = [
    "health_router",
    "products_router",
    "movements_router",
    "suppliers_router",
    "vendors_router",
    "reports_router",
]
