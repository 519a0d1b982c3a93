"""
Service factory functions for dependency injection.

This module wires the SQLite store implementations to the core services.
Use cases and API dependencies import from here.
"""

from typing import TYPE_CHECKING

from src.config import get_settings
from src.core.services import (
    CatalogService,
    MovementProcessor,
    MovementQueryService,
    ReportService,
)

if TYPE_CHECKING:
    from src.core.interfaces import (
        IInventoryStore,
        IProductStore,
        IReportStore,
        ISupplierStore,
        IVendorStore,
    )


# Singleton service instances
_movement_processor: MovementProcessor | None = None
_movement_query_service: MovementQueryService | None = None
_catalog_service: CatalogService | None = None
_report_service: ReportService | None = None


async def get_movement_processor(
    inventory_store: "IInventoryStore | None" = None,
    vendor_store: "IVendorStore | None" = None,
) -> MovementProcessor:
    """
    Get or create the MovementProcessor.

    Store overrides produce a fresh, uncached instance.
    """
    global _movement_processor

    overridden = inventory_store is not None or vendor_store is not None
    if _movement_processor is not None and not overridden:
        return _movement_processor

    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.storage.sqlite import get_inventory_store, get_vendor_store

    settings = get_settings().inventory
    processor = MovementProcessor(
        inventory_store or await get_inventory_store(),
        vendor_store or await get_vendor_store(),
        cost_decimals=settings.cost_decimals,
        quantity_decimals=settings.quantity_decimals,
    )

    if not overridden:
        _movement_processor = processor

    return processor


async def get_movement_query_service(
    inventory_store: "IInventoryStore | None" = None,
) -> MovementQueryService:
    global _movement_query_service

    if _movement_query_service is not None and inventory_store is None:
        return _movement_query_service

    from src.infrastructure.storage.sqlite import get_inventory_store

    service = MovementQueryService(inventory_store or await get_inventory_store())

    if inventory_store is None:
        _movement_query_service = service

    return service


async def get_catalog_service(
    product_store: "IProductStore | None" = None,
    supplier_store: "ISupplierStore | None" = None,
    vendor_store: "IVendorStore | None" = None,
) -> CatalogService:
    """Get or create the CatalogService."""
    global _catalog_service

    overridden = any(s is not None for s in (product_store, supplier_store, vendor_store))
    if _catalog_service is not None and not overridden:
        return _catalog_service

    from src.infrastructure.storage.sqlite import (
        get_product_store,
        get_supplier_store,
        get_vendor_store,
    )

    service = CatalogService(
        product_store or await get_product_store(),
        supplier_store or await get_supplier_store(),
        vendor_store or await get_vendor_store(),
        sku_prefix=get_settings().inventory.sku_prefix,
    )

    if not overridden:
        _catalog_service = service

    return service


async def get_report_service(report_store: "IReportStore | None" = None) -> ReportService:
    """Get or create the ReportService."""
    global _report_service

    if _report_service is not None and report_store is None:
        return _report_service

    from src.infrastructure.storage.sqlite import get_report_store

    settings = get_settings().inventory
    service = ReportService(
        report_store or await get_report_store(),
        low_stock_limit=settings.low_stock_alert_limit,
        recent_movements_limit=settings.recent_movements_limit,
        expense_months=settings.expense_months,
        cost_decimals=settings.cost_decimals,
    )

    if report_store is None:
        _report_service = service

    return service


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _movement_processor
    global _movement_query_service
    global _catalog_service
    global _report_service

    _movement_processor = None
    _movement_query_service = None
    _catalog_service = None
    _report_service = None


__all__ = [
    "get_movement_processor",
    "get_movement_query_service",
    "get_catalog_service",
    "get_report_service",
    "reset_services",
]
