"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services.catalog_service import CatalogService, generate_sku
from src.core.services.movement_processor import (
    DeleteResult,
    EditResult,
    EntryResult,
    ExitReturnResult,
    LedgerCheck,
    MovementProcessor,
    StockResult,
)
from src.core.services.movement_query import MovementQueryService, movement_window
from src.core.services.report_service import ReportService
from src.core.services.search_text import fold_text

__all__ = [
    # Movement ledger
    "MovementProcessor",
    "EntryResult",
    "StockResult",
    "ExitReturnResult",
    "EditResult",
    "DeleteResult",
    "LedgerCheck",
    "MovementQueryService",
    "movement_window",
    # Catalog
    "CatalogService",
    "generate_sku",
    "fold_text",
    # Reports
    "ReportService",
]
