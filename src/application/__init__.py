"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection
"""

from src.application.services import (
    get_catalog_service,
    get_movement_processor,
    get_movement_query_service,
    get_report_service,
    reset_services,
)
from src.application.use_cases import CorrectMovementUseCase, RecordMovementUseCase

__all__ = [
    # Use Cases
    "RecordMovementUseCase",
    "CorrectMovementUseCase",
    # Service factories
    "get_movement_processor",
    "get_movement_query_service",
    "get_catalog_service",
    "get_report_service",
    "reset_services",
]
