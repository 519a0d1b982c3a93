"""Application use cases."""

from src.application.use_cases.correct_movement import CorrectMovementUseCase
from src.application.use_cases.record_movement import RecordMovementUseCase

__all__ = [
    "RecordMovementUseCase",
    "CorrectMovementUseCase",
]
