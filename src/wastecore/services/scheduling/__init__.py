"""Collector scheduling."""

from .service import NOT_PENDING_MESSAGE, SLOT_TAKEN_MESSAGE, SchedulingService
from .validation import EntityValidator, StoreEntityValidator, ValidationResult

__all__ = [
    "NOT_PENDING_MESSAGE",
    "SLOT_TAKEN_MESSAGE",
    "SchedulingService",
    "EntityValidator",
    "StoreEntityValidator",
    "ValidationResult",
]
