"""Referential checks run before a schedule is written."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ...persistence.store import DocumentStore


@dataclass(frozen=True, slots=True)
class ValidationResult:
    is_valid: bool
    message: str = ""


class EntityValidator(Protocol):
    def validate_entities(self, collector_id: str, center_id: str, vehicle_id: str) -> ValidationResult:
        ...


class StoreEntityValidator:
    """Checks that the collector, center and vehicle exist.

    Vehicles are not tied to the center they are registered at; any existing
    vehicle may serve a booking.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def validate_entities(self, collector_id: str, center_id: str, vehicle_id: str) -> ValidationResult:
        if self.store.get_collector(collector_id) is None:
            return ValidationResult(False, f"Collector {collector_id} not found.")
        if self.store.get_center(center_id) is None:
            return ValidationResult(False, f"Collection center {center_id} not found.")
        if self.store.get_vehicle(vehicle_id) is None:
            return ValidationResult(False, f"Vehicle {vehicle_id} not found.")
        return ValidationResult(True, "Entities are valid.")
