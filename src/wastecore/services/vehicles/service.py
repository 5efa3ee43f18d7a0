"""Vehicle registry operations."""

from __future__ import annotations

import logging
import uuid
from typing import Any, List, Optional

from ...errors import NotFoundError, ValidationError
from ...models.domain import Vehicle
from ...persistence.store import DocumentStore

logger = logging.getLogger(__name__)


class VehicleService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def create_vehicle(self, name: Optional[str], license_plate: Optional[str], center_id: Optional[str]) -> Vehicle:
        fields = {"name": name, "license_plate": license_plate, "center_id": center_id}
        missing = [key for key, value in fields.items() if not value]
        if missing:
            raise ValidationError("All fields are required.", missing=missing)
        if self.store.get_center(center_id) is None:
            raise ValidationError("Invalid collection center selected.", missing=["center_id"])
        vehicle = self.store.insert_vehicle(
            Vehicle(id=uuid.uuid4().hex, name=name, license_plate=license_plate, center_id=center_id)
        )
        logger.info(f"Registered vehicle {vehicle.id} ({license_plate}) at center {center_id}")
        return vehicle

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self.store.get_vehicle(vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle not found.")
        return vehicle

    def list_vehicles(self) -> List[Vehicle]:
        return self.store.list_vehicles()

    def list_by_center(self, center_id: str) -> List[Vehicle]:
        return self.store.list_vehicles(center_id=center_id)

    def update_vehicle(self, vehicle_id: str, changes: dict[str, Any]) -> Vehicle:
        update = {key: changes[key] for key in ("name", "license_plate", "center_id") if changes.get(key)}
        if not update:
            raise ValidationError("No valid fields provided to update.")
        if "center_id" in update and self.store.get_center(update["center_id"]) is None:
            raise ValidationError("Invalid collection center selected.", missing=["center_id"])
        updated = self.store.update_vehicle(vehicle_id, update)
        if updated is None:
            raise NotFoundError("Vehicle not found.")
        return updated

    def delete_vehicle(self, vehicle_id: str) -> None:
        if not self.store.delete_vehicle(vehicle_id):
            raise NotFoundError("Vehicle not found.")
        logger.info(f"Deleted vehicle {vehicle_id}")
