"""Thread-safe in-process document store."""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import replace
from typing import Any, Iterable, Sequence

from ..errors import DuplicateKeyError
from ..models.domain import (
    Allocation,
    CollectionCenter,
    Collector,
    Payment,
    RequestStatus,
    Schedule,
    ScheduleStatus,
    Vehicle,
    WasteRequest,
)
from .store import DocumentStore

logger = logging.getLogger(__name__)


class MemoryStore(DocumentStore):
    """Dict-backed store used for tests and database-less deployments.

    Records are copied on the way in and out so callers never share state with
    the store. The active-slot index mirrors the partial unique index of the
    SQL schema.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._requests: dict[str, WasteRequest] = {}
        self._centers: dict[str, CollectionCenter] = {}
        self._collectors: dict[str, Collector] = {}
        self._vehicles: dict[str, Vehicle] = {}
        self._schedules: dict[str, Schedule] = {}
        self._payments: dict[str, Payment] = {}
        self._active_slots: dict[tuple[str, str, str], str] = {}

    # Waste requests

    def get_request(self, request_id: str) -> WasteRequest | None:
        with self._lock:
            return copy.deepcopy(self._requests.get(request_id))

    def find_requests(
        self,
        *,
        ids: Sequence[str] | None = None,
        statuses: Iterable[RequestStatus] | None = None,
        resident_id: str | None = None,
    ) -> list[WasteRequest]:
        wanted_ids = set(ids) if ids is not None else None
        wanted_statuses = set(statuses) if statuses is not None else None
        with self._lock:
            matches = [
                request
                for request in self._requests.values()
                if (wanted_ids is None or request.id in wanted_ids)
                and (wanted_statuses is None or request.status in wanted_statuses)
                and (resident_id is None or request.resident_id == resident_id)
            ]
            return copy.deepcopy(matches)

    def insert_request(self, request: WasteRequest) -> WasteRequest:
        with self._lock:
            if request.id in self._requests:
                raise DuplicateKeyError(f"Waste request {request.id} already exists.")
            self._requests[request.id] = copy.deepcopy(request)
            return copy.deepcopy(request)

    def update_request(self, request_id: str, fields: dict[str, Any]) -> WasteRequest | None:
        with self._lock:
            current = self._requests.get(request_id)
            if current is None:
                return None
            updated = replace(current, **fields)
            self._requests[request_id] = updated
            return copy.deepcopy(updated)

    def delete_request(self, request_id: str) -> bool:
        with self._lock:
            return self._requests.pop(request_id, None) is not None

    def update_request_status(
        self,
        ids: Sequence[str],
        status: RequestStatus,
        *,
        expected: RequestStatus | None = None,
    ) -> list[str]:
        changed: list[str] = []
        with self._lock:
            for request_id in dict.fromkeys(ids):
                request = self._requests.get(request_id)
                if request is None:
                    continue
                if expected is not None and request.status != expected:
                    continue
                request.status = status
                changed.append(request_id)
        return changed

    # Collection centers

    def list_centers(self) -> list[CollectionCenter]:
        with self._lock:
            return copy.deepcopy(list(self._centers.values()))

    def get_center(self, center_id: str) -> CollectionCenter | None:
        with self._lock:
            return copy.deepcopy(self._centers.get(center_id))

    def insert_center(self, center: CollectionCenter) -> CollectionCenter:
        with self._lock:
            if center.id in self._centers:
                raise DuplicateKeyError(f"Collection center {center.id} already exists.")
            self._centers[center.id] = copy.deepcopy(center)
            return copy.deepcopy(center)

    def save_center_allocation(
        self,
        center_id: str,
        allocation: Allocation,
        *,
        expected: Allocation,
    ) -> bool:
        with self._lock:
            center = self._centers.get(center_id)
            if center is None:
                return False
            if (center.allocated.trucks, center.allocated.staff) != (expected.trucks, expected.staff):
                logger.debug(f"Allocation for center {center_id} changed concurrently")
                return False
            center.allocated = replace(allocation)
            return True

    # Collectors and vehicles

    def get_collector(self, collector_id: str) -> Collector | None:
        with self._lock:
            return copy.deepcopy(self._collectors.get(collector_id))

    def insert_collector(self, collector: Collector) -> Collector:
        with self._lock:
            if collector.id in self._collectors:
                raise DuplicateKeyError(f"Collector {collector.id} already exists.")
            self._collectors[collector.id] = copy.deepcopy(collector)
            return copy.deepcopy(collector)

    def get_vehicle(self, vehicle_id: str) -> Vehicle | None:
        with self._lock:
            return copy.deepcopy(self._vehicles.get(vehicle_id))

    def list_vehicles(self, center_id: str | None = None) -> list[Vehicle]:
        with self._lock:
            return copy.deepcopy(
                [v for v in self._vehicles.values() if center_id is None or v.center_id == center_id]
            )

    def insert_vehicle(self, vehicle: Vehicle) -> Vehicle:
        with self._lock:
            if vehicle.id in self._vehicles:
                raise DuplicateKeyError(f"Vehicle {vehicle.id} already exists.")
            self._vehicles[vehicle.id] = copy.deepcopy(vehicle)
            return copy.deepcopy(vehicle)

    def update_vehicle(self, vehicle_id: str, fields: dict[str, Any]) -> Vehicle | None:
        with self._lock:
            current = self._vehicles.get(vehicle_id)
            if current is None:
                return None
            updated = replace(current, **fields)
            self._vehicles[vehicle_id] = updated
            return copy.deepcopy(updated)

    def delete_vehicle(self, vehicle_id: str) -> bool:
        with self._lock:
            return self._vehicles.pop(vehicle_id, None) is not None

    # Schedules

    def get_schedule(self, schedule_id: str) -> Schedule | None:
        with self._lock:
            return copy.deepcopy(self._schedules.get(schedule_id))

    def find_schedules(
        self,
        *,
        collector_id: str | None = None,
        center_id: str | None = None,
    ) -> list[Schedule]:
        with self._lock:
            matches = [
                schedule
                for schedule in self._schedules.values()
                if (collector_id is None or schedule.collector_id == collector_id)
                and (center_id is None or schedule.center_id == center_id)
            ]
            return copy.deepcopy(matches)

    def find_active_schedule(self, collector_id: str, date_key: str, time: str) -> Schedule | None:
        with self._lock:
            schedule_id = self._active_slots.get((collector_id, date_key, time))
            if schedule_id is None:
                return None
            return copy.deepcopy(self._schedules[schedule_id])

    def insert_schedule(self, schedule: Schedule) -> Schedule:
        with self._lock:
            if schedule.id in self._schedules:
                raise DuplicateKeyError(f"Schedule {schedule.id} already exists.")
            if schedule.status != ScheduleStatus.CANCELED:
                key = schedule.slot_key
                if key in self._active_slots:
                    raise DuplicateKeyError(
                        "A schedule already exists for this collector at the selected date and time."
                    )
                self._active_slots[key] = schedule.id
            self._schedules[schedule.id] = copy.deepcopy(schedule)
            return copy.deepcopy(schedule)

    def update_schedule_status(self, schedule_id: str, status: ScheduleStatus) -> Schedule | None:
        with self._lock:
            schedule = self._schedules.get(schedule_id)
            if schedule is None:
                return None
            key = schedule.slot_key
            if status == ScheduleStatus.CANCELED:
                if self._active_slots.get(key) == schedule_id:
                    del self._active_slots[key]
            elif schedule.status == ScheduleStatus.CANCELED:
                # Reviving a canceled schedule must respect the active-slot index.
                if key in self._active_slots:
                    raise DuplicateKeyError(
                        "A schedule already exists for this collector at the selected date and time."
                    )
                self._active_slots[key] = schedule_id
            schedule.status = status
            return copy.deepcopy(schedule)

    # Payments

    def insert_payment(self, payment: Payment) -> Payment:
        with self._lock:
            self._payments[payment.id] = copy.deepcopy(payment)
            return copy.deepcopy(payment)

    def list_payments(self) -> list[Payment]:
        with self._lock:
            return copy.deepcopy(list(self._payments.values()))
