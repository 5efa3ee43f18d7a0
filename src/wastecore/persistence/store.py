"""Contract for the document store backing requests, centers and schedules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Sequence

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


class DocumentStore(ABC):
    """Persistence operations used by the coordination services.

    Implementations must enforce one active schedule per
    (collector_id, date, time): ``insert_schedule`` raises
    ``DuplicateKeyError`` when a non-canceled schedule already holds the slot.
    Store failures surface as ``PersistenceError``.
    """

    # Waste requests

    @abstractmethod
    def get_request(self, request_id: str) -> WasteRequest | None:
        raise NotImplementedError

    @abstractmethod
    def find_requests(
        self,
        *,
        ids: Sequence[str] | None = None,
        statuses: Iterable[RequestStatus] | None = None,
        resident_id: str | None = None,
    ) -> list[WasteRequest]:
        raise NotImplementedError

    @abstractmethod
    def insert_request(self, request: WasteRequest) -> WasteRequest:
        raise NotImplementedError

    @abstractmethod
    def update_request(self, request_id: str, fields: dict[str, Any]) -> WasteRequest | None:
        raise NotImplementedError

    @abstractmethod
    def delete_request(self, request_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def update_request_status(
        self,
        ids: Sequence[str],
        status: RequestStatus,
        *,
        expected: RequestStatus | None = None,
    ) -> list[str]:
        """Set ``status`` on the given ids and return the ids actually changed.

        With ``expected`` set, only rows currently in that status are touched.
        """
        raise NotImplementedError

    # Collection centers

    @abstractmethod
    def list_centers(self) -> list[CollectionCenter]:
        raise NotImplementedError

    @abstractmethod
    def get_center(self, center_id: str) -> CollectionCenter | None:
        raise NotImplementedError

    @abstractmethod
    def insert_center(self, center: CollectionCenter) -> CollectionCenter:
        raise NotImplementedError

    @abstractmethod
    def save_center_allocation(
        self,
        center_id: str,
        allocation: Allocation,
        *,
        expected: Allocation,
    ) -> bool:
        """Compare-and-set the center's allocation.

        Returns False when the stored allocation no longer equals ``expected``.
        """
        raise NotImplementedError

    # Collectors and vehicles

    @abstractmethod
    def get_collector(self, collector_id: str) -> Collector | None:
        raise NotImplementedError

    @abstractmethod
    def insert_collector(self, collector: Collector) -> Collector:
        raise NotImplementedError

    @abstractmethod
    def get_vehicle(self, vehicle_id: str) -> Vehicle | None:
        raise NotImplementedError

    @abstractmethod
    def list_vehicles(self, center_id: str | None = None) -> list[Vehicle]:
        raise NotImplementedError

    @abstractmethod
    def insert_vehicle(self, vehicle: Vehicle) -> Vehicle:
        raise NotImplementedError

    @abstractmethod
    def update_vehicle(self, vehicle_id: str, fields: dict[str, Any]) -> Vehicle | None:
        raise NotImplementedError

    @abstractmethod
    def delete_vehicle(self, vehicle_id: str) -> bool:
        raise NotImplementedError

    # Schedules

    @abstractmethod
    def get_schedule(self, schedule_id: str) -> Schedule | None:
        raise NotImplementedError

    @abstractmethod
    def find_schedules(
        self,
        *,
        collector_id: str | None = None,
        center_id: str | None = None,
    ) -> list[Schedule]:
        raise NotImplementedError

    @abstractmethod
    def find_active_schedule(self, collector_id: str, date_key: str, time: str) -> Schedule | None:
        raise NotImplementedError

    @abstractmethod
    def insert_schedule(self, schedule: Schedule) -> Schedule:
        raise NotImplementedError

    @abstractmethod
    def update_schedule_status(self, schedule_id: str, status: ScheduleStatus) -> Schedule | None:
        raise NotImplementedError

    # Payments

    @abstractmethod
    def insert_payment(self, payment: Payment) -> Payment:
        raise NotImplementedError
