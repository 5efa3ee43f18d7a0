"""Domain models for waste requests, centers, vehicles and schedules."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


DEFAULT_COLLECTION_TIME = "00:00"


class RequestStatus(str, Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    COLLECTED = "collected"
    CANCELED = "canceled"
    PAYMENT_COMPLETE = "payment complete"


class ScheduleStatus(str, Enum):
    PENDING_ACCEPTANCE = "pending-acceptance"
    ACCEPTED = "accepted"
    CANCELED = "canceled"


@dataclass(slots=True)
class WasteRequest:
    """A resident's pickup request.

    ``quantity`` is kept as stored; legacy rows may carry strings, so readers
    go through ``parse_quantity`` rather than trusting the type.
    """

    id: str
    resident_id: str
    waste_type: str
    quantity: Any
    collection_date: Optional[date]
    collection_center_id: Optional[str] = None
    collection_time: str = DEFAULT_COLLECTION_TIME
    status: RequestStatus = RequestStatus.PENDING
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class ResourceCaps:
    """Administrator-configured ceiling. ``None`` means no ceiling beyond demand."""

    trucks: Optional[int] = None
    staff: Optional[int] = None


@dataclass(slots=True)
class Allocation:
    trucks: int = 0
    staff: int = 0
    total_quantity: float = 0.0


@dataclass(slots=True)
class CollectionCenter:
    id: str
    name: str
    resources: ResourceCaps = field(default_factory=ResourceCaps)
    allocated: Allocation = field(default_factory=Allocation)


@dataclass(slots=True)
class Vehicle:
    id: str
    name: str
    license_plate: str
    center_id: str


@dataclass(slots=True)
class Collector:
    id: str
    name: str


@dataclass(slots=True)
class Schedule:
    """One collector's booking of a center, vehicle and slot."""

    id: str
    collector_id: str
    center_id: str
    vehicle_id: str
    date: date
    time: str
    request_ids: list[str]
    status: ScheduleStatus = ScheduleStatus.PENDING_ACCEPTANCE
    created_at: Optional[datetime] = None

    @property
    def slot_key(self) -> tuple[str, str, str]:
        return (self.collector_id, self.date.isoformat(), self.time)


@dataclass(slots=True)
class Payment:
    id: str
    resident_id: Optional[str]
    amount: float
    request_ids: list[str]
    status: str = "completed"
    created_at: Optional[datetime] = None
