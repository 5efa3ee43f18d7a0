"""Supabase (Postgres) implementation of the document store.

Tables and the partial unique index on active schedules are defined in
``sql/schema.sql``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable, Sequence, TypeVar

from postgrest.exceptions import APIError
from supabase import Client

from ..errors import DuplicateKeyError, PersistenceError
from ..models.domain import (
    DEFAULT_COLLECTION_TIME,
    Allocation,
    CollectionCenter,
    Collector,
    Payment,
    RequestStatus,
    ResourceCaps,
    Schedule,
    ScheduleStatus,
    Vehicle,
    WasteRequest,
)
from .store import DocumentStore

UNIQUE_VIOLATION = "23505"

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _parse_date(value: Any) -> date | None:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _request_from_row(row: dict) -> WasteRequest:
    return WasteRequest(
        id=str(row["id"]),
        resident_id=str(row["resident_id"]),
        waste_type=row["waste_type"],
        quantity=row.get("quantity"),
        collection_center_id=row.get("collection_center_id"),
        collection_date=_parse_date(row.get("collection_date")),
        collection_time=row.get("collection_time") or DEFAULT_COLLECTION_TIME,
        status=RequestStatus(row.get("status") or RequestStatus.PENDING.value),
        created_at=_parse_datetime(row.get("created_at")),
    )


def _request_to_row(request: WasteRequest) -> dict:
    return {
        "id": request.id,
        "resident_id": request.resident_id,
        "waste_type": request.waste_type,
        "quantity": request.quantity,
        "collection_center_id": request.collection_center_id,
        "collection_date": request.collection_date.isoformat() if request.collection_date else None,
        "collection_time": request.collection_time,
        "status": request.status.value,
        "created_at": request.created_at.isoformat() if request.created_at else None,
    }


def _center_from_row(row: dict) -> CollectionCenter:
    return CollectionCenter(
        id=str(row["id"]),
        name=row["name"],
        resources=ResourceCaps(trucks=row.get("resource_trucks"), staff=row.get("resource_staff")),
        allocated=Allocation(
            trucks=int(row.get("allocated_trucks") or 0),
            staff=int(row.get("allocated_staff") or 0),
            total_quantity=float(row.get("allocated_total_quantity") or 0.0),
        ),
    )


def _center_to_row(center: CollectionCenter) -> dict:
    return {
        "id": center.id,
        "name": center.name,
        "resource_trucks": center.resources.trucks,
        "resource_staff": center.resources.staff,
        "allocated_trucks": center.allocated.trucks,
        "allocated_staff": center.allocated.staff,
        "allocated_total_quantity": center.allocated.total_quantity,
    }


def _vehicle_from_row(row: dict) -> Vehicle:
    return Vehicle(
        id=str(row["id"]),
        name=row["name"],
        license_plate=row["license_plate"],
        center_id=str(row["center_id"]),
    )


def _schedule_from_row(row: dict) -> Schedule:
    return Schedule(
        id=str(row["id"]),
        collector_id=str(row["collector_id"]),
        center_id=str(row["center_id"]),
        vehicle_id=str(row["vehicle_id"]),
        date=_parse_date(row["date"]),
        time=row["time"],
        request_ids=list(row.get("request_ids") or []),
        status=ScheduleStatus(row.get("status") or ScheduleStatus.PENDING_ACCEPTANCE.value),
        created_at=_parse_datetime(row.get("created_at")),
    )


def _schedule_to_row(schedule: Schedule) -> dict:
    return {
        "id": schedule.id,
        "collector_id": schedule.collector_id,
        "center_id": schedule.center_id,
        "vehicle_id": schedule.vehicle_id,
        "date": schedule.date.isoformat(),
        "time": schedule.time,
        "status": schedule.status.value,
        "request_ids": list(schedule.request_ids),
        "created_at": schedule.created_at.isoformat() if schedule.created_at else None,
    }


_REQUEST_FIELD_COLUMNS = {
    "waste_type": "waste_type",
    "quantity": "quantity",
    "collection_center_id": "collection_center_id",
    "collection_date": "collection_date",
    "collection_time": "collection_time",
    "status": "status",
}


def _serialize_value(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (RequestStatus, ScheduleStatus)):
        return value.value
    return value


class SupabaseStore(DocumentStore):
    """Store backed by Supabase tables through the PostgREST client."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def _execute(self, action: str, run: Callable[[], T]) -> T:
        try:
            return run()
        except APIError as exc:
            if str(getattr(exc, "code", "")) == UNIQUE_VIOLATION:
                if action in ("insert schedule", "update schedule"):
                    raise DuplicateKeyError(
                        "A schedule already exists for this collector at the selected date and time."
                    ) from exc
                raise DuplicateKeyError(f"Duplicate key on {action}.") from exc
            logger.error(f"Supabase {action} failed: {exc}")
            raise PersistenceError(f"Failed to {action}: {exc}") from exc
        except Exception as exc:
            logger.error(f"Supabase {action} failed: {exc}")
            raise PersistenceError(f"Failed to {action}: {exc}") from exc

    def _rows(self, action: str, run: Callable[[], Any]) -> list[dict]:
        response = self._execute(action, run)
        return list(response.data or [])

    # Waste requests

    def get_request(self, request_id: str) -> WasteRequest | None:
        rows = self._rows(
            "load waste request",
            lambda: self.client.table("waste_requests").select("*").eq("id", request_id).limit(1).execute(),
        )
        return _request_from_row(rows[0]) if rows else None

    def find_requests(
        self,
        *,
        ids: Sequence[str] | None = None,
        statuses: Iterable[RequestStatus] | None = None,
        resident_id: str | None = None,
    ) -> list[WasteRequest]:
        def run():
            query = self.client.table("waste_requests").select("*")
            if ids is not None:
                query = query.in_("id", list(ids))
            if statuses is not None:
                query = query.in_("status", [s.value for s in statuses])
            if resident_id is not None:
                query = query.eq("resident_id", resident_id)
            return query.execute()

        if ids is not None and not ids:
            return []
        return [_request_from_row(row) for row in self._rows("query waste requests", run)]

    def insert_request(self, request: WasteRequest) -> WasteRequest:
        row = {k: v for k, v in _request_to_row(request).items() if v is not None}
        rows = self._rows(
            "insert waste request",
            lambda: self.client.table("waste_requests").insert(row).execute(),
        )
        return _request_from_row(rows[0]) if rows else request

    def update_request(self, request_id: str, fields: dict[str, Any]) -> WasteRequest | None:
        payload = {_REQUEST_FIELD_COLUMNS[key]: _serialize_value(value) for key, value in fields.items()}
        rows = self._rows(
            "update waste request",
            lambda: self.client.table("waste_requests").update(payload).eq("id", request_id).execute(),
        )
        return _request_from_row(rows[0]) if rows else None

    def delete_request(self, request_id: str) -> bool:
        rows = self._rows(
            "delete waste request",
            lambda: self.client.table("waste_requests").delete().eq("id", request_id).execute(),
        )
        return bool(rows)

    def update_request_status(
        self,
        ids: Sequence[str],
        status: RequestStatus,
        *,
        expected: RequestStatus | None = None,
    ) -> list[str]:
        if not ids:
            return []

        def run():
            query = self.client.table("waste_requests").update({"status": status.value}).in_("id", list(ids))
            if expected is not None:
                query = query.eq("status", expected.value)
            return query.execute()

        return [str(row["id"]) for row in self._rows("update waste request status", run)]

    # Collection centers

    def list_centers(self) -> list[CollectionCenter]:
        rows = self._rows(
            "list collection centers",
            lambda: self.client.table("collection_centers").select("*").execute(),
        )
        return [_center_from_row(row) for row in rows]

    def get_center(self, center_id: str) -> CollectionCenter | None:
        rows = self._rows(
            "load collection center",
            lambda: self.client.table("collection_centers").select("*").eq("id", center_id).limit(1).execute(),
        )
        return _center_from_row(rows[0]) if rows else None

    def insert_center(self, center: CollectionCenter) -> CollectionCenter:
        row = _center_to_row(center)
        rows = self._rows(
            "insert collection center",
            lambda: self.client.table("collection_centers").insert(row).execute(),
        )
        return _center_from_row(rows[0]) if rows else center

    def save_center_allocation(
        self,
        center_id: str,
        allocation: Allocation,
        *,
        expected: Allocation,
    ) -> bool:
        payload = {
            "allocated_trucks": allocation.trucks,
            "allocated_staff": allocation.staff,
            "allocated_total_quantity": allocation.total_quantity,
        }
        rows = self._rows(
            "save center allocation",
            lambda: self.client.table("collection_centers")
            .update(payload)
            .eq("id", center_id)
            .eq("allocated_trucks", expected.trucks)
            .eq("allocated_staff", expected.staff)
            .execute(),
        )
        return bool(rows)

    # Collectors and vehicles

    def get_collector(self, collector_id: str) -> Collector | None:
        rows = self._rows(
            "load collector",
            lambda: self.client.table("collectors").select("*").eq("id", collector_id).limit(1).execute(),
        )
        return Collector(id=str(rows[0]["id"]), name=rows[0]["name"]) if rows else None

    def insert_collector(self, collector: Collector) -> Collector:
        self._execute(
            "insert collector",
            lambda: self.client.table("collectors").insert({"id": collector.id, "name": collector.name}).execute(),
        )
        return collector

    def get_vehicle(self, vehicle_id: str) -> Vehicle | None:
        rows = self._rows(
            "load vehicle",
            lambda: self.client.table("vehicles").select("*").eq("id", vehicle_id).limit(1).execute(),
        )
        return _vehicle_from_row(rows[0]) if rows else None

    def list_vehicles(self, center_id: str | None = None) -> list[Vehicle]:
        def run():
            query = self.client.table("vehicles").select("*")
            if center_id is not None:
                query = query.eq("center_id", center_id)
            return query.execute()

        return [_vehicle_from_row(row) for row in self._rows("list vehicles", run)]

    def insert_vehicle(self, vehicle: Vehicle) -> Vehicle:
        row = {
            "id": vehicle.id,
            "name": vehicle.name,
            "license_plate": vehicle.license_plate,
            "center_id": vehicle.center_id,
        }
        rows = self._rows("insert vehicle", lambda: self.client.table("vehicles").insert(row).execute())
        return _vehicle_from_row(rows[0]) if rows else vehicle

    def update_vehicle(self, vehicle_id: str, fields: dict[str, Any]) -> Vehicle | None:
        rows = self._rows(
            "update vehicle",
            lambda: self.client.table("vehicles").update(dict(fields)).eq("id", vehicle_id).execute(),
        )
        return _vehicle_from_row(rows[0]) if rows else None

    def delete_vehicle(self, vehicle_id: str) -> bool:
        rows = self._rows(
            "delete vehicle",
            lambda: self.client.table("vehicles").delete().eq("id", vehicle_id).execute(),
        )
        return bool(rows)

    # Schedules

    def get_schedule(self, schedule_id: str) -> Schedule | None:
        rows = self._rows(
            "load schedule",
            lambda: self.client.table("schedules").select("*").eq("id", schedule_id).limit(1).execute(),
        )
        return _schedule_from_row(rows[0]) if rows else None

    def find_schedules(
        self,
        *,
        collector_id: str | None = None,
        center_id: str | None = None,
    ) -> list[Schedule]:
        def run():
            query = self.client.table("schedules").select("*")
            if collector_id is not None:
                query = query.eq("collector_id", collector_id)
            if center_id is not None:
                query = query.eq("center_id", center_id)
            return query.order("date").execute()

        return [_schedule_from_row(row) for row in self._rows("query schedules", run)]

    def find_active_schedule(self, collector_id: str, date_key: str, time: str) -> Schedule | None:
        rows = self._rows(
            "check schedule slot",
            lambda: self.client.table("schedules")
            .select("*")
            .eq("collector_id", collector_id)
            .eq("date", date_key)
            .eq("time", time)
            .neq("status", ScheduleStatus.CANCELED.value)
            .limit(1)
            .execute(),
        )
        return _schedule_from_row(rows[0]) if rows else None

    def insert_schedule(self, schedule: Schedule) -> Schedule:
        row = {k: v for k, v in _schedule_to_row(schedule).items() if v is not None}
        rows = self._rows("insert schedule", lambda: self.client.table("schedules").insert(row).execute())
        return _schedule_from_row(rows[0]) if rows else schedule

    def update_schedule_status(self, schedule_id: str, status: ScheduleStatus) -> Schedule | None:
        rows = self._rows(
            "update schedule",
            lambda: self.client.table("schedules").update({"status": status.value}).eq("id", schedule_id).execute(),
        )
        return _schedule_from_row(rows[0]) if rows else None

    # Payments

    def insert_payment(self, payment: Payment) -> Payment:
        row = {
            "id": payment.id,
            "resident_id": payment.resident_id,
            "amount": payment.amount,
            "request_ids": list(payment.request_ids),
            "status": payment.status,
        }
        self._execute("insert payment", lambda: self.client.table("payments").insert(row).execute())
        return payment
