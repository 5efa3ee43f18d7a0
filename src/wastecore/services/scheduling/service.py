"""Schedule creation, status transitions and query views."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, List, Sequence

from ...errors import ConflictError, NotFoundError, PersistenceError, ValidationError, WasteCoreError
from ...models.domain import RequestStatus, Schedule, ScheduleStatus
from ...persistence.store import DocumentStore
from .validation import EntityValidator, StoreEntityValidator

SLOT_TAKEN_MESSAGE = "A schedule already exists for this collector at the selected date and time."
NOT_PENDING_MESSAGE = "Some selected requests are invalid or not pending."

logger = logging.getLogger(__name__)


def _parse_schedule_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as exc:
        raise ValidationError(f"Invalid date '{value}'; expected YYYY-MM-DD.", missing=["date"]) from exc


def _sorted(schedules: List[Schedule]) -> List[Schedule]:
    return sorted(schedules, key=lambda s: (s.date, s.time, s.created_at or datetime.min.replace(tzinfo=timezone.utc)))


class SchedulingService:
    """Books collectors against centers, vehicles and slots.

    The pre-check for an existing booking only produces a friendly error; the
    store's uniqueness constraint on active (collector, date, time) slots is
    what rejects concurrent double bookings.
    """

    def __init__(self, store: DocumentStore, validator: EntityValidator | None = None) -> None:
        self.store = store
        self.validator = validator or StoreEntityValidator(store)

    def create_schedule(
        self,
        collector_id: str | None,
        center_id: str | None,
        vehicle_id: str | None,
        date: Any,
        time: str | None,
        request_ids: Sequence[str] | None,
    ) -> Schedule:
        fields = {
            "collector_id": collector_id,
            "center_id": center_id,
            "vehicle_id": vehicle_id,
            "date": date,
            "time": time,
        }
        missing = [name for name, value in fields.items() if value is None or not str(value).strip()]
        if missing:
            raise ValidationError(
                "collectorId, centerId, vehicleId, date and time are required.",
                missing=missing,
            )
        if not request_ids:
            raise ValidationError("Select at least one pending waste request.", missing=["request_ids"])

        slot_date = _parse_schedule_date(date)
        slot_time = str(time).strip()
        ids = [str(request_id) for request_id in request_ids]

        result = self.validator.validate_entities(collector_id, center_id, vehicle_id)
        if not result.is_valid:
            raise ValidationError(result.message)

        if self.store.find_active_schedule(collector_id, slot_date.isoformat(), slot_time) is not None:
            raise ConflictError(SLOT_TAKEN_MESSAGE)

        pending = self.store.find_requests(ids=ids, statuses=[RequestStatus.PENDING])
        if len(pending) != len(ids):
            raise ConflictError(NOT_PENDING_MESSAGE)

        claimed = self.store.update_request_status(ids, RequestStatus.SCHEDULED, expected=RequestStatus.PENDING)
        if len(claimed) != len(ids):
            self._release(claimed)
            raise ConflictError(NOT_PENDING_MESSAGE)

        schedule = Schedule(
            id=uuid.uuid4().hex,
            collector_id=collector_id,
            center_id=center_id,
            vehicle_id=vehicle_id,
            date=slot_date,
            time=slot_time,
            request_ids=ids,
            status=ScheduleStatus.PENDING_ACCEPTANCE,
            created_at=datetime.now(timezone.utc),
        )
        try:
            created = self.store.insert_schedule(schedule)
        except ConflictError as exc:
            self._release(claimed)
            raise ConflictError(SLOT_TAKEN_MESSAGE) from exc
        except Exception as exc:
            self._release(claimed)
            if isinstance(exc, PersistenceError):
                raise
            raise PersistenceError(f"Failed to create schedule: {exc}") from exc

        logger.info(
            f"Created schedule {created.id} for collector {collector_id} on {slot_date.isoformat()} {slot_time} "
            f"with {len(ids)} request(s)"
        )
        return created

    def _release(self, request_ids: Sequence[str]) -> None:
        """Return claimed requests to pending after a failed schedule write."""
        if not request_ids:
            return
        try:
            released = self.store.update_request_status(
                request_ids, RequestStatus.PENDING, expected=RequestStatus.SCHEDULED
            )
        except WasteCoreError as exc:
            logger.error(f"Failed to release claimed requests {list(request_ids)}: {exc}")
            raise PersistenceError(
                f"Schedule was not created and claimed requests could not be released: {exc}"
            ) from exc
        logger.warning(f"Released {len(released)} claimed request(s) back to pending")

    def _set_status(self, schedule_id: str, status: ScheduleStatus) -> Schedule:
        if not schedule_id:
            raise ValidationError("Schedule ID is required.", missing=["schedule_id"])
        updated = self.store.update_schedule_status(schedule_id, status)
        if updated is None:
            raise NotFoundError("Schedule not found.")
        logger.info(f"Schedule {schedule_id} marked {status.value}")
        return updated

    def accept_schedule(self, schedule_id: str) -> Schedule:
        return self._set_status(schedule_id, ScheduleStatus.ACCEPTED)

    def cancel_schedule(self, schedule_id: str) -> Schedule:
        # Referenced requests keep their status.
        return self._set_status(schedule_id, ScheduleStatus.CANCELED)

    def find_by_collector(self, collector_id: str) -> List[Schedule]:
        if not collector_id:
            raise ValidationError("Collector ID is required.", missing=["collector_id"])
        schedules = self.store.find_schedules(collector_id=collector_id)
        if not schedules:
            raise NotFoundError("No schedules found for this collector.")
        return _sorted(schedules)

    def find_by_center(self, center_id: str) -> List[Schedule]:
        if not center_id:
            raise ValidationError("Center ID is required.", missing=["center_id"])
        return _sorted(self.store.find_schedules(center_id=center_id))

    def find_all(self) -> List[Schedule]:
        return _sorted(self.store.find_schedules())
