"""Resident waste request lifecycle outside of scheduling."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from ...errors import NotFoundError, ValidationError
from ...models.domain import DEFAULT_COLLECTION_TIME, RequestStatus, WasteRequest
from ...persistence.store import DocumentStore
from ..quantities import parse_quantity

logger = logging.getLogger(__name__)


def _validated_quantity(raw: Any) -> float:
    parsed = parse_quantity(raw)
    if not parsed.valid:
        raise ValidationError("quantity must be a non-negative number", missing=["quantity"])
    return parsed.value


def _validated_date(raw: Any) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw).strip()[:10])
    except ValueError as exc:
        raise ValidationError(f"Invalid collection date '{raw}'.", missing=["collection_date"]) from exc


def _validated_status(raw: Any) -> RequestStatus:
    try:
        return RequestStatus(raw)
    except ValueError as exc:
        allowed = ", ".join(status.value for status in RequestStatus)
        raise ValidationError(f"Unknown status '{raw}'. Allowed: {allowed}.") from exc


def _newest_first(requests: List[WasteRequest]) -> List[WasteRequest]:
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(requests, key=lambda r: r.created_at or epoch, reverse=True)


class RequestService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def _ensure_center(self, center_id: str) -> None:
        if self.store.get_center(center_id) is None:
            raise ValidationError("Invalid collection center selected.", missing=["collection_center_id"])

    def create_request(
        self,
        resident_id: str,
        waste_type: Optional[str],
        quantity: Any,
        collection_date: Any,
        collection_time: Optional[str],
        collection_center_id: Optional[str],
    ) -> WasteRequest:
        fields = {
            "waste_type": waste_type,
            "quantity": quantity,
            "collection_date": collection_date,
            "collection_time": collection_time,
            "collection_center_id": collection_center_id,
        }
        missing = [name for name, value in fields.items() if value is None or value == ""]
        if missing:
            raise ValidationError("All fields are required, including collection center.", missing=missing)

        request = WasteRequest(
            id=uuid.uuid4().hex,
            resident_id=resident_id,
            waste_type=waste_type,
            quantity=_validated_quantity(quantity),
            collection_center_id=collection_center_id,
            collection_date=_validated_date(collection_date),
            collection_time=str(collection_time).strip() or DEFAULT_COLLECTION_TIME,
            status=RequestStatus.PENDING,
            created_at=datetime.now(timezone.utc),
        )
        self._ensure_center(collection_center_id)
        created = self.store.insert_request(request)
        logger.info(f"Resident {resident_id} created waste request {created.id}")
        return created

    def get_request(self, request_id: str) -> WasteRequest:
        request = self.store.get_request(request_id)
        if request is None:
            raise NotFoundError("Waste request not found.")
        return request

    def update_request(self, request_id: str, changes: dict[str, Any]) -> WasteRequest:
        """Apply a partial update. Only recognised, non-None fields are used."""
        update: dict[str, Any] = {}
        if changes.get("waste_type") is not None:
            update["waste_type"] = changes["waste_type"]
        if changes.get("quantity") is not None:
            update["quantity"] = _validated_quantity(changes["quantity"])
        if changes.get("collection_date") is not None:
            update["collection_date"] = _validated_date(changes["collection_date"])
        if changes.get("collection_time") is not None:
            update["collection_time"] = changes["collection_time"]
        if changes.get("status") is not None:
            update["status"] = _validated_status(changes["status"])
        center_id = changes.get("collection_center_id")
        if center_id not in (None, ""):
            self._ensure_center(center_id)
            update["collection_center_id"] = center_id

        if not update:
            raise ValidationError("No valid fields provided to update.")

        updated = self.store.update_request(request_id, update)
        if updated is None:
            raise NotFoundError("Waste request not found.")
        return updated

    def delete_request(self, request_id: str) -> None:
        if not self.store.delete_request(request_id):
            raise NotFoundError("Waste request not found.")
        logger.info(f"Deleted waste request {request_id}")

    def list_for_resident(self, resident_id: str) -> List[WasteRequest]:
        return _newest_first(self.store.find_requests(resident_id=resident_id))

    def progress(self, resident_id: str) -> List[WasteRequest]:
        requests = self.store.find_requests(resident_id=resident_id)
        if not requests:
            raise NotFoundError("No waste requests found for this user.")
        return _newest_first(requests)

    def list_pending(self, center_id: Optional[str] = None) -> List[WasteRequest]:
        pending = self.store.find_requests(statuses=[RequestStatus.PENDING])
        if center_id:
            pending = [request for request in pending if request.collection_center_id == center_id]
        return _newest_first(pending)
