"""Administrative setup of collection centers and collectors."""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from ..errors import NotFoundError, ValidationError
from ..models.domain import CollectionCenter, Collector, ResourceCaps
from ..persistence.store import DocumentStore

logger = logging.getLogger(__name__)


class CenterService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def create_center(
        self,
        name: Optional[str],
        *,
        max_trucks: Optional[int] = None,
        max_staff: Optional[int] = None,
    ) -> CollectionCenter:
        if not name or not name.strip():
            raise ValidationError("Center name is required.", missing=["name"])
        for label, value in (("max_trucks", max_trucks), ("max_staff", max_staff)):
            if value is not None and value < 0:
                raise ValidationError(f"{label} must be >= 0")
        center = self.store.insert_center(
            CollectionCenter(
                id=uuid.uuid4().hex,
                name=name.strip(),
                resources=ResourceCaps(trucks=max_trucks, staff=max_staff),
            )
        )
        logger.info(f"Created collection center {center.id} ({center.name})")
        return center

    def get_center(self, center_id: str) -> CollectionCenter:
        center = self.store.get_center(center_id)
        if center is None:
            raise NotFoundError("Collection center not found.")
        return center

    def list_centers(self) -> List[CollectionCenter]:
        return sorted(self.store.list_centers(), key=lambda center: center.name.lower())

    def create_collector(self, name: Optional[str]) -> Collector:
        if not name or not name.strip():
            raise ValidationError("Collector name is required.", missing=["name"])
        collector = self.store.insert_collector(Collector(id=uuid.uuid4().hex, name=name.strip()))
        logger.info(f"Registered collector {collector.id}")
        return collector
