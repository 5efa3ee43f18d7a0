"""Truck and staff allocation derived from per-center demand."""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...config import settings
from ...errors import NotFoundError, PersistenceError
from ...models.domain import Allocation, CollectionCenter
from ...persistence.store import DocumentStore
from ..demand.aggregator import aggregate_demand
from ..quantities import quantity_or_zero

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlannerConfig:
    truck_capacity: int = 1000
    staff_per_truck: int = 2

    def __post_init__(self) -> None:
        if self.truck_capacity <= 0:
            raise ValueError("truck_capacity must be > 0")
        if self.staff_per_truck <= 0:
            raise ValueError("staff_per_truck must be > 0")

    @classmethod
    def from_settings(cls) -> "PlannerConfig":
        return cls(truck_capacity=settings.truck_capacity, staff_per_truck=settings.staff_per_truck)


def plan_allocation(
    center: CollectionCenter,
    total_quantity: float,
    config: PlannerConfig | None = None,
) -> Allocation:
    """Compute the next allocation for ``center``.

    Demand is capped by the center's configured resources, and the result never
    drops below what is already allocated.
    """
    config = config or PlannerConfig()
    total = quantity_or_zero(total_quantity)

    trucks_needed = math.ceil(total / config.truck_capacity)
    staff_needed = trucks_needed * config.staff_per_truck

    caps = center.resources
    max_trucks = caps.trucks if caps.trucks is not None else trucks_needed
    max_staff = caps.staff if caps.staff is not None else staff_needed

    existing = center.allocated
    trucks_final = max(existing.trucks, min(max_trucks, trucks_needed))
    staff_final = max(existing.staff, min(max_staff, staff_needed))
    return Allocation(trucks=trucks_final, staff=staff_final, total_quantity=total)


class CenterLockRegistry:
    """One lock per center id, created on first use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def get(self, center_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(center_id)
            if lock is None:
                lock = self._locks[center_id] = threading.Lock()
            return lock


_center_locks = CenterLockRegistry()


@dataclass(slots=True)
class AllocationOutcome:
    center_id: str
    center_name: str
    total_quantity: float
    trucks_allocated: Optional[int] = None
    staff_allocated: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class AllocationBatch:
    results: List[AllocationOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[AllocationOutcome]:
        return [item for item in self.results if item.ok]

    @property
    def failed(self) -> List[AllocationOutcome]:
        return [item for item in self.results if not item.ok]

    @property
    def partial(self) -> bool:
        return bool(self.failed) and bool(self.succeeded)


class AllocationPlanner:
    """Runs the allocation batch over every center.

    Each center is its own unit of work. A center's read-modify-write holds
    that center's lock and commits through a compare-and-set, so concurrent
    runs in other processes are detected and retried.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: PlannerConfig | None = None,
        *,
        max_workers: int | None = None,
        max_attempts: int | None = None,
        locks: CenterLockRegistry | None = None,
    ) -> None:
        self.store = store
        self.config = config or PlannerConfig.from_settings()
        self.max_workers = max_workers or settings.allocation_max_workers
        self.max_attempts = max_attempts or settings.allocation_max_attempts
        self.locks = locks or _center_locks

    def allocate_center(self, center_id: str, total_quantity: float) -> AllocationOutcome:
        with self.locks.get(center_id):
            for attempt in range(1, self.max_attempts + 1):
                center = self.store.get_center(center_id)
                if center is None:
                    raise NotFoundError(f"Collection center {center_id} not found.")
                allocation = plan_allocation(center, total_quantity, self.config)
                if self.store.save_center_allocation(center_id, allocation, expected=center.allocated):
                    return AllocationOutcome(
                        center_id=center.id,
                        center_name=center.name,
                        total_quantity=allocation.total_quantity,
                        trucks_allocated=allocation.trucks,
                        staff_allocated=allocation.staff,
                    )
                logger.warning(
                    f"Allocation for center {center_id} changed during update (attempt {attempt}/{self.max_attempts})"
                )
        raise PersistenceError(
            f"Allocation for center {center_id} kept changing concurrently; gave up after {self.max_attempts} attempts."
        )

    def _allocate_safely(self, center: CollectionCenter, total_quantity: float) -> AllocationOutcome:
        try:
            return self.allocate_center(center.id, total_quantity)
        except Exception as exc:
            logger.error(f"Allocation failed for center {center.id} ({center.name}): {exc}")
            return AllocationOutcome(
                center_id=center.id,
                center_name=center.name,
                total_quantity=total_quantity,
                error=str(exc),
            )

    def allocate_all(self) -> AllocationBatch:
        totals = aggregate_demand(self.store.find_requests())
        centers = self.store.list_centers()
        logger.info(f"Allocating resources for {len(centers)} center(s)")

        if not centers:
            return AllocationBatch()

        workers = max(1, min(self.max_workers, len(centers)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._allocate_safely, center, totals.get(center.id, 0.0))
                for center in centers
            ]
            batch = AllocationBatch(results=[future.result() for future in futures])

        if batch.failed:
            logger.warning(
                f"Allocation batch finished with {len(batch.failed)} failed and {len(batch.succeeded)} updated center(s)"
            )
        else:
            logger.info(f"Allocation batch updated {len(batch.succeeded)} center(s)")
        return batch
