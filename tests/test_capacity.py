import threading

import pytest

from src.wastecore.errors import PersistenceError
from src.wastecore.models.domain import Allocation, CollectionCenter, ResourceCaps, WasteRequest
from src.wastecore.persistence.memory import MemoryStore
from src.wastecore.services.capacity import AllocationPlanner, PlannerConfig, plan_allocation


def _center(
    cid: str = "C1",
    name: str = "North Depot",
    max_trucks: int | None = None,
    max_staff: int | None = None,
    trucks: int = 0,
    staff: int = 0,
) -> CollectionCenter:
    return CollectionCenter(
        id=cid,
        name=name,
        resources=ResourceCaps(trucks=max_trucks, staff=max_staff),
        allocated=Allocation(trucks=trucks, staff=staff),
    )


def _request(rid: str, center: str, quantity) -> WasteRequest:
    return WasteRequest(
        id=rid,
        resident_id="RES1",
        waste_type="Metal",
        quantity=quantity,
        collection_center_id=center,
        collection_date=None,
    )


def test_uncapped_center_gets_ceil_of_demand():
    allocation = plan_allocation(_center(), 2500, PlannerConfig(truck_capacity=1000, staff_per_truck=2))

    assert allocation == Allocation(trucks=3, staff=6, total_quantity=2500.0)


def test_exact_multiple_does_not_round_up():
    allocation = plan_allocation(_center(), 3000)

    assert (allocation.trucks, allocation.staff) == (3, 6)


def test_zero_demand_needs_nothing():
    allocation = plan_allocation(_center(), 0)

    assert (allocation.trucks, allocation.staff) == (0, 0)


def test_existing_allocation_is_never_reduced():
    allocation = plan_allocation(_center(trucks=5, staff=10), 2500)

    assert allocation.trucks == 5
    assert allocation.staff == 10
    assert allocation.total_quantity == 2500.0


def test_cap_limits_allocation_below_demand():
    allocation = plan_allocation(_center(max_trucks=2, max_staff=3), 5000)

    assert allocation.trucks == 2
    assert allocation.staff == 3


def test_caps_apply_independently():
    allocation = plan_allocation(_center(max_trucks=2), 5000)

    assert allocation.trucks == 2
    assert allocation.staff == 10


def test_ratchet_beats_cap_lowered_after_allocation():
    allocation = plan_allocation(_center(max_trucks=1, max_staff=2, trucks=4, staff=8), 5000)

    assert allocation.trucks == 4
    assert allocation.staff == 8


def test_custom_constants():
    allocation = plan_allocation(_center(), 1200, PlannerConfig(truck_capacity=500, staff_per_truck=3))

    assert (allocation.trucks, allocation.staff) == (3, 9)


@pytest.mark.parametrize("capacity, crew", [(0, 2), (1000, 0), (-1, 2)])
def test_config_rejects_non_positive_constants(capacity, crew):
    with pytest.raises(ValueError):
        PlannerConfig(truck_capacity=capacity, staff_per_truck=crew)


def _seeded_store() -> MemoryStore:
    store = MemoryStore()
    store.insert_center(_center("C1", "North Depot"))
    store.insert_center(_center("C2", "South Depot", max_trucks=1))
    store.insert_center(_center("C3", "Quiet Depot", trucks=2, staff=4))
    store.insert_request(_request("R1", "C1", 1500))
    store.insert_request(_request("R2", "C1", "abc"))
    store.insert_request(_request("R3", "C2", "2500"))
    store.insert_request(_request("R4", None, 9000))
    return store


def test_allocate_all_persists_every_center():
    store = _seeded_store()
    planner = AllocationPlanner(store, PlannerConfig(), max_workers=2)

    batch = planner.allocate_all()

    assert not batch.failed
    by_id = {item.center_id: item for item in batch.results}
    assert (by_id["C1"].trucks_allocated, by_id["C1"].staff_allocated, by_id["C1"].total_quantity) == (2, 4, 1500.0)
    assert (by_id["C2"].trucks_allocated, by_id["C2"].staff_allocated) == (1, 6)
    assert (by_id["C3"].trucks_allocated, by_id["C3"].staff_allocated, by_id["C3"].total_quantity) == (2, 4, 0.0)

    stored = store.get_center("C1").allocated
    assert stored == Allocation(trucks=2, staff=4, total_quantity=1500.0)


def test_repeated_runs_are_monotonic():
    store = _seeded_store()
    planner = AllocationPlanner(store, PlannerConfig())
    planner.allocate_all()

    store.delete_request("R1")
    batch = planner.allocate_all()

    c1 = next(item for item in batch.results if item.center_id == "C1")
    assert c1.trucks_allocated == 2
    assert c1.total_quantity == 0.0


def test_allocate_all_with_no_centers():
    batch = AllocationPlanner(MemoryStore(), PlannerConfig()).allocate_all()

    assert batch.results == []
    assert not batch.partial


class FlakyStore(MemoryStore):
    def __init__(self, failing_center: str) -> None:
        super().__init__()
        self.failing_center = failing_center

    def save_center_allocation(self, center_id, allocation, *, expected):
        if center_id == self.failing_center:
            raise PersistenceError("write timed out")
        return super().save_center_allocation(center_id, allocation, expected=expected)


def test_one_failing_center_does_not_abort_siblings():
    store = FlakyStore(failing_center="C2")
    store.insert_center(_center("C1", "North Depot"))
    store.insert_center(_center("C2", "South Depot"))
    store.insert_request(_request("R1", "C1", 1000))
    store.insert_request(_request("R2", "C2", 1000))

    batch = AllocationPlanner(store, PlannerConfig()).allocate_all()

    assert batch.partial
    assert [item.center_id for item in batch.failed] == ["C2"]
    assert "write timed out" in batch.failed[0].error
    assert store.get_center("C1").allocated.trucks == 1
    assert store.get_center("C2").allocated.trucks == 0


class RacingStore(MemoryStore):
    """Simulates another writer bumping the allocation before our first commit."""

    def __init__(self, competing: Allocation, races: int = 1) -> None:
        super().__init__()
        self.competing = competing
        self.races = races
        self.attempts = 0

    def save_center_allocation(self, center_id, allocation, *, expected):
        self.attempts += 1
        if self.races > 0:
            self.races -= 1
            super().save_center_allocation(center_id, self.competing, expected=expected)
        return super().save_center_allocation(center_id, allocation, expected=expected)


def test_lost_compare_and_set_is_retried_against_fresh_state():
    store = RacingStore(competing=Allocation(trucks=7, staff=14, total_quantity=7000))
    store.insert_center(_center("C1"))

    outcome = AllocationPlanner(store, PlannerConfig()).allocate_center("C1", 2000)

    assert store.attempts == 2
    assert (outcome.trucks_allocated, outcome.staff_allocated) == (7, 14)
    assert store.get_center("C1").allocated.trucks == 7


class StaleStore(MemoryStore):
    def save_center_allocation(self, center_id, allocation, *, expected):
        return False


def test_gives_up_after_max_attempts():
    store = StaleStore()
    store.insert_center(_center("C1"))
    store.insert_request(_request("R1", "C1", 500))
    planner = AllocationPlanner(store, PlannerConfig(), max_attempts=2)

    batch = planner.allocate_all()

    assert len(batch.failed) == 1
    assert "gave up after 2 attempts" in batch.failed[0].error


def test_concurrent_batches_keep_allocation_consistent():
    store = _seeded_store()
    errors = []

    def run():
        batch = AllocationPlanner(store, PlannerConfig(), max_workers=3).allocate_all()
        errors.extend(batch.failed)

    threads = [threading.Thread(target=run) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert store.get_center("C1").allocated == Allocation(trucks=2, staff=4, total_quantity=1500.0)


def test_uncapped_staff_still_grows_past_existing_allocation():
    allocation = plan_allocation(_center(max_trucks=1, trucks=4, staff=8), 5000)

    assert allocation.trucks == 4
    assert allocation.staff == 10
