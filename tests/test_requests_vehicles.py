from datetime import date, datetime, timezone

import pytest

from src.wastecore.errors import NotFoundError, ValidationError
from src.wastecore.models.domain import CollectionCenter, RequestStatus, WasteRequest
from src.wastecore.persistence.memory import MemoryStore
from src.wastecore.services.centers import CenterService
from src.wastecore.services.requests import RequestService
from src.wastecore.services.vehicles import VehicleService


@pytest.fixture
def store() -> MemoryStore:
    store = MemoryStore()
    store.insert_center(CollectionCenter(id="C1", name="North Depot"))
    store.insert_center(CollectionCenter(id="C2", name="South Depot"))
    return store


def test_create_request_normalises_fields(store: MemoryStore):
    request = RequestService(store).create_request("RES1", "Metal", "12.5", "2024-06-01T00:00:00", " 10:30 ", "C1")

    assert request.quantity == 12.5
    assert request.collection_date == date(2024, 6, 1)
    assert request.collection_time == "10:30"
    assert request.status == RequestStatus.PENDING


def test_create_request_lists_missing_fields(store: MemoryStore):
    with pytest.raises(ValidationError) as excinfo:
        RequestService(store).create_request("RES1", "Metal", None, "2024-06-01", "", None)

    assert excinfo.value.missing == ["quantity", "collection_time", "collection_center_id"]


@pytest.mark.parametrize("quantity", ["lots", -1, float("nan")])
def test_create_request_rejects_bad_quantity(store: MemoryStore, quantity):
    with pytest.raises(ValidationError):
        RequestService(store).create_request("RES1", "Metal", quantity, "2024-06-01", "09:00", "C1")


def test_update_request_is_partial(store: MemoryStore):
    service = RequestService(store)
    request = service.create_request("RES1", "Metal", 5, "2024-06-01", "09:00", "C1")

    updated = service.update_request(request.id, {"quantity": "7", "waste_type": None, "collection_center_id": "C2"})

    assert updated.quantity == 7.0
    assert updated.waste_type == "Metal"
    assert updated.collection_center_id == "C2"


def test_update_request_rejects_unknown_status_and_empty_changes(store: MemoryStore):
    service = RequestService(store)
    request = service.create_request("RES1", "Metal", 5, "2024-06-01", "09:00", "C1")

    with pytest.raises(ValidationError, match="Unknown status"):
        service.update_request(request.id, {"status": "lost"})
    with pytest.raises(ValidationError):
        service.update_request(request.id, {})
    with pytest.raises(NotFoundError):
        service.update_request("missing", {"quantity": 1})


def test_progress_is_newest_first(store: MemoryStore):
    for rid, hour in (("R1", 8), ("R2", 12)):
        store.insert_request(
            WasteRequest(
                id=rid,
                resident_id="RES1",
                waste_type="Paper",
                quantity=1,
                collection_date=None,
                created_at=datetime(2024, 6, 1, hour, tzinfo=timezone.utc),
            )
        )
    service = RequestService(store)

    assert [r.id for r in service.progress("RES1")] == ["R2", "R1"]
    assert service.list_for_resident("RES2") == []
    with pytest.raises(NotFoundError):
        service.progress("RES2")


def test_vehicle_lifecycle(store: MemoryStore):
    service = VehicleService(store)
    vehicle = service.create_vehicle("Truck 1", "AB-101", "C1")

    assert [v.id for v in service.list_by_center("C1")] == [vehicle.id]
    moved = service.update_vehicle(vehicle.id, {"center_id": "C2", "name": ""})
    assert moved.center_id == "C2"
    assert moved.name == "Truck 1"
    assert service.list_by_center("C1") == []

    service.delete_vehicle(vehicle.id)
    with pytest.raises(NotFoundError):
        service.get_vehicle(vehicle.id)


def test_vehicle_requires_known_center(store: MemoryStore):
    service = VehicleService(store)

    with pytest.raises(ValidationError) as excinfo:
        service.create_vehicle("Truck 1", None, "C1")
    assert excinfo.value.missing == ["license_plate"]
    with pytest.raises(ValidationError):
        service.create_vehicle("Truck 1", "AB-101", "C9")


def test_center_setup(store: MemoryStore):
    service = CenterService(store)
    center = service.create_center("  East Depot ", max_trucks=4)

    assert center.name == "East Depot"
    assert center.resources.trucks == 4
    assert [c.name for c in service.list_centers()] == ["East Depot", "North Depot", "South Depot"]
    with pytest.raises(ValidationError):
        service.create_center("West", max_staff=-1)
    with pytest.raises(ValidationError):
        service.create_collector(" ")
