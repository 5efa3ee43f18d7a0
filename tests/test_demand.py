from datetime import date, datetime, timezone

from src.wastecore.models.domain import CollectionCenter, RequestStatus, WasteRequest
from src.wastecore.persistence.memory import MemoryStore
from src.wastecore.services.demand import UNKNOWN_CENTER, DemandService, aggregate_by_slot, aggregate_demand


def _request(
    rid: str,
    quantity,
    center: str | None = "C1",
    day: date | None = date(2024, 6, 1),
    time: str = "09:00",
    status: RequestStatus = RequestStatus.PENDING,
) -> WasteRequest:
    return WasteRequest(
        id=rid,
        resident_id="RES1",
        waste_type="Plastic",
        quantity=quantity,
        collection_center_id=center,
        collection_date=day,
        collection_time=time,
        status=status,
    )


def test_aggregate_demand_sums_per_center():
    requests = [
        _request("R1", 400, center="C1"),
        _request("R2", "350", center="C1"),
        _request("R3", 1200.5, center="C2"),
    ]

    totals = aggregate_demand(requests)

    assert totals == {"C1": 750.0, "C2": 1200.5}


def test_aggregate_demand_treats_unparsable_quantity_as_zero():
    requests = [_request("R1", "abc", center="C1"), _request("R2", 100, center="C1"), _request("R3", None, center="C2")]

    totals = aggregate_demand(requests)

    assert totals == {"C1": 100.0, "C2": 0.0}


def test_aggregate_demand_skips_requests_without_center():
    totals = aggregate_demand([_request("R1", 500, center=None), _request("R2", 10, center="C1")])

    assert totals == {"C1": 10.0}


def test_aggregate_demand_counts_every_status():
    requests = [
        _request("R1", 100, status=RequestStatus.PENDING),
        _request("R2", 100, status=RequestStatus.SCHEDULED),
        _request("R3", 100, status=RequestStatus.PAYMENT_COMPLETE),
    ]

    assert aggregate_demand(requests) == {"C1": 300.0}


def test_empty_input_yields_empty_results():
    assert aggregate_demand([]) == {}
    assert aggregate_by_slot([]) == []


def test_aggregate_by_slot_groups_and_sorts_descending():
    requests = [
        _request("R1", 100, center="C1", time="09:00"),
        _request("R2", 200, center="C1", time=" 09:00 "),
        _request("R3", 1000, center="C2", time="09:00"),
        _request("R4", 50, center="C1", time="14:00"),
    ]
    names = {"C1": "North Depot", "C2": "South Depot"}

    periods = aggregate_by_slot(requests, names)

    assert [(p.center, p.time, p.total_quantity) for p in periods] == [
        ("South Depot", "09:00", 1000.0),
        ("North Depot", "09:00", 300.0),
        ("North Depot", "14:00", 50.0),
    ]
    assert all(p.date == "2024-06-01" for p in periods)


def test_aggregate_by_slot_defaults_time_and_center_name():
    requests = [
        _request("R1", 10, center=None, time=""),
        _request("R2", 20, center="GONE", time="   "),
    ]

    periods = aggregate_by_slot(requests, {"C1": "North Depot"})

    assert len(periods) == 1
    assert periods[0].center == UNKNOWN_CENTER
    assert periods[0].time == "00:00"
    assert periods[0].total_quantity == 30.0


def test_aggregate_by_slot_uses_date_part_only():
    requests = [
        _request("R1", 5, day=datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)),
        _request("R2", 7, day=date(2024, 6, 1)),
    ]

    periods = aggregate_by_slot(requests, {"C1": "North Depot"})

    assert len(periods) == 1
    assert periods[0].date == "2024-06-01"
    assert periods[0].total_quantity == 12.0


def test_aggregate_by_slot_survives_bad_quantity():
    periods = aggregate_by_slot([_request("R1", "abc"), _request("R2", 40)], {"C1": "North Depot"})

    assert periods[0].total_quantity == 40.0


def test_demand_service_reads_from_store():
    store = MemoryStore()
    store.insert_center(CollectionCenter(id="C1", name="North Depot"))
    store.insert_request(_request("R1", 600))
    store.insert_request(_request("R2", "400"))

    service = DemandService(store)

    assert service.center_totals() == {"C1": 1000.0}
    periods = service.peak_periods()
    assert len(periods) == 1
    assert periods[0].center == "North Depot"
    assert periods[0].total_quantity == 1000.0


def test_demand_service_peak_periods_empty_store():
    assert DemandService(MemoryStore()).peak_periods() == []
