import pytest
from fastapi.testclient import TestClient

from src.wastecore.errors import PersistenceError
from src.wastecore.main import create_app
from src.wastecore.persistence.memory import MemoryStore
from src.wastecore.services.payments import CheckoutSession


class DummyGateway:
    def __init__(self, sessions):
        self.sessions = sessions

    def create_session(self, product_name, unit_amount, quantity, metadata):
        session = CheckoutSession(
            id=f"cs_{len(self.sessions) + 1}",
            payment_status="paid",
            amount_total=unit_amount * quantity,
            metadata=dict(metadata),
            url="https://checkout.local/session",
        )
        self.sessions[session.id] = session
        return session

    def retrieve_session(self, session_id):
        return self.sessions[session_id]


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def api_client(store: MemoryStore) -> TestClient:
    return TestClient(create_app(store=store, checkout_gateway=None))


def _setup(client: TestClient, max_trucks: int | None = None) -> dict:
    center = client.post("/api/centers", json={"name": "North Depot", "maxTrucks": max_trucks})
    assert center.status_code == 201
    center_id = center.json()["id"]
    collector = client.post("/api/collectors", json={"name": "Ana"})
    assert collector.status_code == 201
    vehicle = client.post(
        "/api/vehicles",
        json={"name": "Truck 1", "licensePlate": "AB-101", "centerId": center_id},
    )
    assert vehicle.status_code == 201
    return {"center": center_id, "collector": collector.json()["id"], "vehicle": vehicle.json()["id"]}


def _create_request(client: TestClient, center_id: str, quantity, time: str = "09:00") -> str:
    response = client.post(
        "/api/requests",
        json={
            "residentId": "RES1",
            "wasteType": "Paper",
            "quantity": quantity,
            "collectionDate": "2024-06-01",
            "collectionTime": time,
            "collectionCenterId": center_id,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


def _schedule_payload(ids: dict, request_ids, time: str = "09:00") -> dict:
    return {
        "collectorId": ids["collector"],
        "centerId": ids["center"],
        "vehicleId": ids["vehicle"],
        "date": "2024-06-01",
        "time": time,
        "requestIds": request_ids,
    }


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}
    database = api_client.get("/api/health/database").json()
    assert database["connected"] is True
    assert database["backend"] == "MemoryStore"


def test_demand_allocation_and_scheduling_flow(api_client: TestClient):
    ids = _setup(api_client)
    first = _create_request(api_client, ids["center"], 1500)
    second = _create_request(api_client, ids["center"], "700", time="14:00")

    demand = api_client.get("/api/demand/centers").json()
    assert demand == [{"centerId": ids["center"], "totalQuantity": 2200.0}]

    peaks = api_client.get("/api/demand/peak-periods").json()
    assert peaks[0] == {"date": "2024-06-01", "time": "09:00", "center": "North Depot", "totalQuantity": 1500.0}

    allocation = api_client.post("/api/allocation/allocate-resources")
    assert allocation.status_code == 200
    body = allocation.json()
    assert body["failed"] == []
    assert body["centers"][0]["trucksAllocated"] == 3
    assert body["centers"][0]["staffAllocated"] == 6

    center = api_client.get(f"/api/centers/{ids['center']}").json()
    assert center["allocatedResources"]["trucks"] == 3

    created = api_client.post("/api/schedules", json=_schedule_payload(ids, [first]))
    assert created.status_code == 201
    schedule = created.json()["schedule"]
    assert schedule["status"] == "pending-acceptance"
    assert schedule["requestIds"] == [first]
    assert api_client.get(f"/api/requests/{first}").json()["status"] == "scheduled"

    clash = api_client.post("/api/schedules", json=_schedule_payload(ids, [second]))
    assert clash.status_code == 409
    assert api_client.get(f"/api/requests/{second}").json()["status"] == "pending"

    pending = api_client.get("/api/requests/pending", params={"centerId": ids["center"]}).json()
    assert [item["id"] for item in pending] == [second]

    accepted = api_client.patch(f"/api/schedules/{schedule['id']}/accept")
    assert accepted.json()["schedule"]["status"] == "accepted"

    canceled = api_client.patch(f"/api/schedules/{schedule['id']}/cancel")
    assert canceled.json()["schedule"]["status"] == "canceled"
    assert api_client.get(f"/api/requests/{first}").json()["status"] == "scheduled"

    rebooked = api_client.post("/api/schedules", json=_schedule_payload(ids, [second]))
    assert rebooked.status_code == 201


def test_allocation_never_decreases(api_client: TestClient):
    ids = _setup(api_client)
    request_id = _create_request(api_client, ids["center"], 2500)
    api_client.post("/api/allocation/allocate-resources")

    api_client.patch(f"/api/requests/{request_id}", json={"quantity": 100})
    body = api_client.post("/api/allocation/allocate-resources").json()

    assert body["centers"][0]["trucksAllocated"] == 3
    assert body["centers"][0]["totalQuantity"] == 100.0


def test_schedule_missing_fields_are_reported(api_client: TestClient):
    response = api_client.post("/api/schedules", json={"collectorId": "K1", "requestIds": ["R1"]})

    assert response.status_code == 400
    assert response.json()["missing"] == ["center_id", "vehicle_id", "date", "time"]


def test_same_slot_conflicts_whatever_center_and_vehicle(api_client: TestClient):
    ids = _setup(api_client)
    other = api_client.post("/api/centers", json={"name": "South Depot"}).json()["id"]
    first = _create_request(api_client, ids["center"], 10)
    second = _create_request(api_client, other, 10)
    assert api_client.post("/api/schedules", json=_schedule_payload(ids, [first])).status_code == 201

    response = api_client.post("/api/schedules", json={**_schedule_payload(ids, [second]), "centerId": other})

    assert response.status_code == 409
    assert api_client.get(f"/api/requests/{second}").json()["status"] == "pending"


def test_unknown_vehicle_is_rejected(api_client: TestClient):
    ids = _setup(api_client)
    request_id = _create_request(api_client, ids["center"], 10)

    response = api_client.post("/api/schedules", json={**_schedule_payload(ids, [request_id]), "vehicleId": "V9"})

    assert response.status_code == 400
    assert "Vehicle V9 not found" in response.json()["detail"]


def test_schedule_queries_keep_their_empty_result_contract(api_client: TestClient):
    assert api_client.get("/api/schedules/collector/nobody").status_code == 404
    center = api_client.get("/api/schedules/center/nowhere")
    assert center.status_code == 200
    assert center.json() == []
    assert api_client.patch("/api/schedules/missing/accept").status_code == 404


def test_selected_requests_alias_is_accepted(api_client: TestClient):
    ids = _setup(api_client)
    request_id = _create_request(api_client, ids["center"], 10)
    payload = _schedule_payload(ids, [])
    del payload["requestIds"]
    payload["selectedRequests"] = [request_id]

    response = api_client.post("/api/schedules", json=payload)

    assert response.status_code == 201
    listed = api_client.get("/api/schedules", params={"collectorId": ids["collector"]}).json()
    assert [item["requestIds"] for item in listed] == [[request_id]]


class HalfBrokenStore(MemoryStore):
    def save_center_allocation(self, center_id, allocation, *, expected):
        if self.get_center(center_id).name == "Broken Depot":
            raise PersistenceError("write timed out")
        return super().save_center_allocation(center_id, allocation, expected=expected)


def test_partial_allocation_reports_failed_centers():
    client = TestClient(create_app(store=HalfBrokenStore(), checkout_gateway=None))
    ids = _setup(client)
    broken = client.post("/api/centers", json={"name": "Broken Depot"}).json()["id"]
    _create_request(client, ids["center"], 1200)
    _create_request(client, broken, 300)

    response = client.post("/api/allocation/allocate-resources")

    assert response.status_code == 207
    body = response.json()
    assert [item["centerId"] for item in body["centers"]] == [ids["center"]]
    assert body["failed"][0]["centerId"] == broken
    assert "write timed out" in body["failed"][0]["error"]


def test_request_crud_validation(api_client: TestClient):
    ids = _setup(api_client)

    missing = api_client.post("/api/requests", json={"residentId": "RES1", "wasteType": "Glass"})
    assert missing.status_code == 400
    assert "quantity" in missing.json()["missing"]

    bad_center = api_client.post(
        "/api/requests",
        json={
            "residentId": "RES1",
            "wasteType": "Glass",
            "quantity": 3,
            "collectionDate": "2024-06-01",
            "collectionTime": "09:00",
            "collectionCenterId": "nope",
        },
    )
    assert bad_center.status_code == 400

    request_id = _create_request(api_client, ids["center"], 3)
    assert api_client.get("/api/requests/progress/RES1").status_code == 200
    assert api_client.get("/api/requests/progress/RES2").status_code == 404
    assert api_client.delete(f"/api/requests/{request_id}").status_code == 200
    assert api_client.get(f"/api/requests/{request_id}").status_code == 404


def test_payment_endpoints(api_client: TestClient):
    ids = _setup(api_client)
    request_id = _create_request(api_client, ids["center"], 2)

    processed = api_client.post(
        "/api/payments/process",
        json={"residentId": "RES1", "amount": 20, "wasteRequestIds": [request_id]},
    )
    assert processed.status_code == 201
    assert processed.json()["updatedCount"] == 1
    assert api_client.get(f"/api/requests/{request_id}").json()["status"] == "payment complete"

    approved = api_client.post("/api/payments/approve", json={"wasteRequestId": request_id})
    assert approved.json()["payment"]["amount"] == 20.0

    assert api_client.get("/api/payments/confirm", params={"sessionId": "cs_1"}).status_code == 502


def test_checkout_confirmation_with_gateway(store: MemoryStore):
    gateway = DummyGateway(
        {"cs_1": CheckoutSession(id="cs_1", payment_status="paid", amount_total=1500, metadata={"wasteRequestId": "R1"})}
    )
    client = TestClient(create_app(store=store, checkout_gateway=gateway))

    response = client.get("/api/payments/confirm", params={"sessionId": "cs_1"})

    assert response.status_code == 200
    assert response.json()["payment"]["amount"] == 15.0
    assert response.json()["payment"]["wasteRequests"] == ["R1"]


def test_checkout_session_round_trip(store: MemoryStore):
    client = TestClient(create_app(store=store, checkout_gateway=DummyGateway({})))
    ids = _setup(client)
    request_id = _create_request(client, ids["center"], 3)

    opened = client.post("/api/payments/create-checkout-session", json={"residentId": "RES1", "wasteRequestId": request_id})
    assert opened.status_code == 200
    assert opened.json() == {"id": "cs_1", "url": "https://checkout.local/session"}

    confirmed = client.get("/api/payments/confirm", params={"sessionId": "cs_1"})
    assert confirmed.status_code == 200
    assert confirmed.json()["payment"]["amount"] == 30.0
    assert client.get(f"/api/requests/{request_id}").json()["status"] == "payment complete"


def test_checkout_session_without_gateway(api_client: TestClient):
    ids = _setup(api_client)
    request_id = _create_request(api_client, ids["center"], 3)

    response = api_client.post("/api/payments/create-checkout-session", json={"wasteRequestId": request_id})

    assert response.status_code == 502
