"""FastAPI dependency providers.

The store and the checkout gateway are built once in ``create_app`` and kept
on ``app.state``; services are cheap wrappers constructed per request.
"""

from __future__ import annotations

from fastapi import Depends, Request

from ..config import settings
from ..persistence.store import DocumentStore
from ..services.capacity import AllocationPlanner
from ..services.centers import CenterService
from ..services.demand import DemandService
from ..services.payments import PaymentService
from ..services.requests import RequestService
from ..services.scheduling import SchedulingService
from ..services.vehicles import VehicleService


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_demand_service(store: DocumentStore = Depends(get_store)) -> DemandService:
    return DemandService(store)


def get_allocation_planner(store: DocumentStore = Depends(get_store)) -> AllocationPlanner:
    return AllocationPlanner(store)


def get_scheduling_service(store: DocumentStore = Depends(get_store)) -> SchedulingService:
    return SchedulingService(store)


def get_request_service(store: DocumentStore = Depends(get_store)) -> RequestService:
    return RequestService(store)


def get_vehicle_service(store: DocumentStore = Depends(get_store)) -> VehicleService:
    return VehicleService(store)


def get_center_service(store: DocumentStore = Depends(get_store)) -> CenterService:
    return CenterService(store)


def get_payment_service(request: Request, store: DocumentStore = Depends(get_store)) -> PaymentService:
    return PaymentService(store, gateway=request.app.state.checkout_gateway, prices=settings.waste_prices)
