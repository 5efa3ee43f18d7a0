"""Vehicle endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, Path, status

from ...models.domain import Vehicle
from ...schemas.vehicles import VehicleCreate, VehicleModel, VehicleUpdate
from ...services.vehicles import VehicleService
from ..deps import get_vehicle_service

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


def _to_model(vehicle: Vehicle) -> VehicleModel:
    return VehicleModel.model_validate(asdict(vehicle))


@router.post("", response_model=VehicleModel, status_code=status.HTTP_201_CREATED)
def create_vehicle(payload: VehicleCreate, service: VehicleService = Depends(get_vehicle_service)) -> VehicleModel:
    return _to_model(service.create_vehicle(payload.name, payload.license_plate, payload.center_id))


@router.get("", response_model=List[VehicleModel], status_code=status.HTTP_200_OK)
def list_vehicles(service: VehicleService = Depends(get_vehicle_service)) -> List[VehicleModel]:
    return [_to_model(item) for item in service.list_vehicles()]


@router.get("/center/{center_id}", response_model=List[VehicleModel], status_code=status.HTTP_200_OK)
def list_center_vehicles(
    center_id: str = Path(..., description="Collection center identifier"),
    service: VehicleService = Depends(get_vehicle_service),
) -> List[VehicleModel]:
    return [_to_model(item) for item in service.list_by_center(center_id)]


@router.get("/{vehicle_id}", response_model=VehicleModel, status_code=status.HTTP_200_OK)
def get_vehicle(
    vehicle_id: str = Path(..., description="Vehicle identifier"),
    service: VehicleService = Depends(get_vehicle_service),
) -> VehicleModel:
    return _to_model(service.get_vehicle(vehicle_id))


@router.put("/{vehicle_id}", response_model=VehicleModel, status_code=status.HTTP_200_OK)
def update_vehicle(
    payload: VehicleUpdate,
    vehicle_id: str = Path(..., description="Vehicle identifier"),
    service: VehicleService = Depends(get_vehicle_service),
) -> VehicleModel:
    return _to_model(service.update_vehicle(vehicle_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{vehicle_id}", status_code=status.HTTP_200_OK)
def delete_vehicle(
    vehicle_id: str = Path(..., description="Vehicle identifier"),
    service: VehicleService = Depends(get_vehicle_service),
) -> dict:
    service.delete_vehicle(vehicle_id)
    return {"message": "Vehicle deleted successfully."}
