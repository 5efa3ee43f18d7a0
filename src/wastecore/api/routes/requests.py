"""Waste request endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, Path, Query, status

from ...models.domain import WasteRequest
from ...schemas.requests import WasteRequestCreate, WasteRequestModel, WasteRequestUpdate
from ...services.requests import RequestService
from ..deps import get_request_service

router = APIRouter(prefix="/requests", tags=["requests"])


def _to_model(request: WasteRequest) -> WasteRequestModel:
    return WasteRequestModel.model_validate(asdict(request))


@router.post("", response_model=WasteRequestModel, status_code=status.HTTP_201_CREATED)
def create_waste_request(
    payload: WasteRequestCreate,
    service: RequestService = Depends(get_request_service),
) -> WasteRequestModel:
    created = service.create_request(
        resident_id=payload.resident_id,
        waste_type=payload.waste_type,
        quantity=payload.quantity,
        collection_date=payload.collection_date,
        collection_time=payload.collection_time,
        collection_center_id=payload.collection_center_id,
    )
    return _to_model(created)


@router.get("", response_model=List[WasteRequestModel], status_code=status.HTTP_200_OK)
def list_resident_requests(
    resident_id: str = Query(..., alias="residentId", description="Resident whose requests to list"),
    service: RequestService = Depends(get_request_service),
) -> List[WasteRequestModel]:
    return [_to_model(item) for item in service.list_for_resident(resident_id)]


@router.get("/pending", response_model=List[WasteRequestModel], status_code=status.HTTP_200_OK)
def list_pending_requests(
    center_id: str | None = Query(default=None, alias="centerId", description="Optional center filter"),
    service: RequestService = Depends(get_request_service),
) -> List[WasteRequestModel]:
    return [_to_model(item) for item in service.list_pending(center_id)]


@router.get("/progress/{resident_id}", response_model=List[WasteRequestModel], status_code=status.HTTP_200_OK)
def get_request_progress(
    resident_id: str = Path(..., description="Resident identifier"),
    service: RequestService = Depends(get_request_service),
) -> List[WasteRequestModel]:
    return [_to_model(item) for item in service.progress(resident_id)]


@router.get("/{request_id}", response_model=WasteRequestModel, status_code=status.HTTP_200_OK)
def get_waste_request(
    request_id: str = Path(..., description="Waste request identifier"),
    service: RequestService = Depends(get_request_service),
) -> WasteRequestModel:
    return _to_model(service.get_request(request_id))


@router.patch("/{request_id}", response_model=WasteRequestModel, status_code=status.HTTP_200_OK)
def update_waste_request(
    payload: WasteRequestUpdate,
    request_id: str = Path(..., description="Waste request identifier"),
    service: RequestService = Depends(get_request_service),
) -> WasteRequestModel:
    return _to_model(service.update_request(request_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{request_id}", status_code=status.HTTP_200_OK)
def delete_waste_request(
    request_id: str = Path(..., description="Waste request identifier"),
    service: RequestService = Depends(get_request_service),
) -> dict:
    service.delete_request(request_id)
    return {"message": "Waste request deleted successfully."}
