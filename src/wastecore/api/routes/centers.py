"""Collection center and collector administration endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, Path, status

from ...schemas.centers import CenterCreate, CenterModel, CollectorCreate, CollectorModel
from ...services.centers import CenterService
from ..deps import get_center_service

router = APIRouter(tags=["centers"])


@router.post("/centers", response_model=CenterModel, status_code=status.HTTP_201_CREATED)
def create_center(payload: CenterCreate, service: CenterService = Depends(get_center_service)) -> CenterModel:
    center = service.create_center(payload.name, max_trucks=payload.max_trucks, max_staff=payload.max_staff)
    return CenterModel.model_validate(asdict(center))


@router.get("/centers", response_model=List[CenterModel], status_code=status.HTTP_200_OK)
def list_centers(service: CenterService = Depends(get_center_service)) -> List[CenterModel]:
    return [CenterModel.model_validate(asdict(center)) for center in service.list_centers()]


@router.get("/centers/{center_id}", response_model=CenterModel, status_code=status.HTTP_200_OK)
def get_center(
    center_id: str = Path(..., description="Collection center identifier"),
    service: CenterService = Depends(get_center_service),
) -> CenterModel:
    return CenterModel.model_validate(asdict(service.get_center(center_id)))


@router.post("/collectors", response_model=CollectorModel, status_code=status.HTTP_201_CREATED)
def create_collector(payload: CollectorCreate, service: CenterService = Depends(get_center_service)) -> CollectorModel:
    return CollectorModel.model_validate(asdict(service.create_collector(payload.name)))
