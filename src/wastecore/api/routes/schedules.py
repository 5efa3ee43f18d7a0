"""Collector schedule endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, Path, Query, status

from ...models.domain import Schedule
from ...schemas.scheduling import ScheduleCreateRequest, ScheduleEnvelope, ScheduleModel
from ...services.scheduling import SchedulingService
from ..deps import get_scheduling_service

router = APIRouter(prefix="/schedules", tags=["schedules"])


def _to_model(schedule: Schedule) -> ScheduleModel:
    return ScheduleModel.model_validate(asdict(schedule))


@router.post("", response_model=ScheduleEnvelope, status_code=status.HTTP_201_CREATED)
def create_schedule(
    payload: ScheduleCreateRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> ScheduleEnvelope:
    schedule = service.create_schedule(
        collector_id=payload.collector_id,
        center_id=payload.center_id,
        vehicle_id=payload.vehicle_id,
        date=payload.date,
        time=payload.time,
        request_ids=payload.request_ids,
    )
    return ScheduleEnvelope(message="Schedule created successfully.", schedule=_to_model(schedule))


@router.get("", response_model=List[ScheduleModel], status_code=status.HTTP_200_OK)
def list_schedules(
    collector_id: str | None = Query(default=None, alias="collectorId", description="Only this collector's schedules"),
    center_id: str | None = Query(default=None, alias="centerId", description="Only this center's schedules"),
    service: SchedulingService = Depends(get_scheduling_service),
) -> List[ScheduleModel]:
    if collector_id:
        schedules = service.find_by_collector(collector_id)
    elif center_id:
        schedules = service.find_by_center(center_id)
    else:
        schedules = service.find_all()
    return [_to_model(item) for item in schedules]


@router.get("/collector/{collector_id}", response_model=List[ScheduleModel], status_code=status.HTTP_200_OK)
def get_collector_schedules(
    collector_id: str = Path(..., description="Collector identifier"),
    service: SchedulingService = Depends(get_scheduling_service),
) -> List[ScheduleModel]:
    """404 when the collector has no schedules."""
    return [_to_model(item) for item in service.find_by_collector(collector_id)]


@router.get("/center/{center_id}", response_model=List[ScheduleModel], status_code=status.HTTP_200_OK)
def get_center_schedules(
    center_id: str = Path(..., description="Collection center identifier"),
    service: SchedulingService = Depends(get_scheduling_service),
) -> List[ScheduleModel]:
    """Always a list, empty when the center has no schedules."""
    return [_to_model(item) for item in service.find_by_center(center_id)]


@router.patch("/{schedule_id}/accept", response_model=ScheduleEnvelope, status_code=status.HTTP_200_OK)
def accept_schedule(
    schedule_id: str = Path(..., description="Schedule identifier"),
    service: SchedulingService = Depends(get_scheduling_service),
) -> ScheduleEnvelope:
    return ScheduleEnvelope(message="Schedule accepted.", schedule=_to_model(service.accept_schedule(schedule_id)))


@router.patch("/{schedule_id}/cancel", response_model=ScheduleEnvelope, status_code=status.HTTP_200_OK)
def cancel_schedule(
    schedule_id: str = Path(..., description="Schedule identifier"),
    service: SchedulingService = Depends(get_scheduling_service),
) -> ScheduleEnvelope:
    return ScheduleEnvelope(message="Schedule canceled.", schedule=_to_model(service.cancel_schedule(schedule_id)))
