"""Demand report endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...schemas.demand import CenterDemandModel, PeakPeriodModel
from ...services.demand import DemandService
from ..deps import get_demand_service

router = APIRouter(prefix="/demand", tags=["demand"])


@router.get("/peak-periods", response_model=List[PeakPeriodModel], status_code=status.HTTP_200_OK)
def get_peak_periods(service: DemandService = Depends(get_demand_service)) -> List[PeakPeriodModel]:
    """Quantity per (date, time, center), highest first. Empty when there are no requests."""
    return [
        PeakPeriodModel(date=p.date, time=p.time, center=p.center, total_quantity=p.total_quantity)
        for p in service.peak_periods()
    ]


@router.get("/centers", response_model=List[CenterDemandModel], status_code=status.HTTP_200_OK)
def get_center_demand(service: DemandService = Depends(get_demand_service)) -> List[CenterDemandModel]:
    totals = service.center_totals()
    return [
        CenterDemandModel(center_id=center_id, total_quantity=total)
        for center_id, total in sorted(totals.items(), key=lambda item: item[1], reverse=True)
    ]
