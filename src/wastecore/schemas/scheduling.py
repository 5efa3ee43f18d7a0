"""Schedule request/response schemas."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field

from ..models.domain import ScheduleStatus


class ScheduleCreateRequest(BaseModel):
    # Optional so the service can report every missing field at once.
    collector_id: Optional[str] = Field(None, alias="collectorId")
    center_id: Optional[str] = Field(None, alias="centerId")
    vehicle_id: Optional[str] = Field(None, alias="vehicleId")
    date: Optional[str] = None
    time: Optional[str] = None
    request_ids: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("requestIds", "selectedRequests", "request_ids"),
        serialization_alias="requestIds",
    )

    class Config:
        populate_by_name = True


class ScheduleModel(BaseModel):
    id: str
    collector_id: str = Field(..., alias="collectorId")
    center_id: str = Field(..., alias="centerId")
    vehicle_id: str = Field(..., alias="vehicleId")
    date: dt.date
    time: str
    status: ScheduleStatus
    request_ids: List[str] = Field(..., alias="requestIds")
    created_at: Optional[dt.datetime] = Field(None, alias="createdAt")

    class Config:
        populate_by_name = True


class ScheduleEnvelope(BaseModel):
    message: str
    schedule: ScheduleModel
