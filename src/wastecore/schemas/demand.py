"""Demand report schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PeakPeriodModel(BaseModel):
    date: str
    time: str
    center: str
    total_quantity: float = Field(..., alias="totalQuantity")

    class Config:
        populate_by_name = True


class CenterDemandModel(BaseModel):
    center_id: str = Field(..., alias="centerId")
    total_quantity: float = Field(..., alias="totalQuantity")

    class Config:
        populate_by_name = True
