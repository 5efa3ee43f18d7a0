"""Vehicle schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class VehicleCreate(BaseModel):
    name: Optional[str] = None
    license_plate: Optional[str] = Field(None, alias="licensePlate")
    center_id: Optional[str] = Field(None, alias="centerId")

    class Config:
        populate_by_name = True


class VehicleUpdate(VehicleCreate):
    pass


class VehicleModel(BaseModel):
    id: str
    name: str
    license_plate: str = Field(..., alias="licensePlate")
    center_id: str = Field(..., alias="centerId")

    class Config:
        populate_by_name = True
