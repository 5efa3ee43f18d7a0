"""Collection center and collector schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class CenterCreate(BaseModel):
    name: Optional[str] = None
    max_trucks: Optional[int] = Field(None, alias="maxTrucks", ge=0)
    max_staff: Optional[int] = Field(None, alias="maxStaff", ge=0)

    class Config:
        populate_by_name = True


class ResourceCapsModel(BaseModel):
    trucks: Optional[int] = None
    staff: Optional[int] = None


class AllocatedResourcesModel(BaseModel):
    trucks: int = 0
    staff: int = 0
    total_quantity: float = Field(0.0, alias="totalQuantity")

    class Config:
        populate_by_name = True


class CenterModel(BaseModel):
    id: str
    name: str
    resources: ResourceCapsModel
    allocated: AllocatedResourcesModel = Field(..., alias="allocatedResources")

    class Config:
        populate_by_name = True


class CollectorCreate(BaseModel):
    name: Optional[str] = None


class CollectorModel(BaseModel):
    id: str
    name: str
