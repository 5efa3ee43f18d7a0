"""Resource allocation schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class CenterAllocationModel(BaseModel):
    center_id: str = Field(..., alias="centerId")
    center_name: str = Field(..., alias="centerName")
    trucks_allocated: Optional[int] = Field(None, alias="trucksAllocated")
    staff_allocated: Optional[int] = Field(None, alias="staffAllocated")
    total_quantity: float = Field(..., alias="totalQuantity")
    error: Optional[str] = None

    class Config:
        populate_by_name = True


class AllocationResponse(BaseModel):
    message: str
    centers: List[CenterAllocationModel]
    failed: List[CenterAllocationModel] = Field(
        default_factory=list,
        description="Centers whose allocation could not be saved in this run.",
    )
