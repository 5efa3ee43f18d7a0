"""Waste request schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field

from ..models.domain import RequestStatus


class WasteRequestCreate(BaseModel):
    resident_id: str = Field(..., alias="residentId")
    waste_type: Optional[str] = Field(None, alias="wasteType")
    quantity: Any = None
    collection_date: Optional[str] = Field(None, alias="collectionDate")
    collection_time: Optional[str] = Field(None, alias="collectionTime")
    collection_center_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("collectionCenterId", "collectionCenter", "collection_center_id"),
    )

    class Config:
        populate_by_name = True


class WasteRequestUpdate(BaseModel):
    waste_type: Optional[str] = Field(None, alias="wasteType")
    quantity: Any = None
    collection_date: Optional[str] = Field(None, alias="collectionDate")
    collection_time: Optional[str] = Field(None, alias="collectionTime")
    status: Optional[str] = None
    collection_center_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("collectionCenterId", "collectionCenter", "collection_center_id"),
    )

    class Config:
        populate_by_name = True


class WasteRequestModel(BaseModel):
    id: str
    resident_id: str = Field(..., alias="residentId")
    waste_type: str = Field(..., alias="wasteType")
    quantity: Any
    collection_center_id: Optional[str] = Field(None, alias="collectionCenterId")
    collection_date: Optional[date] = Field(None, alias="collectionDate")
    collection_time: str = Field(..., alias="collectionTime")
    status: RequestStatus
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        populate_by_name = True
