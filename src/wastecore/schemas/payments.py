"""Payment schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ProcessPaymentRequest(BaseModel):
    resident_id: Optional[str] = Field(None, alias="residentId")
    amount: Any = None
    waste_request_ids: List[str] = Field(default_factory=list, alias="wasteRequestIds")

    class Config:
        populate_by_name = True


class ApprovePaymentRequest(BaseModel):
    waste_request_id: Optional[str] = Field(None, alias="wasteRequestId")
    approver_id: Optional[str] = Field(None, alias="approverId")

    class Config:
        populate_by_name = True


class PaymentModel(BaseModel):
    id: str
    resident_id: Optional[str] = Field(None, alias="residentId")
    amount: float
    request_ids: List[str] = Field(..., alias="wasteRequests")
    status: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        populate_by_name = True


class PaymentResponse(BaseModel):
    message: str
    payment: PaymentModel
    updated_count: Optional[int] = Field(None, alias="updatedCount")

    class Config:
        populate_by_name = True


class CheckoutSessionRequest(BaseModel):
    resident_id: Optional[str] = Field(None, alias="residentId")
    waste_request_id: Optional[str] = Field(None, alias="wasteRequestId")

    class Config:
        populate_by_name = True


class CheckoutSessionResponse(BaseModel):
    id: str
    url: Optional[str] = None
