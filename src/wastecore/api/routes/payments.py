"""Payment endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query, status

from ...schemas.payments import (
    ApprovePaymentRequest,
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    PaymentModel,
    PaymentResponse,
    ProcessPaymentRequest,
)
from ...services.payments import PaymentService
from ..deps import get_payment_service

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/process", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def process_payment(
    payload: ProcessPaymentRequest,
    service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    payment, updated = service.process_payment(payload.resident_id, payload.amount, payload.waste_request_ids)
    return PaymentResponse(
        message="Payment processed and requests updated successfully.",
        payment=PaymentModel.model_validate(asdict(payment)),
        updated_count=updated,
    )


@router.post("/approve", response_model=PaymentResponse, status_code=status.HTTP_200_OK)
def approve_payment(
    payload: ApprovePaymentRequest,
    service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    payment = service.approve_payment(payload.waste_request_id, payload.approver_id)
    return PaymentResponse(message="WasteRequest marked as paid", payment=PaymentModel.model_validate(asdict(payment)))


@router.post("/create-checkout-session", response_model=CheckoutSessionResponse, status_code=status.HTTP_200_OK)
def create_checkout_session(
    payload: CheckoutSessionRequest,
    service: PaymentService = Depends(get_payment_service),
) -> CheckoutSessionResponse:
    session = service.create_checkout_session(payload.resident_id, payload.waste_request_id)
    return CheckoutSessionResponse(id=session.id, url=session.url)


@router.get("/confirm", response_model=PaymentResponse, status_code=status.HTTP_200_OK)
def confirm_checkout(
    session_id: str | None = Query(default=None, alias="sessionId", description="Checkout session identifier"),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    payment = service.confirm_checkout(session_id)
    return PaymentResponse(message="Payment confirmed", payment=PaymentModel.model_validate(asdict(payment)))
