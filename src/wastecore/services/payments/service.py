"""Recording completed payments against waste requests."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Mapping, Optional, Sequence

from ...errors import NotFoundError, PaymentGatewayError, ValidationError
from ...models.domain import Payment, RequestStatus
from ...persistence.store import DocumentStore
from ..quantities import parse_quantity
from .gateway import CheckoutGateway, CheckoutSession

logger = logging.getLogger(__name__)


class PaymentService:
    """Marks requests ``payment complete`` when money has been received.

    Payment status is independent of collection status: requests are flipped
    whatever state they are in. The checkout gateway is passed in explicitly.
    """

    def __init__(
        self,
        store: DocumentStore,
        gateway: Optional[CheckoutGateway] = None,
        prices: Optional[Mapping[str, float]] = None,
    ) -> None:
        self.store = store
        self.gateway = gateway
        self.prices = dict(prices or {})

    def _record(self, resident_id: Optional[str], amount: float, request_ids: Sequence[str]) -> tuple[Payment, int]:
        payment = self.store.insert_payment(
            Payment(
                id=uuid.uuid4().hex,
                resident_id=resident_id,
                amount=amount,
                request_ids=list(request_ids),
                created_at=datetime.now(timezone.utc),
            )
        )
        updated = self.store.update_request_status(request_ids, RequestStatus.PAYMENT_COMPLETE)
        logger.info(f"Recorded payment {payment.id}; {len(updated)} request(s) marked payment complete")
        return payment, len(updated)

    def process_payment(
        self,
        resident_id: Optional[str],
        amount: object,
        request_ids: Sequence[str],
    ) -> tuple[Payment, int]:
        if not request_ids:
            raise ValidationError("At least one waste request is required.", missing=["request_ids"])
        parsed = parse_quantity(amount)
        if not parsed.valid:
            raise ValidationError("amount must be a non-negative number", missing=["amount"])
        return self._record(resident_id, parsed.value, request_ids)

    def quote(self, waste_type: str, quantity: object) -> float:
        units = parse_quantity(quantity).value or 1.0
        return self.prices.get(waste_type, 0.0) * units

    def approve_payment(self, request_id: Optional[str], approver_id: Optional[str] = None) -> Payment:
        if not request_id:
            raise ValidationError("Missing wasteRequestId", missing=["request_id"])
        request = self.store.get_request(request_id)
        if request is None:
            raise NotFoundError("WasteRequest not found")
        payment, _ = self._record(request.resident_id, self.quote(request.waste_type, request.quantity), [request_id])
        logger.info(f"Approved payment for waste request {request_id} by {approver_id or 'system'}")
        return payment

    def create_checkout_session(self, resident_id: Optional[str], request_id: Optional[str]) -> CheckoutSession:
        """Open a provider session priced from the per-type table.

        The whole quote is charged as a single line item; the session metadata
        links it back to the request for ``confirm_checkout``.
        """
        if not request_id:
            raise ValidationError("Missing wasteRequestId", missing=["request_id"])
        if self.gateway is None:
            raise PaymentGatewayError("Checkout provider is not configured.")
        request = self.store.get_request(request_id)
        if request is None:
            raise NotFoundError("Waste request not found")

        amount = self.quote(request.waste_type, request.quantity)
        session = self.gateway.create_session(
            product_name=f"Waste collection - {request.waste_type}",
            unit_amount=round(amount * 100),
            quantity=1,
            metadata={"wasteRequestId": request_id, "residentId": resident_id or request.resident_id},
        )
        logger.info(f"Checkout session {session.id} opened for waste request {request_id} ({amount:.2f})")
        return session

    def confirm_checkout(self, session_id: Optional[str]) -> Payment:
        if not session_id:
            raise ValidationError("Missing sessionId", missing=["session_id"])
        if self.gateway is None:
            raise PaymentGatewayError("Checkout provider is not configured.")

        session = self.gateway.retrieve_session(session_id)
        if not session.paid:
            raise ValidationError("Payment not completed")

        request_id = session.metadata.get("wasteRequestId")
        if not request_id:
            logger.warning(f"Checkout session {session_id} has no wasteRequestId in metadata")
            raise ValidationError("Checkout session is not linked to a waste request.")

        resident_id = session.metadata.get("residentId")
        if not resident_id:
            request = self.store.get_request(request_id)
            resident_id = request.resident_id if request else None

        payment, _ = self._record(resident_id, session.amount, [request_id])
        return payment
