"""HTTP client for the checkout provider's session endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol

import httpx

from ...config import Settings
from ...errors import NotFoundError, PaymentGatewayError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CheckoutSession:
    id: str
    payment_status: str
    amount_total: Optional[int] = None
    metadata: dict[str, str] = field(default_factory=dict)
    url: Optional[str] = None

    @property
    def paid(self) -> bool:
        return self.payment_status == "paid"

    @property
    def amount(self) -> float:
        """Total in major currency units (the provider reports cents)."""
        return (self.amount_total or 0) / 100


class CheckoutGateway(Protocol):
    def create_session(
        self,
        product_name: str,
        unit_amount: int,
        quantity: int,
        metadata: Mapping[str, str],
    ) -> CheckoutSession:
        ...

    def retrieve_session(self, session_id: str) -> CheckoutSession:
        ...


def _session_from_payload(data: dict, session_id: str = "") -> CheckoutSession:
    return CheckoutSession(
        id=data.get("id", session_id),
        payment_status=data.get("payment_status", "unpaid"),
        amount_total=data.get("amount_total"),
        metadata=dict(data.get("metadata") or {}),
        url=data.get("url"),
    )


class StripeCheckoutGateway:
    """Creates and reads checkout sessions through the Stripe REST API."""

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.stripe.com/v1",
        timeout: float = 10.0,
        currency: str = "usd",
        client_url: str = "http://localhost:5173",
    ) -> None:
        if not secret_key:
            raise ValueError("Checkout secret key is not configured.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.currency = currency
        self.client_url = client_url.rstrip("/")
        self._secret_key = secret_key

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"Authorization": f"Bearer {self._secret_key}"},
        )

    def _send(self, method: str, path: str, subject: str, **kwargs: Any) -> dict:
        url = f"{self.base_url}{path}"
        try:
            with self._get_client() as client:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise NotFoundError(f"{subject} not found.") from exc
            logger.error(f"{subject} request failed with HTTP {exc.response.status_code}")
            raise PaymentGatewayError(f"Checkout provider returned HTTP {exc.response.status_code}.") from exc
        except httpx.HTTPError as exc:
            logger.error(f"{subject} request failed: {exc}")
            raise PaymentGatewayError(f"Checkout provider unreachable: {exc}") from exc

    def create_session(
        self,
        product_name: str,
        unit_amount: int,
        quantity: int,
        metadata: Mapping[str, str],
    ) -> CheckoutSession:
        # Stripe expects form-encoded nested keys.
        form = {
            "mode": "payment",
            "payment_method_types[0]": "card",
            "line_items[0][price_data][currency]": self.currency,
            "line_items[0][price_data][product_data][name]": product_name,
            "line_items[0][price_data][unit_amount]": str(unit_amount),
            "line_items[0][quantity]": str(quantity),
            "success_url": f"{self.client_url}/payment?status=success&session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{self.client_url}/payment?status=cancelled",
        }
        for key, value in metadata.items():
            if value:
                form[f"metadata[{key}]"] = value
        data = self._send("POST", "/checkout/sessions", "Checkout session", data=form)
        logger.info(f"Opened checkout session {data.get('id')} for {product_name}")
        return _session_from_payload(data)

    def retrieve_session(self, session_id: str) -> CheckoutSession:
        data = self._send("GET", f"/checkout/sessions/{session_id}", f"Checkout session {session_id}")
        return _session_from_payload(data, session_id)


def build_checkout_gateway(config: Settings) -> CheckoutGateway | None:
    """Construct the gateway from settings; ``None`` when no secret is configured."""
    if not config.checkout_secret_key:
        logger.info("Checkout provider not configured; checkout sessions disabled")
        return None
    return StripeCheckoutGateway(
        secret_key=config.checkout_secret_key,
        base_url=config.checkout_base_url,
        timeout=config.checkout_timeout_seconds,
        currency=config.checkout_currency,
        client_url=config.checkout_client_url,
    )
