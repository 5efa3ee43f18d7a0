"""Payment recording and checkout confirmation."""

from .gateway import CheckoutGateway, CheckoutSession, StripeCheckoutGateway, build_checkout_gateway
from .service import PaymentService

__all__ = [
    "CheckoutGateway",
    "CheckoutSession",
    "StripeCheckoutGateway",
    "build_checkout_gateway",
    "PaymentService",
]
