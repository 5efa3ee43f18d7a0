"""Domain error hierarchy shared by services and the HTTP layer."""

from __future__ import annotations

from typing import Sequence


class WasteCoreError(Exception):
    """Base class for errors raised by the coordination core."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(WasteCoreError):
    """Missing or malformed input. ``missing`` lists absent required fields."""

    def __init__(self, message: str, missing: Sequence[str] | None = None) -> None:
        super().__init__(message)
        self.missing = list(missing or [])


class NotFoundError(WasteCoreError):
    """A referenced entity does not exist."""


class ConflictError(WasteCoreError):
    """Double booking, or a request that was already claimed."""


class DuplicateKeyError(ConflictError):
    """A store-level uniqueness constraint rejected a write."""


class PersistenceError(WasteCoreError):
    """The store is unavailable or a write failed."""


class PaymentGatewayError(WasteCoreError):
    """The checkout provider is not configured or did not answer."""
