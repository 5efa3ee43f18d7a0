"""Waste request services."""

from .service import RequestService

__all__ = ["RequestService"]
