"""Vehicle services."""

from .service import VehicleService

__all__ = ["VehicleService"]
