"""Route group exports."""

from . import allocation, centers, demand, health, payments, requests, schedules, vehicles

__all__ = ["allocation", "centers", "demand", "health", "payments", "requests", "schedules", "vehicles"]
