"""Demand aggregation helpers."""

from .aggregator import UNKNOWN_CENTER, PeakPeriod, aggregate_by_slot, aggregate_demand
from .service import DemandService

__all__ = [
    "UNKNOWN_CENTER",
    "PeakPeriod",
    "aggregate_by_slot",
    "aggregate_demand",
    "DemandService",
]
