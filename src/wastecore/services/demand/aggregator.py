"""Demand aggregation over waste requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Mapping, Tuple

from ...models.domain import DEFAULT_COLLECTION_TIME, WasteRequest
from ..quantities import parse_quantity

UNKNOWN_CENTER = "Unknown Center"

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PeakPeriod:
    date: str
    time: str
    center: str
    total_quantity: float


def _slot_date(value: date | datetime | None) -> str:
    if value is None:
        return datetime.now(timezone.utc).date().isoformat()
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()


def _slot_time(value: str | None) -> str:
    text = (value or "").strip()
    return text or DEFAULT_COLLECTION_TIME


def aggregate_demand(requests: Iterable[WasteRequest]) -> Dict[str, float]:
    """Sum quantities per collection center.

    Requests without a center are ignored. Unparsable quantities count as zero.
    """
    totals: Dict[str, float] = {}
    invalid = 0
    for request in requests:
        if not request.collection_center_id:
            continue
        parsed = parse_quantity(request.quantity)
        if not parsed.valid:
            invalid += 1
        totals[request.collection_center_id] = totals.get(request.collection_center_id, 0.0) + parsed.value
    if invalid:
        logger.warning(f"Counted {invalid} request(s) with unparsable quantity as zero")
    return totals


def aggregate_by_slot(
    requests: Iterable[WasteRequest],
    center_names: Mapping[str, str] | None = None,
) -> List[PeakPeriod]:
    """Sum quantities per (date, time, center name), highest total first."""
    names = center_names or {}
    buckets: Dict[Tuple[str, str, str], float] = {}
    for request in requests:
        center = names.get(request.collection_center_id or "", UNKNOWN_CENTER)
        key = (_slot_date(request.collection_date), _slot_time(request.collection_time), center)
        buckets[key] = buckets.get(key, 0.0) + parse_quantity(request.quantity).value

    periods = [
        PeakPeriod(date=slot_date, time=slot_time, center=center, total_quantity=total)
        for (slot_date, slot_time, center), total in buckets.items()
    ]
    periods.sort(key=lambda period: period.total_quantity, reverse=True)
    return periods
