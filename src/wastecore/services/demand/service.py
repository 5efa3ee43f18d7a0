"""Store-backed demand reports."""

from __future__ import annotations

import logging
from typing import Dict, List

from ...persistence.store import DocumentStore
from .aggregator import PeakPeriod, aggregate_by_slot, aggregate_demand

logger = logging.getLogger(__name__)


class DemandService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def center_totals(self) -> Dict[str, float]:
        return aggregate_demand(self.store.find_requests())

    def peak_periods(self) -> List[PeakPeriod]:
        requests = self.store.find_requests()
        if not requests:
            return []
        center_names = {center.id: center.name for center in self.store.list_centers()}
        periods = aggregate_by_slot(requests, center_names)
        logger.info(f"Computed {len(periods)} peak period(s) from {len(requests)} request(s)")
        return periods
