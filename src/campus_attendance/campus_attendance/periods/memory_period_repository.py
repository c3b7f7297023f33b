from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from ..common.datetime_utils import now_local
from .model import Period, PeriodQuery, merge_documents
from .repository import PeriodRepository


class InMemoryPeriodRepository(PeriodRepository):
    """Process-local document store with the same merge-write rules as MySQL."""

    def __init__(self, *, clock: Callable[[], datetime] = now_local):
        self._clock = clock
        self._docs: Dict[str, Tuple[Dict[str, Any], datetime]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._docs)

    def get_period(self, period_id: str) -> Optional[Period]:
        with self._lock:
            entry = self._docs.get(period_id)
        if not entry:
            return None
        doc, submitted_at = entry
        return Period.from_document(doc, submitted_at=submitted_at)

    def submit_period(self, period: Period) -> None:
        with self._lock:
            existing = self._docs.get(period.period_id)
            base = existing[0] if existing else {}
            self._docs[period.period_id] = (merge_documents(base, period.to_document()), self._clock())

    def query_periods(self, query: PeriodQuery) -> Sequence[Period]:
        with self._lock:
            entries = list(self._docs.values())
        periods = [Period.from_document(doc, submitted_at=ts) for doc, ts in entries]
        return [p for p in periods if query.matches(p)]
