from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Period, PeriodQuery


class PeriodRepository(Protocol):
    """Document store access for attendance periods.

    Read methods never raise for a missing document or a failing store: they
    answer ``None`` / an empty sequence. Only ``submit_period`` may raise.
    """

    def get_period(self, period_id: str) -> Optional[Period]:
        raise NotImplementedError

    def submit_period(self, period: Period) -> None:
        """Merge-write the period at ``period.period_id`` and stamp the submission time."""

        raise NotImplementedError

    def query_periods(self, query: PeriodQuery) -> Sequence[Period]:
        raise NotImplementedError
