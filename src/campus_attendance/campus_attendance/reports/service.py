from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.constants import DEFAULT_LOW_ATTENDANCE_THRESHOLD, DEFAULT_RECENT_SUBMISSIONS
from ..common.datetime_utils import time_sort_key
from ..identity.normalizer import candidate_keys
from ..periods.model import ClassScope, Period, PeriodQuery
from ..periods.repository import PeriodRepository
from ..students.model import Student
from .aggregation import (
    ClassRollup,
    StudentAttendance,
    SubjectAttendance,
    aggregate_class,
    aggregate_student,
    average_percentage,
    is_below_compliance,
    rounded_mean,
)

logger = logging.getLogger(__name__)


def _submitted_key(period: Period) -> datetime:
    return period.submitted_at or datetime.min


def newest_first(periods: Iterable[Period]) -> List[Period]:
    return sorted(periods, key=_submitted_key, reverse=True)


@dataclass(frozen=True)
class ClassMonitorRow:
    """A period enriched with its own roll-up, for monitoring dashboards."""

    period: Period
    rollup: ClassRollup
    below_threshold: bool

    def to_dict(self) -> dict:
        row = {"id": self.period.period_id, **self.period.to_document()}
        row.update(self.rollup.to_dict())
        row["belowThreshold"] = self.below_threshold
        row["submittedAt"] = self.period.submitted_at.isoformat() if self.period.submitted_at else None
        return row


@dataclass(frozen=True)
class BranchOverview:
    branch: str
    total_classes: int
    avg_attendance: int
    below_threshold: bool

    def to_dict(self) -> dict:
        return {
            "branch": self.branch,
            "totalClasses": self.total_classes,
            "avgAttendance": self.avg_attendance,
            "belowThreshold": self.below_threshold,
        }


@dataclass(frozen=True)
class CoordinatorSummary:
    today_classes: int
    avg_attendance: int
    recent: List[Period]

    def to_dict(self) -> dict:
        return {
            "todayClasses": self.today_classes,
            "avgAttendance": self.avg_attendance,
            "recent": [p.to_document() for p in self.recent],
        }


class AttendanceReportService:
    """Read side: per-student statistics and per-class monitoring rows."""

    def __init__(self, periods: PeriodRepository, *, low_threshold: int = DEFAULT_LOW_ATTENDANCE_THRESHOLD):
        self._periods = periods
        self._low_threshold = int(low_threshold)

    @property
    def low_threshold(self) -> int:
        return self._low_threshold

    def get_period(self, period_id: str) -> Optional[Period]:
        return self._periods.get_period(period_id)

    def subject_periods(self, scope: ClassScope, subject_code: str) -> Sequence[Period]:
        return self._periods.query_periods(PeriodQuery.for_scope(scope, subject_code=subject_code))

    def student_overall(self, scope: ClassScope, student: Student) -> StudentAttendance:
        periods = self._periods.query_periods(PeriodQuery.for_scope(scope))
        return aggregate_student(periods, candidate_keys(student))

    def student_subject(self, scope: ClassScope, subject_code: str, student: Student) -> SubjectAttendance:
        stats = aggregate_student(self.subject_periods(scope, subject_code), candidate_keys(student))
        for subject in stats.subject_wise:
            if subject.code == subject_code:
                return subject
        return SubjectAttendance(code=subject_code, name=subject_code)

    def faculty_history(self, faculty_id: str, *, limit: Optional[int] = None) -> List[Period]:
        periods = newest_first(self._periods.query_periods(PeriodQuery(faculty_id=faculty_id)))
        return periods[:limit] if limit is not None else periods

    def monitor_row(self, period: Period) -> ClassMonitorRow:
        rollup = aggregate_class(period)
        return ClassMonitorRow(
            period=period,
            rollup=rollup,
            below_threshold=is_below_compliance(rollup.attendance_percentage, self._low_threshold),
        )

    def class_monitor(self, date_iso: str, *, branch: Optional[str] = None, search: str = "") -> List[ClassMonitorRow]:
        periods = self._periods.query_periods(PeriodQuery(date=date_iso))
        term = (search or "").strip().lower()

        visible = [
            p
            for p in periods
            if (branch is None or p.branch == branch)
            and (not term or term in p.subject_name.lower() or term in p.faculty_name.lower())
        ]
        visible.sort(key=lambda p: time_sort_key(p.start_time))
        return [self.monitor_row(p) for p in visible]

    def coordinator_summary(
        self,
        date_iso: str,
        branches: Iterable[str],
        *,
        recent_limit: int = DEFAULT_RECENT_SUBMISSIONS,
    ) -> CoordinatorSummary:
        allowed = set(branches)
        classes = [p for p in self._periods.query_periods(PeriodQuery(date=date_iso)) if p.branch in allowed]
        logger.debug("Coordinator summary %s: %d classes across %d branches", date_iso, len(classes), len(allowed))
        return CoordinatorSummary(
            today_classes=len(classes),
            avg_attendance=average_percentage(aggregate_class(p) for p in classes),
            recent=newest_first(classes)[:recent_limit],
        )

    def branch_overview(self, date_iso: str, branches: Iterable[str]) -> List[BranchOverview]:
        """Classes held per branch on a date and the mean of their rounded percentages."""
        by_branch: Dict[str, List[int]] = defaultdict(list)
        for period in self._periods.query_periods(PeriodQuery(date=date_iso)):
            by_branch[period.branch].append(aggregate_class(period).attendance_percentage)

        overview = []
        for branch in branches:
            percentages = by_branch.get(branch, [])
            avg = rounded_mean(percentages)
            overview.append(
                BranchOverview(
                    branch=branch,
                    total_classes=len(percentages),
                    avg_attendance=avg,
                    below_threshold=bool(percentages) and is_below_compliance(avg, self._low_threshold),
                )
            )
        return overview
