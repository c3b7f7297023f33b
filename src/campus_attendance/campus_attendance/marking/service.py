from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from ..common.datetime_utils import parse_iso_date, split_time_range, today_iso
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..periods.keys import format_class_context, parse_class_context, period_id_for
from ..periods.model import ClassScope, Faculty, Period, PeriodStats, Subject
from ..periods.repository import PeriodRepository
from ..students.model import Student
from ..students.service import RosterService, sort_roster
from .recorder import MarkMap, build_submission, compute_stats, initialize_marks, validate_marks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkingSession:
    """One class meeting a faculty member is taking (or editing) attendance for."""

    scope: ClassScope
    subject: Subject
    faculty: Faculty
    start_time: str
    end_time: str = ""
    date: str = field(default_factory=today_iso)

    @property
    def period_id(self) -> str:
        return period_id_for(self.scope, self.date, self.start_time)

    @classmethod
    def from_payload(cls, payload: Mapping) -> "MarkingSession":
        """Build a session from a dashboard payload.

        Accepts either explicit ``branch``/``year``/``section`` or a
        ``context`` label ("CSE Yr 3 (A)"), and either ``startTime``/``endTime``
        or a ``time`` range ("09:30 AM - 10:20 AM").
        """

        if payload.get("context"):
            scope = parse_class_context(str(payload["context"]))
            if scope is None:
                raise ValidationError(f"Invalid class context: {payload['context']!r}")
        else:
            scope = ClassScope.of(payload.get("branch"), payload.get("year"), payload.get("section"))

        start, end = payload.get("startTime"), payload.get("endTime")
        if not start and payload.get("time"):
            start, end = split_time_range(str(payload["time"]))

        date_iso = parse_iso_date(str(payload.get("date") or today_iso())).isoformat()

        return cls(
            scope=scope,
            subject=Subject(
                code=require_non_empty(payload.get("subjectCode"), "subjectCode"),
                name=str(payload.get("subjectName") or ""),
            ),
            faculty=Faculty(
                id=require_non_empty(payload.get("facultyId"), "facultyId"),
                name=str(payload.get("facultyName") or "Unknown"),
            ),
            start_time=require_non_empty(start, "startTime"),
            end_time=str(end or ""),
            date=date_iso,
        )

    def to_dict(self) -> dict:
        return {
            "context": format_class_context(self.scope),
            "time": f"{self.start_time} - {self.end_time}" if self.end_time else self.start_time,
            "subjectCode": self.subject.code,
            "subjectName": self.subject.name,
            "facultyId": self.faculty.id,
            "facultyName": self.faculty.name,
            "date": self.date,
        }


def session_from_period(period: Period) -> MarkingSession:
    """Rebuild the session of a stored period so it can be edited in place."""
    return MarkingSession(
        scope=period.scope,
        subject=Subject(code=period.subject_code, name=period.subject_name),
        faculty=Faculty(id=period.faculty_id, name=period.faculty_name),
        start_time=period.start_time,
        end_time=period.end_time,
        date=period.date,
    )


@dataclass(frozen=True)
class MarkingSheet:
    period_id: str
    roster: List[Student]
    marks: MarkMap
    stats: PeriodStats
    is_edit: bool

    def to_dict(self) -> dict:
        return {
            "periodId": self.period_id,
            "roster": [s.to_dict() for s in self.roster],
            "marks": dict(self.marks),
            "stats": self.stats.to_dict(),
            "isEdit": self.is_edit,
        }


class MarkingService:
    """Use case: take or edit attendance for one class period."""

    def __init__(self, periods: PeriodRepository, roster: RosterService):
        self._periods = periods
        self._roster = roster

    def load_existing_marks(self, period_id: str) -> Optional[MarkMap]:
        existing = self._periods.get_period(period_id)
        if existing is None:
            return None
        return dict(existing.records)

    def open_session(self, session: MarkingSession) -> MarkingSheet:
        scope = session.scope
        roster = sort_roster(self._roster.get_class_students(scope.branch, scope.year, scope.section))

        period_id = session.period_id
        existing = self.load_existing_marks(period_id)
        marks = existing if existing is not None else initialize_marks(roster)

        return MarkingSheet(
            period_id=period_id,
            roster=roster,
            marks=marks,
            stats=compute_stats(marks, len(roster)),
            is_edit=existing is not None,
        )

    def submit(self, session: MarkingSession, marks: Mapping[str, str], *, roster_size: int) -> Period:
        cleaned = validate_marks(marks)
        if roster_size < 0:
            raise ValidationError("roster size must not be negative")

        period = build_submission(
            session.scope,
            session.subject,
            session.faculty,
            cleaned,
            compute_stats(cleaned, roster_size),
            date_iso=session.date,
            start_time=session.start_time,
            end_time=session.end_time,
        )
        # StoreUnavailableError propagates: a lost submission must be visible.
        self._periods.submit_period(period)
        logger.info(
            "Attendance submitted for %s (%d/%d present)", period.period_id, period.stats.present, period.stats.total
        )
        return period
