"""Mark-map operations used while a faculty member takes attendance.

A mark map is ``{student_key: "P" | "A"}``. Every function returns a new
map; the input is never modified.
"""
from __future__ import annotations

from typing import Dict, Iterable, Mapping

from ..common.datetime_utils import parse_iso_date
from ..core.enums import Mark
from ..core.exceptions import ValidationError
from ..periods.keys import period_id_for
from ..periods.model import ClassScope, Faculty, Period, PeriodStats, Subject
from ..students.model import Student

MarkMap = Dict[str, str]


def initialize_marks(roster: Iterable[Student]) -> MarkMap:
    """Everyone starts present; absence has to be marked explicitly."""
    return {s.mark_key: Mark.PRESENT.value for s in roster}


def toggle(marks: Mapping[str, str], student_key: str) -> MarkMap:
    flipped = Mark.ABSENT if marks.get(student_key) == Mark.PRESENT.value else Mark.PRESENT
    return {**marks, student_key: flipped.value}


def compute_stats(marks: Mapping[str, str], roster_size: int) -> PeriodStats:
    present = sum(1 for status in marks.values() if status == Mark.PRESENT.value)
    total = int(roster_size)
    return PeriodStats(present=present, absent=total - present, total=total)


def validate_marks(marks: Mapping[str, str]) -> MarkMap:
    allowed = {m.value for m in Mark}
    cleaned: MarkMap = {}
    for key, status in marks.items():
        if not str(key).strip():
            raise ValidationError("student key must not be empty")
        value = status.value if isinstance(status, Mark) else str(status).upper()
        if value not in allowed:
            raise ValidationError(f"Invalid mark {status!r} for {key} (expected P or A)")
        cleaned[str(key)] = value
    return cleaned


def build_submission(
    scope: ClassScope,
    subject: Subject,
    faculty: Faculty,
    marks: Mapping[str, str],
    stats: PeriodStats,
    *,
    date_iso: str,
    start_time: str,
    end_time: str = "",
) -> Period:
    day = parse_iso_date(date_iso).isoformat()
    return Period(
        period_id=period_id_for(scope, day, start_time),
        branch=scope.branch,
        year=scope.year,
        section=scope.section,
        date=day,
        start_time=start_time,
        end_time=end_time,
        subject_code=subject.code,
        subject_name=subject.name or subject.code,
        faculty_id=faculty.id,
        faculty_name=faculty.name or "Unknown",
        records=dict(marks),
        stats=stats,
    )
