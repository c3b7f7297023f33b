"""Folds over stored periods.

Only explicit marks count: a student with no entry in a period's records
(not on the roster that day) is left out of both numerator and denominator.
Nothing here mutates its inputs or raises on empty input.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Sequence, Union

from ..core.enums import Mark
from ..identity.normalizer import resolve_mark
from ..periods.model import Period


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    value = Decimal(part) * 100 / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class SubjectAttendance:
    code: str
    name: str
    total: int = 0
    present: int = 0

    @property
    def percentage(self) -> int:
        return percentage(self.present, self.total)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "name": self.name,
            "total": self.total,
            "present": self.present,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class StudentAttendance:
    total: int = 0
    present: int = 0
    subject_wise: List[SubjectAttendance] = field(default_factory=list)

    @property
    def percentage(self) -> int:
        return percentage(self.present, self.total)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "percentage": self.percentage,
            "subjectWise": [s.to_dict() for s in self.subject_wise],
        }


@dataclass(frozen=True)
class ClassRollup:
    total_students: int = 0
    present_count: int = 0

    @property
    def attendance_percentage(self) -> int:
        return percentage(self.present_count, self.total_students)

    def to_dict(self) -> dict:
        return {
            "totalStudents": self.total_students,
            "presentCount": self.present_count,
            "attendancePercentage": self.attendance_percentage,
        }


def aggregate_student(periods: Iterable[Period], student_keys: Union[str, Sequence[str]]) -> StudentAttendance:
    """Overall and per-subject attendance of one student.

    ``student_keys`` is the ordered list of keys the student may be recorded
    under (roll number, id, uid); a single key is accepted too.
    """

    keys = [student_keys] if isinstance(student_keys, str) else list(student_keys)

    # code -> [name, total, present]; insertion order is first-seen order.
    buckets: Dict[str, list] = {}
    total = 0
    present = 0

    for period in periods:
        bucket = buckets.setdefault(period.subject_code, [period.subject_name or period.subject_code, 0, 0])
        mark = resolve_mark(period.records, keys)

        if mark == Mark.PRESENT.value:
            present += 1
            total += 1
            bucket[1] += 1
            bucket[2] += 1
        elif mark == Mark.ABSENT.value:
            total += 1
            bucket[1] += 1

    subject_wise = [
        SubjectAttendance(code=code, name=name, total=sub_total, present=sub_present)
        for code, (name, sub_total, sub_present) in buckets.items()
    ]
    return StudentAttendance(total=total, present=present, subject_wise=subject_wise)


def aggregate_class(period: Period) -> ClassRollup:
    # Denominator is the marks captured that day, not today's roster.
    records = period.records or {}
    present = sum(1 for status in records.values() if status == Mark.PRESENT.value)
    return ClassRollup(total_students=len(records), present_count=present)


def average_percentage(rollups: Iterable[ClassRollup]) -> int:
    """Mean of the exact per-class percentages, rounded half up at the end."""
    exact = [
        Decimal(r.present_count) * 100 / Decimal(r.total_students) if r.total_students else Decimal(0)
        for r in rollups
    ]
    if not exact:
        return 0
    mean = sum(exact, Decimal(0)) / len(exact)
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def rounded_mean(values: Iterable[int]) -> int:
    """Mean of already-rounded percentages, rounded half up; 0 for no values."""
    items = list(values)
    if not items:
        return 0
    mean = Decimal(sum(items)) / len(items)
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_below_compliance(attendance_percentage: int, threshold: int) -> bool:
    return attendance_percentage < threshold
