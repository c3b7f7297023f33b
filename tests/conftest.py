from __future__ import annotations

from datetime import datetime

import pytest

from src.campus_attendance.campus_attendance.periods.model import Period, PeriodStats
from src.campus_attendance.campus_attendance.students.model import Student


@pytest.fixture
def fixed_now():
    return datetime(2024, 2, 20, 9, 35, 0)


@pytest.fixture
def make_student():
    def _make(student_id: str, roll: str | None, *, branch="CSE", year=3, section="A", uid=None, name=None):
        return Student(
            id=student_id,
            roll_number=roll,
            name=name or f"Student {student_id}",
            branch=branch,
            dept=branch,
            year=year,
            section=section,
            uid=uid,
        )

    return _make


@pytest.fixture
def make_period():
    def _make(
        period_id: str = "CSE_3_A_2024-02-20_0930 AM",
        *,
        records: dict | None = None,
        subject_code: str = "CS301",
        subject_name: str = "Operating Systems",
        branch: str = "CSE",
        year: int = 3,
        section: str = "A",
        date: str = "2024-02-20",
        start_time: str = "09:30 AM",
        faculty_id: str = "F-101",
        faculty_name: str = "Prof. Kulkarni",
        submitted_at: datetime | None = None,
    ) -> Period:
        records = dict(records or {})
        present = sum(1 for v in records.values() if v == "P")
        return Period(
            period_id=period_id,
            branch=branch,
            year=year,
            section=section,
            date=date,
            start_time=start_time,
            end_time="",
            subject_code=subject_code,
            subject_name=subject_name,
            faculty_id=faculty_id,
            faculty_name=faculty_name,
            records=records,
            stats=PeriodStats(present=present, absent=len(records) - present, total=len(records)),
            submitted_at=submitted_at,
        )

    return _make
