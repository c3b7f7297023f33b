from __future__ import annotations

import logging
from typing import Any, Iterable, List, Sequence

from ..identity.normalizer import canonical_section, canonical_year, normalize_strict_branch
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def roster_sort_key(student: Student) -> str:
    return student.roll_number or student.id or ""


def sort_roster(students: Iterable[Student]) -> List[Student]:
    """Order a roster by roll number (falling back to id), lexically."""
    return sorted(students, key=roster_sort_key)


class RosterService:
    """Resolves the students attendance is taken against for a class."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def get_student(self, student_id: str):
        return self._students.get_by_id(student_id)

    def get_class_students(self, branch: str, year: Any, section: Any) -> Sequence[Student]:
        # The directory can only filter on branch; year and section aliases
        # ("1" vs "A", "3" vs "3rd") are matched here.
        wanted_year = canonical_year(year)
        wanted_section = canonical_section(section)

        candidates = self._students.list_by_branch(normalize_strict_branch(branch))
        roster = [
            s
            for s in candidates
            if s.year is not None and s.year == wanted_year and canonical_section(s.section) == wanted_section
        ]

        logger.debug(
            "Roster %s/%s/%s: %d of %d branch entries", branch, year, section, len(roster), len(candidates)
        )
        return roster
