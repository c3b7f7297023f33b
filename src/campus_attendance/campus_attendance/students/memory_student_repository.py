from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .model import Student
from .repository import StudentRepository


class InMemoryStudentRepository(StudentRepository):
    def __init__(self, students: Iterable[Student] = ()):
        self._by_id: dict[str, Student] = {s.id: s for s in students}

    def add(self, student: Student) -> None:
        self._by_id[student.id] = student

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self._by_id.get(student_id)

    def list_by_branch(self, branch: str) -> Sequence[Student]:
        return [s for s in self._by_id.values() if s.branch == branch]
