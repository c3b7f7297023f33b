from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Read-only student directory.

    Lookups answer ``None`` / an empty sequence when nothing matches or the
    directory cannot be reached.
    """

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_by_branch(self, branch: str) -> Sequence[Student]:
        raise NotImplementedError
