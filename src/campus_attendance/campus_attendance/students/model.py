from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.constants import DEFAULT_SECTION
from ..identity.normalizer import canonical_year


@dataclass(frozen=True)
class Student:
    """Directory entry for a student (read-only for this service).

    ``year`` is parsed once when the entry is read; ``section`` keeps the raw
    directory value ("1" and "A" both occur) and is compared through
    ``canonical_section``.
    """

    id: str
    roll_number: Optional[str]
    name: str
    branch: str
    dept: Optional[str]
    year: Optional[int]
    section: str
    mentor_id: Optional[str] = None
    uid: Optional[str] = None

    @property
    def mark_key(self) -> str:
        """Key used when this student's mark is written."""
        return self.roll_number or self.id

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Student":
        roll = data.get("rollNumber") or data.get("roll_number") or data.get("rollNo")
        return cls(
            id=str(data["id"]),
            roll_number=str(roll) if roll else None,
            name=str(data.get("name") or ""),
            branch=str(data.get("branch") or ""),
            dept=data.get("dept"),
            year=canonical_year(data.get("year", data.get("Year"))),
            section=str(data.get("section") or data.get("Section") or DEFAULT_SECTION),
            mentor_id=data.get("mentorId") or data.get("mentor_id"),
            uid=data.get("uid"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "rollNumber": self.roll_number,
            "name": self.name,
            "branch": self.branch,
            "dept": self.dept,
            "year": self.year,
            "section": self.section,
            "mentorId": self.mentor_id,
            "uid": self.uid,
        }
