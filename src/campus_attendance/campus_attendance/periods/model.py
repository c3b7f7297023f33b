from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..identity.normalizer import canonical_year


@dataclass(frozen=True)
class ClassScope:
    """(branch, year, section) triple identifying a teaching cohort."""

    branch: str
    year: int
    section: str

    @classmethod
    def of(cls, branch: Any, year: Any, section: Any) -> "ClassScope":
        """Build a scope with the year parsed once into its canonical int form."""
        parsed_year = canonical_year(year)
        if parsed_year is None:
            raise ValidationError(f"Invalid year: {year!r}")
        return cls(
            branch=require_non_empty(branch, "branch").upper(),
            year=parsed_year,
            section=require_non_empty(section, "section").upper(),
        )


@dataclass(frozen=True)
class Subject:
    code: str
    name: str = ""


@dataclass(frozen=True)
class Faculty:
    id: str
    name: str = "Unknown"


@dataclass(frozen=True)
class PeriodStats:
    """Counters captured when a period is submitted."""

    present: int = 0
    absent: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"present": self.present, "absent": self.absent, "total": self.total}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PeriodStats":
        data = data or {}
        return cls(
            present=int(data.get("present") or 0),
            absent=int(data.get("absent") or 0),
            total=int(data.get("total") or 0),
        )


@dataclass(frozen=True)
class Period:
    """One class meeting and the attendance taken for it.

    Stored as a document whose field names follow the portal's existing
    camelCase layout (``periodId``, ``subjectCode``, ``records`` ...).
    """

    period_id: str
    branch: str
    year: int
    section: str
    date: str
    start_time: str
    end_time: str
    subject_code: str
    subject_name: str
    faculty_id: str
    faculty_name: str
    records: Dict[str, str] = field(default_factory=dict)
    stats: PeriodStats = field(default_factory=PeriodStats)
    submitted_at: Optional[datetime] = None

    @property
    def scope(self) -> ClassScope:
        return ClassScope(branch=self.branch, year=self.year, section=self.section)

    def to_document(self) -> Dict[str, Any]:
        return {
            "periodId": self.period_id,
            "branch": self.branch,
            "year": self.year,
            "section": self.section,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "subjectCode": self.subject_code,
            "subjectName": self.subject_name,
            "facultyId": self.faculty_id,
            "facultyName": self.faculty_name,
            "records": dict(self.records),
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_document(cls, doc: Mapping[str, Any], *, submitted_at: Optional[datetime] = None) -> "Period":
        subject_code = str(doc.get("subjectCode") or "")
        return cls(
            period_id=str(doc.get("periodId") or ""),
            branch=str(doc.get("branch") or ""),
            year=canonical_year(doc.get("year")) or 0,
            section=str(doc.get("section") or ""),
            date=str(doc.get("date") or ""),
            start_time=str(doc.get("startTime") or ""),
            end_time=str(doc.get("endTime") or ""),
            subject_code=subject_code,
            subject_name=str(doc.get("subjectName") or subject_code),
            faculty_id=str(doc.get("facultyId") or ""),
            faculty_name=str(doc.get("facultyName") or ""),
            records={str(k): str(v) for k, v in (doc.get("records") or {}).items()},
            stats=PeriodStats.from_dict(doc.get("stats")),
            submitted_at=submitted_at,
        )


@dataclass(frozen=True)
class PeriodQuery:
    """Equality filters for a multi-get; ``None`` means "any"."""

    branch: Optional[str] = None
    year: Optional[int] = None
    section: Optional[str] = None
    subject_code: Optional[str] = None
    date: Optional[str] = None
    faculty_id: Optional[str] = None

    @classmethod
    def for_scope(cls, scope: ClassScope, **filters: Any) -> "PeriodQuery":
        return cls(branch=scope.branch, year=scope.year, section=scope.section, **filters)

    def matches(self, period: Period) -> bool:
        wanted = (
            (self.branch, period.branch),
            (self.year, period.year),
            (self.section, period.section),
            (self.subject_code, period.subject_code),
            (self.date, period.date),
            (self.faculty_id, period.faculty_id),
        )
        return all(expected is None or expected == actual for expected, actual in wanted)


def merge_documents(base: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge-write semantics of the document store.

    Nested maps merge key by key, every other value is replaced and ``None``
    removes the field (same rules as MySQL ``JSON_MERGE_PATCH``).
    """

    merged: Dict[str, Any] = dict(base)
    for key, value in patch.items():
        if value is None:
            merged.pop(key, None)
        elif isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_documents(merged[key], value)
        elif isinstance(value, Mapping):
            merged[key] = merge_documents({}, value)
        else:
            merged[key] = value
    return merged
