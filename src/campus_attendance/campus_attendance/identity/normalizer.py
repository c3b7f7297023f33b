"""Shared normalisation of organisational labels and student lookup keys.

Source data is entered by hand: branch names arrive as "AI&DS", "aids",
"Computer Science", section codes as "1" or "a", years as 3, "3" or "3rd".
Every filter and roll-up goes through this module so that the same record
is never grouped two different ways.

All label normalisers are total: unknown input is returned cleaned, never
rejected.
"""
from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional, Sequence

_NON_LETTERS = re.compile(r"[^A-Z]")
_NON_DIGITS = re.compile(r"\D")


def clean_label(label: Optional[str]) -> str:
    """Uppercase and drop everything that is not a letter ("AI&DS" -> "AIDS")."""
    if not label:
        return ""
    return _NON_LETTERS.sub("", str(label).upper())


def _cleaned(aliases: Iterable[str]) -> frozenset[str]:
    return frozenset(clean_label(a) for a in aliases)


# Broad grouping: department-head visibility.
_BROAD_AIDS = _cleaned(
    ["AID", "CSM", "AIDS", "AI&DS", "AIML", "ML", "DS", "CSD", "CS-DS", "CS-AI", "IOT", "CS-IOT", "CSIOT"]
)
_BROAD_AIDS_MARKERS = ("ARTIFICIAL", "MACHINE", "DATA", "IOT")
_BROAD_CSE = _cleaned(["CSE", "CS", "CSBS", "CSI", "CSEA", "CSEB"])
_BROAD_CSE_MARKERS = ("COMPUTER", "COMP")

# Strict grouping: sibling branches stay apart.
_STRICT_ALIASES: dict[str, str] = {}
for _canonical, _aliases in (
    ("AID", ["AID", "AIDS", "AI&DS"]),
    ("IOT", ["IOT", "CSIOT", "CS-IOT"]),
    ("CSM", ["CSM", "CS-ML", "AIML"]),
):
    for _alias in _cleaned(_aliases):
        _STRICT_ALIASES[_alias] = _canonical

_SECTION_ALIASES = {"1": "A", "2": "B", "3": "C", "4": "D"}


def normalize_broad_department(label: Optional[str]) -> str:
    d = clean_label(label)
    if not d:
        return ""

    if d in _BROAD_AIDS or any(marker in d for marker in _BROAD_AIDS_MARKERS):
        return "AIDS"
    if d in _BROAD_CSE or any(marker in d for marker in _BROAD_CSE_MARKERS):
        return "CSE"
    return d


def normalize_strict_branch(label: Optional[str]) -> str:
    b = clean_label(label)
    return _STRICT_ALIASES.get(b, b)


def canonical_section(value: Any) -> str:
    """Map legacy numeric section codes onto letters ("1" -> "A", "b" -> "B")."""
    text = "" if value is None else str(value).strip().upper()
    return _SECTION_ALIASES.get(text, text)


def canonical_year(value: Any) -> Optional[int]:
    """Parse a year given as 3, "3" or "3rd"; None when it carries no digits."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    digits = _NON_DIGITS.sub("", str(value))
    return int(digits) if digits else None


def candidate_keys(student: Any) -> list[str]:
    """Keys a student may be recorded under, in lookup priority order.

    Accepts a Student entity or a plain mapping with rollNumber/id/uid.
    """
    if isinstance(student, Mapping):
        raw = [student.get("rollNumber") or student.get("roll_number"), student.get("id"), student.get("uid")]
    else:
        raw = [getattr(student, "roll_number", None), getattr(student, "id", None), getattr(student, "uid", None)]

    keys: list[str] = []
    for value in raw:
        if value is None or value == "":
            continue
        key = str(value)
        if key not in keys:
            keys.append(key)
    return keys


def resolve_mark(records: Optional[Mapping[str, str]], keys: Sequence[str]) -> Optional[str]:
    """First mark found in ``records`` for the ordered candidate ``keys``."""
    if not records:
        return None
    for key in keys:
        mark = records.get(key)
        if mark is not None:
            return mark
    return None


def resolve_student_key(records: Optional[Mapping[str, str]], student: Any) -> Optional[str]:
    return resolve_mark(records, candidate_keys(student))


def branches_for_department(branches: Iterable[str], dept: Optional[str]) -> list[str]:
    """Structure branches visible to a department head of ``dept``."""
    if not dept:
        return sorted(branches)
    scope = normalize_broad_department(dept)
    return sorted(b for b in branches if normalize_broad_department(b) == scope)


def coordinator_branches(
    branches: Iterable[str],
    dept: Optional[str],
    department_map: Optional[Mapping[str, Sequence[str]]] = None,
) -> list[str]:
    """Branches a coordinator of ``dept`` oversees.

    The department map entry wins; otherwise the coordinator sees their own
    branch when it is listed, else every branch.
    """
    listed = sorted(branches)
    if not dept:
        return listed
    mapped = (department_map or {}).get(dept)
    if mapped:
        return list(mapped)
    if dept in listed:
        return [dept]
    return listed
