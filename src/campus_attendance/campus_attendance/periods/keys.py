"""Deterministic identity of a class period.

Persisted ids look like ``CSE_3_A_2024-02-20_0930``: branch, year, section,
ISO date and the start time label with its colons removed (spaces kept, so
"09:30 AM" becomes "0930 AM"), joined with underscores. Two submissions
for the same class meeting always land on the same id, which makes
re-submission an edit.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional, Union

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import ValidationError
from ..identity.normalizer import canonical_year
from .model import ClassScope

_CONTEXT_RE = re.compile(r"([A-Z]+)\s+Yr\s+(\d+)\s+\(([A-Z0-9]+)\)")


def clean_start_time(start_time_raw: str) -> str:
    return (start_time_raw or "").strip().replace(":", "")


def build_period_id(
    branch: str,
    year: Any,
    section: str,
    date_iso: Union[str, date],
    start_time_raw: str,
) -> str:
    parsed_year = canonical_year(year)
    if parsed_year is None:
        raise ValidationError(f"Invalid year: {year!r}")

    day = date_iso if isinstance(date_iso, date) else parse_iso_date(str(date_iso).strip())
    start = clean_start_time(start_time_raw)
    if not start:
        raise ValidationError("start time must not be empty")

    return f"{str(branch).strip()}_{parsed_year}_{str(section).strip()}_{day.isoformat()}_{start}"


def period_id_for(scope: ClassScope, date_iso: Union[str, date], start_time_raw: str) -> str:
    return build_period_id(scope.branch, scope.year, scope.section, date_iso, start_time_raw)


def parse_class_context(context: str) -> Optional[ClassScope]:
    """Parse a dashboard context label such as ``"CSE Yr 3 (A)"``."""
    match = _CONTEXT_RE.search(context or "")
    if not match:
        return None
    return ClassScope.of(match.group(1), match.group(2), match.group(3))


def format_class_context(scope: ClassScope) -> str:
    return f"{scope.branch} Yr {scope.year} ({scope.section})"
