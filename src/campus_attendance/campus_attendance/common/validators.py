from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value, field_name: str) -> str:
    text = "" if value is None else str(value)
    if not text.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return text.strip()
