from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}")


def today_iso() -> str:
    return now_local().date().isoformat()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def split_time_range(value: str) -> tuple[str, str]:
    """Split a "09:30 AM - 10:20 AM" range into its start and end labels."""
    start, sep, end = (value or "").partition(" - ")
    if not sep:
        return start.strip(), ""
    return start.strip(), end.strip()


def time_sort_key(start_time: str | None) -> int:
    """Minutes since midnight for "09:30 AM" / "14:00" labels, 0 when unparsable."""
    text = (start_time or "").strip().upper()
    for fmt in ("%I:%M %p", "%I%M %p", "%H:%M", "%H%M"):
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.hour * 60 + parsed.minute
    return 0
