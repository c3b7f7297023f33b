from __future__ import annotations

from enum import Enum


class Mark(str, Enum):
    """A single student's status inside a period's records map."""

    PRESENT = "P"
    ABSENT = "A"


class StoreBackend(str, Enum):
    MYSQL = "mysql"
    MEMORY = "memory"
