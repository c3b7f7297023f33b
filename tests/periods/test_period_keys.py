from datetime import date

import pytest

from src.campus_attendance.campus_attendance.core.exceptions import ValidationError
from src.campus_attendance.campus_attendance.periods.keys import (
    build_period_id,
    format_class_context,
    parse_class_context,
    period_id_for,
)
from src.campus_attendance.campus_attendance.periods.model import ClassScope


def test_period_id_format():
    assert build_period_id("CSE", 3, "A", "2024-02-20", "09:30") == "CSE_3_A_2024-02-20_0930"


def test_period_id_is_deterministic():
    first = build_period_id("CSE", 3, "A", "2024-02-20", "09:30 AM")
    second = build_period_id("CSE", 3, "A", "2024-02-20", "09:30 AM")
    assert first == second == "CSE_3_A_2024-02-20_0930 AM"


def test_colon_in_start_time_does_not_change_the_key():
    assert build_period_id("CSE", 3, "A", "2024-02-20", "09:30 AM") == build_period_id(
        "CSE", 3, "A", "2024-02-20", "0930 AM"
    )


def test_year_as_text_or_number_gives_same_key():
    assert build_period_id("CSE", "3", "A", "2024-02-20", "09:30") == build_period_id(
        "CSE", 3, "A", date(2024, 2, 20), "09:30"
    )


def test_different_start_times_do_not_collide():
    assert build_period_id("CSE", 3, "A", "2024-02-20", "09:30") != build_period_id(
        "CSE", 3, "A", "2024-02-20", "10:30"
    )


@pytest.mark.parametrize(
    "args",
    [
        ("CSE", "", "A", "2024-02-20", "09:30"),
        ("CSE", 3, "A", "20-02-2024", "09:30"),
        ("CSE", 3, "A", "2024-02-20", "  "),
    ],
)
def test_invalid_parts_are_rejected(args):
    with pytest.raises(ValidationError):
        build_period_id(*args)


def test_class_context_round_trip():
    scope = parse_class_context("CSE Yr 3 (A)")
    assert scope == ClassScope(branch="CSE", year=3, section="A")
    assert format_class_context(scope) == "CSE Yr 3 (A)"


def test_class_context_with_numeric_section():
    assert parse_class_context("AID Yr 2 (1)") == ClassScope(branch="AID", year=2, section="1")


def test_unparsable_class_context():
    assert parse_class_context("Third year CSE") is None
    assert parse_class_context("") is None


def test_scope_of_parses_year_once():
    scope = ClassScope.of(" cse ", "3rd", "a")
    assert scope == ClassScope(branch="CSE", year=3, section="A")
    assert period_id_for(scope, "2024-02-20", "09:30") == "CSE_3_A_2024-02-20_0930"


def test_scope_of_rejects_missing_parts():
    with pytest.raises(ValidationError):
        ClassScope.of("CSE", None, "A")
    with pytest.raises(ValidationError):
        ClassScope.of("", 3, "A")
