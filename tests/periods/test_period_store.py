from datetime import datetime, timedelta

from src.campus_attendance.campus_attendance.periods.memory_period_repository import InMemoryPeriodRepository
from src.campus_attendance.campus_attendance.periods.model import Period, PeriodQuery, merge_documents


class TickingClock:
    def __init__(self, start: datetime):
        self._now = start

    def __call__(self) -> datetime:
        self._now += timedelta(minutes=1)
        return self._now


def test_missing_period_is_none():
    repo = InMemoryPeriodRepository()
    assert repo.get_period("CSE_3_A_2024-02-20_0930") is None


def test_resubmission_updates_the_same_document(make_period, fixed_now):
    repo = InMemoryPeriodRepository(clock=TickingClock(fixed_now))

    repo.submit_period(make_period(records={"R1": "P", "R2": "P"}))
    repo.submit_period(make_period(records={"R1": "P", "R2": "A"}))

    assert len(repo) == 1
    stored = repo.get_period("CSE_3_A_2024-02-20_0930 AM")
    assert stored.records == {"R1": "P", "R2": "A"}
    assert stored.stats.present == 1
    assert stored.submitted_at == fixed_now + timedelta(minutes=2)


def test_resubmission_merges_records_key_by_key(make_period):
    repo = InMemoryPeriodRepository()

    repo.submit_period(make_period(records={"R1": "P", "R2": "P"}))
    repo.submit_period(make_period(records={"R2": "A"}))

    assert repo.get_period("CSE_3_A_2024-02-20_0930 AM").records == {"R1": "P", "R2": "A"}


def test_query_filters_by_equality(make_period):
    repo = InMemoryPeriodRepository()
    repo.submit_period(make_period("p1", subject_code="CS301"))
    repo.submit_period(make_period("p2", subject_code="CS302"))
    repo.submit_period(make_period("p3", subject_code="CS301", section="B"))
    repo.submit_period(make_period("p4", subject_code="CS301", date="2024-02-21", faculty_id="F-9"))

    ids = lambda q: sorted(p.period_id for p in repo.query_periods(q))

    assert ids(PeriodQuery(branch="CSE", year=3, section="A", subject_code="CS301")) == ["p1", "p4"]
    assert ids(PeriodQuery(date="2024-02-20")) == ["p1", "p2", "p3"]
    assert ids(PeriodQuery(faculty_id="F-9")) == ["p4"]
    assert ids(PeriodQuery()) == ["p1", "p2", "p3", "p4"]


def test_returned_periods_do_not_alias_the_store(make_period):
    repo = InMemoryPeriodRepository()
    repo.submit_period(make_period(records={"R1": "P"}))

    fetched = repo.get_period("CSE_3_A_2024-02-20_0930 AM")
    fetched.records["R1"] = "A"

    assert repo.get_period("CSE_3_A_2024-02-20_0930 AM").records == {"R1": "P"}


def test_document_round_trip_keeps_fields(make_period):
    period = make_period(records={"R1": "P", "R2": "A"})
    doc = period.to_document()

    assert doc["periodId"] == "CSE_3_A_2024-02-20_0930 AM"
    assert doc["subjectCode"] == "CS301"
    assert doc["stats"] == {"present": 1, "absent": 1, "total": 2}
    assert Period.from_document(doc) == period


def test_from_document_tolerates_legacy_shapes():
    period = Period.from_document({"periodId": "x", "year": "4", "subjectCode": "CS401", "records": None})
    assert period.year == 4
    assert period.subject_name == "CS401"
    assert period.records == {}
    assert period.stats.total == 0


def test_merge_documents():
    base = {"a": 1, "records": {"R1": "P", "R2": "P"}, "gone": True}
    patch = {"a": 2, "records": {"R2": "A"}, "gone": None, "new": [1]}

    merged = merge_documents(base, patch)

    assert merged == {"a": 2, "records": {"R1": "P", "R2": "A"}, "new": [1]}
    assert base["records"] == {"R1": "P", "R2": "P"}
