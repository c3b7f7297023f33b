import pytest

from src.campus_attendance.campus_attendance.core.exceptions import StoreUnavailableError, ValidationError
from src.campus_attendance.campus_attendance.marking.service import (
    MarkingService,
    MarkingSession,
    session_from_period,
)
from src.campus_attendance.campus_attendance.periods.memory_period_repository import InMemoryPeriodRepository
from src.campus_attendance.campus_attendance.periods.model import ClassScope, Faculty, PeriodQuery, Subject
from src.campus_attendance.campus_attendance.students.memory_student_repository import InMemoryStudentRepository
from src.campus_attendance.campus_attendance.students.service import RosterService


class FailingPeriodRepository(InMemoryPeriodRepository):
    def submit_period(self, period):
        raise StoreUnavailableError("store offline")


@pytest.fixture
def roster(make_student):
    return InMemoryStudentRepository(
        [
            make_student("s3", "21CS003"),
            make_student("s1", "21CS001"),
            make_student("s2", "21CS002", section="1"),
        ]
    )


@pytest.fixture
def session():
    return MarkingSession(
        scope=ClassScope(branch="CSE", year=3, section="A"),
        subject=Subject(code="CS301", name="Operating Systems"),
        faculty=Faculty(id="F-101", name="Prof. Kulkarni"),
        start_time="09:30 AM",
        end_time="10:20 AM",
        date="2024-02-20",
    )


def _service(periods, roster):
    return MarkingService(periods, RosterService(roster))


def test_open_new_session_defaults_to_all_present(roster, session):
    sheet = _service(InMemoryPeriodRepository(), roster).open_session(session)

    assert sheet.period_id == "CSE_3_A_2024-02-20_0930 AM"
    assert [s.roll_number for s in sheet.roster] == ["21CS001", "21CS002", "21CS003"]
    assert sheet.marks == {"21CS001": "P", "21CS002": "P", "21CS003": "P"}
    assert sheet.stats.total == 3
    assert sheet.is_edit is False


def test_open_existing_session_loads_stored_marks(roster, session):
    periods = InMemoryPeriodRepository()
    service = _service(periods, roster)
    service.submit(session, {"21CS001": "A", "21CS002": "P"}, roster_size=3)

    sheet = service.open_session(session)

    assert sheet.is_edit is True
    assert sheet.marks == {"21CS001": "A", "21CS002": "P"}
    assert sheet.stats.present == 1


def test_resubmission_keeps_one_document(roster, session):
    periods = InMemoryPeriodRepository()
    service = _service(periods, roster)

    service.submit(session, {"21CS001": "P", "21CS002": "P", "21CS003": "P"}, roster_size=3)
    service.submit(session, {"21CS001": "P", "21CS002": "A", "21CS003": "P"}, roster_size=3)

    assert len(periods) == 1
    stored = periods.get_period(session.period_id)
    assert stored.records["21CS002"] == "A"
    assert stored.stats.present == 2
    assert stored.stats.absent == 1


def test_submit_rejects_bad_marks(roster, session):
    periods = InMemoryPeriodRepository()
    with pytest.raises(ValidationError):
        _service(periods, roster).submit(session, {"21CS001": "X"}, roster_size=3)
    assert len(periods) == 0


def test_submit_failure_propagates(roster, session):
    with pytest.raises(StoreUnavailableError):
        _service(FailingPeriodRepository(), roster).submit(session, {"21CS001": "P"}, roster_size=3)


def test_load_existing_marks_missing_period(roster):
    assert _service(InMemoryPeriodRepository(), roster).load_existing_marks("nope") is None


def test_session_from_period_reopens_same_identity(make_period):
    period = make_period(records={"R1": "P"})

    session = session_from_period(period)

    assert session.period_id == period.period_id
    assert session.subject.code == "CS301"
    assert session.faculty.name == "Prof. Kulkarni"


def test_session_from_payload_with_context_label():
    session = MarkingSession.from_payload(
        {
            "context": "CSE Yr 3 (A)",
            "time": "09:30 AM - 10:20 AM",
            "subjectCode": "CS301",
            "facultyId": "F-101",
            "date": "2024-02-20",
        }
    )

    assert session.scope == ClassScope(branch="CSE", year=3, section="A")
    assert session.start_time == "09:30 AM"
    assert session.end_time == "10:20 AM"
    assert session.faculty.name == "Unknown"
    assert session.period_id == "CSE_3_A_2024-02-20_0930 AM"
    assert session.to_dict()["time"] == "09:30 AM - 10:20 AM"


def test_session_from_payload_with_explicit_scope():
    session = MarkingSession.from_payload(
        {
            "branch": "cse",
            "year": "3",
            "section": "a",
            "startTime": "14:00",
            "subjectCode": "CS302",
            "facultyId": "F-102",
            "date": "2024-02-21",
        }
    )

    assert session.period_id == "CSE_3_A_2024-02-21_1400"


@pytest.mark.parametrize(
    "payload",
    [
        {"context": "nonsense", "time": "09:30 AM", "subjectCode": "CS301", "facultyId": "F-1"},
        {"context": "CSE Yr 3 (A)", "subjectCode": "CS301", "facultyId": "F-1"},
        {"context": "CSE Yr 3 (A)", "time": "09:30 AM", "facultyId": "F-1"},
        {"context": "CSE Yr 3 (A)", "time": "09:30 AM", "subjectCode": "CS301", "facultyId": "F-1", "date": "bad"},
    ],
)
def test_session_from_payload_rejects_incomplete_input(payload):
    with pytest.raises(ValidationError):
        MarkingSession.from_payload(payload)


def test_unpadded_payload_date_is_stored_in_iso_form(roster):
    periods = InMemoryPeriodRepository()
    session = MarkingSession.from_payload(
        {
            "context": "CSE Yr 3 (A)",
            "time": "09:30 AM",
            "subjectCode": "CS301",
            "facultyId": "F-101",
            "date": "2024-2-20",
        }
    )

    period = _service(periods, roster).submit(session, {"21CS001": "P"}, roster_size=3)

    assert session.date == "2024-02-20"
    assert period.date == "2024-02-20"
    assert period.period_id == "CSE_3_A_2024-02-20_0930 AM"
    assert [p.period_id for p in periods.query_periods(PeriodQuery(date="2024-02-20"))] == [period.period_id]


def test_period_with_empty_records_reopens_as_edit(roster, session):
    periods = InMemoryPeriodRepository()
    service = _service(periods, roster)
    service.submit(session, {}, roster_size=0)

    assert service.load_existing_marks(session.period_id) == {}

    sheet = service.open_session(session)
    assert sheet.is_edit is True
    assert sheet.marks == {}
    assert sheet.stats.present == 0
