from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_LOW_ATTENDANCE_THRESHOLD
from .core.enums import StoreBackend
from .database.connection import DBConfig, DatabaseConnection
from .marking.service import MarkingService
from .periods.memory_period_repository import InMemoryPeriodRepository
from .periods.mysql_period_repository import MySQLPeriodRepository
from .periods.repository import PeriodRepository
from .reports.service import AttendanceReportService
from .students.memory_student_repository import InMemoryStudentRepository
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import RosterService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    periods_repo: PeriodRepository
    students_repo: StudentRepository

    roster_service: RosterService
    marking_service: MarkingService
    report_service: AttendanceReportService


def build_container(
    *,
    db_config: Optional[dict] = None,
    store_backend: str = StoreBackend.MYSQL.value,
    low_threshold: int = DEFAULT_LOW_ATTENDANCE_THRESHOLD,
) -> Container:
    backend = StoreBackend(store_backend)

    conn: Optional[DatabaseConnection] = None
    if backend is StoreBackend.MYSQL:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
        periods_repo: PeriodRepository = MySQLPeriodRepository(conn)
        students_repo: StudentRepository = MySQLStudentRepository(conn)
    else:
        periods_repo = InMemoryPeriodRepository()
        students_repo = InMemoryStudentRepository()

    roster_service = RosterService(students_repo)
    marking_service = MarkingService(periods_repo, roster_service)
    report_service = AttendanceReportService(periods_repo, low_threshold=low_threshold)

    return Container(
        conn=conn,
        periods_repo=periods_repo,
        students_repo=students_repo,
        roster_service=roster_service,
        marking_service=marking_service,
        report_service=report_service,
    )
