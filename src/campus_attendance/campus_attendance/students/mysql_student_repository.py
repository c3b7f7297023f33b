from __future__ import annotations

import logging
from typing import Optional, Sequence

import mysql.connector

from ..core.constants import STUDENTS_COLLECTION
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)

_COLUMNS = "id, roll_number, name, branch, dept, year, section, mentor_id, uid"


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_student(row: dict) -> Student:
        return Student.from_mapping(row)

    def get_by_id(self, student_id: str) -> Optional[Student]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT {_COLUMNS} FROM {STUDENTS_COLLECTION} WHERE id=%s", (student_id,))
                row = fetchone(cur)
        except mysql.connector.Error:
            logger.exception("Failed to load student %s", student_id)
            return None
        return self._to_student(row) if row else None

    def list_by_branch(self, branch: str) -> Sequence[Student]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT {_COLUMNS} FROM {STUDENTS_COLLECTION} WHERE branch=%s", (branch,))
                rows = fetchall(cur)
        except mysql.connector.Error:
            logger.exception("Failed to list students for branch %s", branch)
            return []
        return [self._to_student(r) for r in rows]
