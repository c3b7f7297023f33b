from __future__ import annotations

import logging
from typing import Optional, Sequence

import mysql.connector

from ..core.constants import PERIODS_COLLECTION
from ..core.exceptions import StoreUnavailableError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Period, PeriodQuery
from .repository import PeriodRepository

logger = logging.getLogger(__name__)


class MySQLPeriodRepository(PeriodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_period(row: dict) -> Period:
        return Period.from_document(load_json(row["doc"]), submitted_at=row.get("submitted_at"))

    def get_period(self, period_id: str) -> Optional[Period]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT period_id, doc, submitted_at
                    FROM {PERIODS_COLLECTION}
                    WHERE period_id=%s
                    """,
                    (period_id,),
                )
                row = fetchone(cur)
        except mysql.connector.Error:
            logger.exception("Failed to load period %s", period_id)
            return None
        return self._to_period(row) if row else None

    def submit_period(self, period: Period) -> None:
        # One statement: the store applies the merge atomically for this document.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO {PERIODS_COLLECTION}
                        (period_id, branch, year, section, subject_code, date, faculty_id, doc, submitted_at)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,CURRENT_TIMESTAMP) AS new
                    ON DUPLICATE KEY UPDATE
                        branch=new.branch,
                        year=new.year,
                        section=new.section,
                        subject_code=new.subject_code,
                        date=new.date,
                        faculty_id=new.faculty_id,
                        doc=JSON_MERGE_PATCH(doc, new.doc),
                        submitted_at=CURRENT_TIMESTAMP
                    """,
                    (
                        period.period_id,
                        period.branch,
                        int(period.year),
                        period.section,
                        period.subject_code,
                        period.date,
                        period.faculty_id,
                        dump_json(period.to_document()),
                    ),
                )
        except mysql.connector.Error as exc:
            logger.exception("Failed to submit period %s", period.period_id)
            raise StoreUnavailableError(f"Could not save attendance for {period.period_id}") from exc

    def query_periods(self, query: PeriodQuery) -> Sequence[Period]:
        clauses: list[str] = []
        params: list[object] = []

        for column, value in (
            ("branch", query.branch),
            ("year", query.year),
            ("section", query.section),
            ("subject_code", query.subject_code),
            ("date", query.date),
            ("faculty_id", query.faculty_id),
        ):
            if value is not None:
                clauses.append(f"{column}=%s")
                params.append(value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT period_id, doc, submitted_at
                    FROM {PERIODS_COLLECTION}
                    {where}
                    """,
                    tuple(params),
                )
                rows = fetchall(cur)
        except mysql.connector.Error:
            logger.exception("Period query failed (%s)", query)
            return []
        return [self._to_period(r) for r in rows]
