"""Generate past attendance periods for one class (demo data).

Usage: python scripts/seed_attendance.py CSE 3 A --days 3 --present-rate 0.8
"""
from __future__ import annotations

import argparse
import importlib
import logging
import random
import sys
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.campus_attendance.campus_attendance.common.datetime_utils import now_local
from src.campus_attendance.campus_attendance.container import build_container
from src.campus_attendance.campus_attendance.core.enums import Mark
from src.campus_attendance.campus_attendance.marking.service import MarkingSession
from src.campus_attendance.campus_attendance.periods.model import ClassScope, Faculty, Subject

logger = logging.getLogger("seed_attendance")

SUBJECTS = [
    (Subject(code="CS401", name="Advanced Algorithms"), "09:30 AM", "10:20 AM"),
    (Subject(code="CS402", name="Machine Learning"), "10:30 AM", "11:20 AM"),
    (Subject(code="CS403", name="Cloud Computing"), "11:30 AM", "12:20 PM"),
]


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("branch")
    parser.add_argument("year")
    parser.add_argument("section")
    parser.add_argument("--days", type=int, default=3)
    parser.add_argument("--present-rate", type=float, default=0.8)
    parser.add_argument("--faculty-id", default="seed-faculty")
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    rng = random.Random(args.seed)

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        store_backend=getattr(settings, "STORE_BACKEND", "mysql"),
    )

    scope = ClassScope.of(args.branch, args.year, args.section)
    roster = container.roster_service.get_class_students(scope.branch, scope.year, scope.section)
    if not roster:
        logger.warning("No students found for %s %s %s", scope.branch, scope.year, scope.section)
        return

    for subject, start, end in SUBJECTS:
        for days_ago in range(1, args.days + 1):
            session = MarkingSession(
                scope=scope,
                subject=subject,
                faculty=Faculty(id=args.faculty_id, name="Seed Faculty"),
                start_time=start,
                end_time=end,
                date=(now_local().date() - timedelta(days=days_ago)).isoformat(),
            )
            marks = {
                s.mark_key: (Mark.PRESENT if rng.random() < args.present_rate else Mark.ABSENT).value for s in roster
            }
            period = container.marking_service.submit(session, marks, roster_size=len(roster))
            logger.info(
                "Created %s (%d/%d P)", period.period_id, period.stats.present, period.stats.total
            )


if __name__ == "__main__":
    main()
