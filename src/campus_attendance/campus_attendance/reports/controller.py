from __future__ import annotations

from flask import Flask, current_app, jsonify, request

from ..common.datetime_utils import parse_iso_date, today_iso
from ..container import Container
from ..core.exceptions import ValidationError
from ..identity.normalizer import branches_for_department, coordinator_branches
from ..periods.model import ClassScope


def _fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def _date_arg() -> str:
    return parse_iso_date(request.args.get("date") or today_iso()).isoformat()


def _coordinator_scope() -> list[str]:
    return coordinator_branches(
        current_app.config["BRANCHES"],
        request.args.get("dept"),
        current_app.config.get("DEPARTMENT_MAP"),
    )


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/faculty/<faculty_id>/history", methods=["GET"], endpoint="api_faculty_history")
    def api_faculty_history(faculty_id: str):
        limit_s = request.args.get("limit")
        limit = int(limit_s) if limit_s and limit_s.isdigit() else None
        periods = reports.faculty_history(faculty_id, limit=limit)
        return jsonify({"success": True, "periods": [reports.monitor_row(p).to_dict() for p in periods]}), 200

    @app.route("/api/students/<student_id>/attendance", methods=["GET"], endpoint="api_student_attendance")
    def api_student_attendance(student_id: str):
        student = container.roster_service.get_student(student_id)
        if student is None:
            return _fail("Student not found", 404)

        try:
            scope = ClassScope.of(
                request.args.get("branch") or student.branch,
                request.args.get("year") or student.year,
                request.args.get("section") or student.section,
            )
        except ValidationError as e:
            return _fail(str(e), 400)

        subject_code = request.args.get("subject")
        if subject_code:
            stats = reports.student_subject(scope, subject_code, student).to_dict()
        else:
            stats = reports.student_overall(scope, student).to_dict()

        stats["belowThreshold"] = stats["percentage"] < reports.low_threshold
        return jsonify({"success": True, "attendance": stats}), 200

    @app.route("/api/monitor", methods=["GET"], endpoint="api_class_monitor")
    def api_class_monitor():
        try:
            date_iso = _date_arg()
        except ValidationError as e:
            return _fail(str(e), 400)

        rows = reports.class_monitor(
            date_iso,
            branch=request.args.get("branch") or None,
            search=request.args.get("q", ""),
        )
        overview = reports.branch_overview(date_iso, _coordinator_scope())
        return (
            jsonify(
                {
                    "success": True,
                    "date": date_iso,
                    "overview": [b.to_dict() for b in overview],
                    "rows": [r.to_dict() for r in rows],
                }
            ),
            200,
        )

    @app.route("/api/coordinator/summary", methods=["GET"], endpoint="api_coordinator_summary")
    def api_coordinator_summary():
        try:
            date_iso = _date_arg()
        except ValidationError as e:
            return _fail(str(e), 400)

        branches = _coordinator_scope()
        summary = reports.coordinator_summary(date_iso, branches)
        return jsonify({"success": True, "branches": branches, "summary": summary.to_dict()}), 200

    @app.route("/api/departments/<dept>/branches", methods=["GET"], endpoint="api_department_branches")
    def api_department_branches(dept: str):
        branches = branches_for_department(current_app.config["BRANCHES"], dept)
        return jsonify({"success": True, "branches": branches}), 200
