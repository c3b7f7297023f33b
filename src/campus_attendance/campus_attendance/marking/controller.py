from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import StoreUnavailableError, ValidationError
from .service import MarkingSession, session_from_period

logger = logging.getLogger(__name__)


def _fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def register(app: Flask, container: Container) -> None:
    @app.route("/api/periods/<period_id>", methods=["GET"], endpoint="api_get_period")
    def api_get_period(period_id: str):
        period = container.report_service.get_period(period_id)
        if period is None:
            return _fail("Period not found", 404)
        return jsonify({"success": True, "period": period.to_document()}), 200

    @app.route("/api/periods/<period_id>/session", methods=["GET"], endpoint="api_period_session")
    def api_period_session(period_id: str):
        """Session payload that reopens a stored period for editing."""
        period = container.report_service.get_period(period_id)
        if period is None:
            return _fail("Period not found", 404)
        return jsonify({"success": True, "session": session_from_period(period).to_dict()}), 200

    @app.route("/api/marking/open", methods=["POST"], endpoint="api_marking_open")
    def api_marking_open():
        try:
            session = MarkingSession.from_payload(request.get_json(silent=True) or {})
            sheet = container.marking_service.open_session(session)
        except ValidationError as e:
            return _fail(str(e), 400)
        except Exception:
            logger.exception("Failed to open marking session")
            return _fail("Failed to load class data", 500)

        return jsonify({"success": True, "sheet": sheet.to_dict()}), 200

    @app.route("/api/marking/submit", methods=["POST"], endpoint="api_marking_submit")
    def api_marking_submit():
        data = request.get_json(silent=True) or {}
        try:
            session = MarkingSession.from_payload(data)
            marks = data.get("marks")
            if not isinstance(marks, dict):
                raise ValidationError("marks must be an object of {studentKey: 'P' | 'A'}")

            roster_size = data.get("rosterSize")
            if roster_size is None:
                scope = session.scope
                roster_size = len(container.roster_service.get_class_students(scope.branch, scope.year, scope.section))

            period = container.marking_service.submit(session, marks, roster_size=int(roster_size))
        except ValidationError as e:
            return _fail(str(e), 400)
        except StoreUnavailableError as e:
            return _fail(str(e), 503)
        except (TypeError, ValueError):
            return _fail("rosterSize must be an integer", 400)

        return jsonify({"success": True, "message": "Attendance submitted", "period": period.to_document()}), 200
