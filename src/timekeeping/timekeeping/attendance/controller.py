from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_client_time
from ..common.http import error_response, json_body
from ..common.serializers import event_to_dict, session_result_to_dict, status_to_dict
from ..common.week import WeekWindow
from ..container import Container
from ..core.enums import AttendanceSource
from ..core.exceptions import AuthorizationError, DomainError, StorageUnavailableError, ValidationError
from ..users.session import login_required
from .location import capture_location


def register(app: Flask, container: Container) -> None:
    def _target_staff_id(value) -> str:
        staff_id = str(value or g.actor.staff_id or "").strip()
        if not staff_id:
            raise ValidationError("staffId is required")
        if not container.staff_service.can_view(g.actor, staff_id):
            raise AuthorizationError("You can only view your own time keeping")
        return staff_id

    def _parse_source(value) -> AttendanceSource:
        if not value:
            return AttendanceSource.WEB
        try:
            return AttendanceSource(str(value).strip().upper())
        except ValueError:
            raise ValidationError(f"Unknown source: {value}")

    def _default_week() -> tuple[str, str]:
        week = WeekWindow.containing(container.today())
        return week.start.isoformat(), week.end.isoformat()

    @app.route("/time-keeping/status", methods=["GET"], endpoint="tk_status")
    @login_required
    def tk_status():
        try:
            staff_id = _target_staff_id(request.args.get("staffId"))
            status = container.session_service.get_status(staff_id=staff_id)
            return jsonify(status_to_dict(status))
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)

    @app.route("/time-keeping/attendance", methods=["GET"], endpoint="tk_attendance")
    @login_required
    def tk_attendance():
        try:
            staff_id = _target_staff_id(request.args.get("staffId"))
            start, end = _default_week()
            events = container.session_service.list_attendance(
                staff_id=staff_id,
                week_start=request.args.get("from") or start,
                week_end=request.args.get("to") or end,
            )
            return jsonify([event_to_dict(e) for e in events])
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)

    @app.route("/time-keeping/check-in", methods=["POST"], endpoint="tk_check_in")
    @login_required
    def tk_check_in():
        body = json_body()
        try:
            result = container.session_service.check_in(
                actor=g.actor,
                staff_id=str(body.get("staffId") or g.actor.staff_id or ""),
                location=capture_location(body),
                client_time=parse_client_time(body.get("clientTime")),
                source=_parse_source(body.get("source")),
            )
            return jsonify({"success": True, **session_result_to_dict(result)}), 201
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)

    @app.route("/time-keeping/check-out", methods=["POST"], endpoint="tk_check_out")
    @login_required
    def tk_check_out():
        body = json_body()
        try:
            result = container.session_service.check_out(
                actor=g.actor,
                staff_id=str(body.get("staffId") or g.actor.staff_id or ""),
                location=capture_location(body),
                client_time=parse_client_time(body.get("clientTime")),
            )
            return jsonify({"success": True, **session_result_to_dict(result)})
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)
