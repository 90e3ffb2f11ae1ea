from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.http import error_response, json_body
from ..common.serializers import approval_list_to_dict, approval_to_dict, detail_to_dict
from ..common.week import WeekWindow
from ..container import Container
from ..core.exceptions import DomainError, StorageUnavailableError, ValidationError
from ..users.session import approver_required, login_required


def register(app: Flask, container: Container) -> None:
    def _week_args(source) -> tuple[str, str]:
        week = WeekWindow.containing(container.today())
        return (
            str(source.get("from") or week.start.isoformat()),
            str(source.get("to") or week.end.isoformat()),
        )

    @app.route("/time-keeping/admin/weekly", methods=["GET"], endpoint="tk_admin_weekly")
    @approver_required
    def tk_admin_weekly():
        try:
            start, end = _week_args(request.args)
            listing = container.approval_service.list_weekly_approvals(
                actor=g.actor,
                week_start=start,
                week_end=end,
                query=request.args.get("q", ""),
                status=request.args.get("status"),
            )
            return jsonify(approval_list_to_dict(listing))
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)

    @app.route("/time-keeping/admin/weekly/<staff_id>", methods=["GET"], endpoint="tk_admin_weekly_detail")
    @approver_required
    def tk_admin_weekly_detail(staff_id: str):
        try:
            start, end = _week_args(request.args)
            detail = container.approval_service.get_weekly_detail(staff_id=staff_id, week_start=start, week_end=end)
            return jsonify(detail_to_dict(detail))
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)

    @app.route("/time-keeping/weekly", methods=["GET"], endpoint="tk_my_weekly")
    @login_required
    def tk_my_weekly():
        """Staff members' read-only view of their own week."""
        try:
            if not g.actor.staff_id:
                raise ValidationError("No employee record is linked to this account")
            start, end = _week_args(request.args)
            detail = container.approval_service.get_weekly_detail(
                staff_id=g.actor.staff_id, week_start=start, week_end=end
            )
            return jsonify(detail_to_dict(detail))
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)

    @app.route("/time-keeping/admin/weekly/<staff_id>/adjust", methods=["POST"], endpoint="tk_admin_adjust")
    @approver_required
    def tk_admin_adjust(staff_id: str):
        body = json_body()
        try:
            start, end = _week_args(body)
            daily = body.get("dailyAdjustments") or []
            if not isinstance(daily, list):
                raise ValidationError("dailyAdjustments must be a list")
            approval = container.approval_service.save_adjustment(
                actor=g.actor,
                staff_id=staff_id,
                week_start=start,
                week_end=end,
                daily=daily,
                reason=str(body.get("reason") or ""),
            )
            return jsonify({"success": True, "row": approval_to_dict(approval, include_daily=True)})
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)

    @app.route("/time-keeping/admin/weekly/<staff_id>/approve", methods=["POST"], endpoint="tk_admin_approve")
    @approver_required
    def tk_admin_approve(staff_id: str):
        body = json_body()
        try:
            start, end = _week_args(body)
            approval = container.approval_service.approve(
                actor=g.actor,
                staff_id=staff_id,
                week_start=start,
                week_end=end,
                reason=str(body.get("reason") or ""),
            )
            return jsonify({"success": True, "row": approval_to_dict(approval, include_daily=True)})
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)

    @app.route("/time-keeping/admin/weekly/<staff_id>/unlock", methods=["POST"], endpoint="tk_admin_unlock")
    @approver_required
    def tk_admin_unlock(staff_id: str):
        body = json_body()
        try:
            start, end = _week_args(body)
            approval = container.approval_service.unlock(
                actor=g.actor,
                staff_id=staff_id,
                week_start=start,
                week_end=end,
                reason=str(body.get("reason") or ""),
            )
            return jsonify({"success": True, "row": approval_to_dict(approval, include_daily=True)})
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)
