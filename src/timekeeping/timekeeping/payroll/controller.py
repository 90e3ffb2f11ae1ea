from __future__ import annotations

import csv
import io

from flask import Flask, g, request

from ..common.http import error_response
from ..common.week import WeekWindow
from ..container import Container
from ..core.exceptions import DomainError, StorageUnavailableError
from ..users.session import approver_required

_FIELDS = [
    "week_start",
    "week_end",
    "staff_id",
    "staff_name",
    "position",
    "final_minutes",
    "final_hours",
    "final_hhmm",
    "approved_by",
    "approved_at",
]


def register(app: Flask, container: Container) -> None:
    def _write_report_csv(*, rows, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/time-keeping/admin/payroll.csv", methods=["GET"], endpoint="tk_payroll_csv")
    @approver_required
    def tk_payroll_csv():
        try:
            week = WeekWindow.containing(container.today())
            start = request.args.get("from") or week.start.isoformat()
            end = request.args.get("to") or week.end.isoformat()
            data = container.payroll_export_service.build_weekly_export(actor=g.actor, week_start=start, week_end=end)
            return _write_report_csv(rows=data.rows, filename=f"approved_hours_{start}_{end}.csv")
        except (DomainError, StorageUnavailableError) as e:
            return error_response(e)
