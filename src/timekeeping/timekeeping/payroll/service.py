from __future__ import annotations

from dataclasses import dataclass

from ..approvals.service import ApprovalService
from ..common.datetime_utils import minutes_to_hhmm, minutes_to_hours
from ..users.model import Actor


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


class PayrollExportService:
    """Hands approved weekly totals to payroll. Pending weeks never appear."""

    def __init__(self, approvals: ApprovalService):
        self._approvals = approvals

    def build_weekly_export(self, *, actor: Actor, week_start: str, week_end: str) -> ReportData:
        approved = self._approvals.approved_totals(actor=actor, week_start=week_start, week_end=week_end)

        rows = [
            {
                "week_start": a.week_start.isoformat(),
                "week_end": a.week_end.isoformat(),
                "staff_id": a.staff_id,
                "staff_name": a.staff_name,
                "position": a.position,
                "final_minutes": a.final_minutes,
                "final_hours": minutes_to_hours(a.final_minutes),
                "final_hhmm": minutes_to_hhmm(a.final_minutes),
                "approved_by": a.approved_by_name or a.approved_by or "",
                "approved_at": a.approved_at.isoformat() if a.approved_at else "",
            }
            for a in approved
        ]
        total = sum(a.final_minutes for a in approved)
        return ReportData(
            rows=rows,
            summary={"staff_count": len(rows), "total_minutes": total, "total_hours": minutes_to_hours(total)},
        )
