from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..common.week import WeekWindow
from ..core.enums import ApprovalStatus
from ..database.mysql_base import fetchall, fetchone
from .model import WeekState
from .repository import ApprovalRepository

_COLUMNS = """
    staff_id, week_start, week_end, status,
    approved_by, approved_by_name, approved_at, approved_final_minutes
"""


def _to_state(r: dict) -> WeekState:
    return WeekState(
        staff_id=str(r["staff_id"]),
        week_start=r["week_start"],
        week_end=r["week_end"],
        status=ApprovalStatus(r["status"]),
        approved_by=r.get("approved_by"),
        approved_by_name=r.get("approved_by_name"),
        approved_at=from_db_utc(r.get("approved_at")),
        approved_final_minutes=(
            int(r["approved_final_minutes"]) if r.get("approved_final_minutes") is not None else None
        ),
    )


class MySQLApprovalRepository(ApprovalRepository):
    def __init__(self, cur):
        self._cur = cur

    def lock_week(self, *, staff_id: str, week: WeekWindow) -> WeekState:
        self._cur.execute(
            """
            INSERT IGNORE INTO tk_weekly_approvals(staff_id, week_start, week_end, status)
            VALUES(%s,%s,%s,%s)
            """,
            (staff_id, week.start, week.end, ApprovalStatus.PENDING.value),
        )
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM tk_weekly_approvals
            WHERE staff_id=%s AND week_start=%s
            FOR UPDATE
            """,
            (staff_id, week.start),
        )
        return _to_state(fetchone(self._cur))

    def get_week(self, *, staff_id: str, week: WeekWindow) -> Optional[WeekState]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM tk_weekly_approvals WHERE staff_id=%s AND week_start=%s",
            (staff_id, week.start),
        )
        r = fetchone(self._cur)
        return _to_state(r) if r else None

    def list_weeks(self, *, week: WeekWindow) -> Sequence[WeekState]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM tk_weekly_approvals WHERE week_start=%s ORDER BY staff_id",
            (week.start,),
        )
        return [_to_state(r) for r in fetchall(self._cur)]

    def set_status(
        self,
        *,
        staff_id: str,
        week: WeekWindow,
        status: ApprovalStatus,
        approved_by: Optional[str] = None,
        approved_by_name: Optional[str] = None,
        approved_at: Optional[datetime] = None,
        approved_final_minutes: Optional[int] = None,
    ) -> bool:
        self._cur.execute(
            """
            UPDATE tk_weekly_approvals
            SET status=%s, approved_by=%s, approved_by_name=%s, approved_at=%s, approved_final_minutes=%s
            WHERE staff_id=%s AND week_start=%s
            """,
            (
                status.value,
                approved_by,
                approved_by_name,
                to_db_utc(approved_at),
                approved_final_minutes,
                staff_id,
                week.start,
            ),
        )
        return self._cur.rowcount > 0

    def get_adjustments(self, *, staff_id: str, week: WeekWindow) -> Mapping[date, int]:
        self._cur.execute(
            """
            SELECT work_date, adjusted_minutes
            FROM tk_daily_adjustments
            WHERE staff_id=%s AND work_date BETWEEN %s AND %s
            """,
            (staff_id, week.start, week.end),
        )
        return {r["work_date"]: int(r["adjusted_minutes"]) for r in fetchall(self._cur)}

    def list_adjustments(self, *, week: WeekWindow) -> Mapping[str, Mapping[date, int]]:
        self._cur.execute(
            """
            SELECT staff_id, work_date, adjusted_minutes
            FROM tk_daily_adjustments
            WHERE work_date BETWEEN %s AND %s
            """,
            (week.start, week.end),
        )
        out: dict[str, dict[date, int]] = defaultdict(dict)
        for r in fetchall(self._cur):
            out[str(r["staff_id"])][r["work_date"]] = int(r["adjusted_minutes"])
        return dict(out)

    def set_adjustment(self, *, staff_id: str, work_date: date, minutes: Optional[int], updated_by: str) -> None:
        if minutes is None:
            self._cur.execute(
                "DELETE FROM tk_daily_adjustments WHERE staff_id=%s AND work_date=%s",
                (staff_id, work_date),
            )
            return

        self._cur.execute(
            """
            INSERT INTO tk_daily_adjustments(staff_id, work_date, adjusted_minutes, updated_by)
            VALUES(%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE adjusted_minutes=VALUES(adjusted_minutes), updated_by=VALUES(updated_by)
            """,
            (staff_id, work_date, int(minutes), str(updated_by)),
        )
