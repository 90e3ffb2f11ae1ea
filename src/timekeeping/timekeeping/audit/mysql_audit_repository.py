from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..core.enums import AuditAction
from ..database.mysql_base import fetchall
from .model import AuditEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, cur):
        self._cur = cur

    def append(
        self,
        *,
        staff_id: str,
        week_start: date,
        action: AuditAction,
        actor_id: str,
        actor_name: Optional[str],
        reason: Optional[str],
        created_at: datetime,
        details: Optional[Mapping[str, Any]] = None,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO tk_audit_entries(
                staff_id, week_start, action, actor_id, actor_name, reason, details, created_at
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                staff_id,
                week_start,
                action.value,
                str(actor_id),
                actor_name,
                reason,
                json.dumps(dict(details or {}), default=str),
                to_db_utc(created_at),
            ),
        )
        return int(self._cur.lastrowid)

    def list_for_week(self, *, staff_id: str, week_start: date) -> Sequence[AuditEntry]:
        self._cur.execute(
            """
            SELECT audit_id, staff_id, week_start, action, actor_id, actor_name, reason, details, created_at
            FROM tk_audit_entries
            WHERE staff_id=%s AND week_start=%s
            ORDER BY created_at ASC, audit_id ASC
            """,
            (staff_id, week_start),
        )
        out: list[AuditEntry] = []
        for r in fetchall(self._cur):
            details = r.get("details")
            if isinstance(details, (bytes, bytearray)):
                details = details.decode("utf-8")
            out.append(
                AuditEntry(
                    audit_id=int(r["audit_id"]),
                    staff_id=str(r["staff_id"]),
                    week_start=r["week_start"],
                    action=AuditAction(r["action"]),
                    actor_id=str(r["actor_id"]),
                    created_at=from_db_utc(r["created_at"]),
                    actor_name=r.get("actor_name"),
                    reason=r.get("reason"),
                    details=json.loads(details) if details else {},
                )
            )
        return out
