from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, storage_errors
from .model import StaffProfile
from .repository import EmployeeDirectory


def _to_profile(r: dict) -> StaffProfile:
    return StaffProfile(
        staff_id=str(r["staff_id"]),
        full_name=r["full_name"],
        position=r.get("position") or "",
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_profile(self, staff_id: str) -> Optional[StaffProfile]:
        with storage_errors("The employee directory"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT staff_id, full_name, position, is_active
                FROM employees
                WHERE staff_id=%s
                """,
                (str(staff_id),),
            )
            r = fetchone(cur)
            return _to_profile(r) if r else None

    def get_profiles(self, staff_ids: Iterable[str]) -> Mapping[str, StaffProfile]:
        ids = sorted({str(s) for s in staff_ids})
        if not ids:
            return {}

        placeholders = ",".join(["%s"] * len(ids))
        with storage_errors("The employee directory"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT staff_id, full_name, position, is_active
                FROM employees
                WHERE staff_id IN ({placeholders})
                """,
                tuple(ids),
            )
            return {str(r["staff_id"]): _to_profile(r) for r in fetchall(cur)}
