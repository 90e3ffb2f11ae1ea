from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..core.enums import AttendanceSource
from ..core.exceptions import ConflictError
from ..database.mysql_base import fetchall, fetchone
from .model import AttendanceEvent, GeoLocation
from .repository import AttendanceRepository

_COLUMNS = """
    event_id, staff_id, check_in_at, check_out_at, total_minutes,
    check_in_latitude, check_in_longitude, check_in_accuracy,
    check_out_latitude, check_out_longitude, check_out_accuracy,
    source, client_check_in_at, client_check_out_at
"""


def _to_event(r: dict) -> AttendanceEvent:
    check_out_location = None
    if r.get("check_out_latitude") is not None:
        check_out_location = GeoLocation(
            latitude=float(r["check_out_latitude"]),
            longitude=float(r["check_out_longitude"]),
            accuracy_meters=float(r["check_out_accuracy"]),
        )
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        staff_id=str(r["staff_id"]),
        check_in_at=from_db_utc(r["check_in_at"]),
        check_in_location=GeoLocation(
            latitude=float(r["check_in_latitude"]),
            longitude=float(r["check_in_longitude"]),
            accuracy_meters=float(r["check_in_accuracy"]),
        ),
        source=AttendanceSource(r["source"]),
        check_out_at=from_db_utc(r.get("check_out_at")),
        check_out_location=check_out_location,
        total_minutes=(int(r["total_minutes"]) if r.get("total_minutes") is not None else None),
        client_check_in_at=from_db_utc(r.get("client_check_in_at")),
        client_check_out_at=from_db_utc(r.get("client_check_out_at")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, cur):
        self._cur = cur

    def lock_staff(self, staff_id: str) -> None:
        self._cur.execute("INSERT IGNORE INTO tk_staff_locks(staff_id) VALUES(%s)", (staff_id,))
        self._cur.execute("SELECT staff_id FROM tk_staff_locks WHERE staff_id=%s FOR UPDATE", (staff_id,))
        fetchone(self._cur)

    def get_by_id(self, event_id: int) -> Optional[AttendanceEvent]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM tk_attendance_events WHERE event_id=%s", (int(event_id),))
        r = fetchone(self._cur)
        return _to_event(r) if r else None

    def get_open_session(self, staff_id: str) -> Optional[AttendanceEvent]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM tk_attendance_events
            WHERE staff_id=%s AND check_out_at IS NULL
            ORDER BY check_in_at DESC
            LIMIT 1
            """,
            (staff_id,),
        )
        r = fetchone(self._cur)
        return _to_event(r) if r else None

    def get_latest(self, staff_id: str) -> Optional[AttendanceEvent]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM tk_attendance_events
            WHERE staff_id=%s
            ORDER BY check_in_at DESC, event_id DESC
            LIMIT 1
            """,
            (staff_id,),
        )
        r = fetchone(self._cur)
        return _to_event(r) if r else None

    def get_latest_closed(self, staff_id: str) -> Optional[AttendanceEvent]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM tk_attendance_events
            WHERE staff_id=%s AND check_out_at IS NOT NULL
            ORDER BY check_out_at DESC, event_id DESC
            LIMIT 1
            """,
            (staff_id,),
        )
        r = fetchone(self._cur)
        return _to_event(r) if r else None

    def create_check_in(
        self,
        *,
        staff_id: str,
        check_in_at: datetime,
        location: GeoLocation,
        source: AttendanceSource,
        client_time: Optional[datetime] = None,
    ) -> int:
        try:
            self._cur.execute(
                """
                INSERT INTO tk_attendance_events(
                    staff_id, check_in_at,
                    check_in_latitude, check_in_longitude, check_in_accuracy,
                    source, client_check_in_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    staff_id,
                    to_db_utc(check_in_at),
                    location.latitude,
                    location.longitude,
                    location.accuracy_meters,
                    source.value,
                    to_db_utc(client_time),
                ),
            )
        except mysql.connector.IntegrityError as e:
            # uq_tk_one_open_session
            raise ConflictError("A session is already open for this staff member") from e
        return int(self._cur.lastrowid)

    def close_session(
        self,
        *,
        event_id: int,
        check_out_at: datetime,
        location: GeoLocation,
        total_minutes: int,
        client_time: Optional[datetime] = None,
    ) -> bool:
        self._cur.execute(
            """
            UPDATE tk_attendance_events
            SET check_out_at=%s, total_minutes=%s,
                check_out_latitude=%s, check_out_longitude=%s, check_out_accuracy=%s,
                client_check_out_at=%s
            WHERE event_id=%s AND check_out_at IS NULL
            """,
            (
                to_db_utc(check_out_at),
                int(total_minutes),
                location.latitude,
                location.longitude,
                location.accuracy_meters,
                to_db_utc(client_time),
                int(event_id),
            ),
        )
        return self._cur.rowcount > 0

    def list_between(
        self,
        *,
        start: datetime,
        end: datetime,
        staff_id: Optional[str] = None,
    ) -> Sequence[AttendanceEvent]:
        clauses = ["check_in_at >= %s", "check_in_at < %s"]
        params: list[object] = [to_db_utc(start), to_db_utc(end)]

        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(staff_id)

        where = " AND ".join(clauses)
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM tk_attendance_events
            WHERE {where}
            ORDER BY check_in_at ASC, event_id ASC
            """,
            tuple(params),
        )
        return [_to_event(r) for r in fetchall(self._cur)]
