from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from ..approvals.mysql_approval_repository import MySQLApprovalRepository
from ..attendance.mysql_attendance_repository import MySQLAttendanceRepository
from ..audit.mysql_audit_repository import MySQLAuditRepository
from .connection import DatabaseConnection
from .mysql_base import db_cursor, storage_errors


class MySQLStoreSession:
    def __init__(self, cur):
        self.attendance = MySQLAttendanceRepository(cur)
        self.approvals = MySQLApprovalRepository(cur)
        self.audit = MySQLAuditRepository(cur)


class MySQLStore:
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[MySQLStoreSession]:
        with storage_errors("The attendance store"):
            with db_cursor(self._conn_factory) as (_, cur):
                yield MySQLStoreSession(cur)
