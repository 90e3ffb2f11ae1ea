from __future__ import annotations

from datetime import datetime

import mysql.connector
import pytest

from src.timekeeping.timekeeping.attendance.model import GeoLocation
from src.timekeeping.timekeeping.attendance.mysql_attendance_repository import MySQLAttendanceRepository, _to_event
from src.timekeeping.timekeeping.core.enums import AttendanceSource
from src.timekeeping.timekeeping.core.exceptions import ConflictError, StorageUnavailableError
from src.timekeeping.timekeeping.database.bootstrap import (
    _iter_sql_statements,
    _strip_comments,
    _strip_create_db_and_use,
)
from src.timekeeping.timekeeping.database.mysql_base import storage_errors
from tests.conftest import utc


class DuplicateOpenSessionCursor:
    lastrowid = None

    def execute(self, sql, params=None):
        raise mysql.connector.IntegrityError(msg="Duplicate entry for key 'uq_tk_one_open_session'", errno=1062)


def test_sql_splitter_keeps_semicolons_inside_quotes():
    sql = "INSERT INTO t(a) VALUES('x;y');\nINSERT INTO t(a) VALUES(\"z\");\n"

    assert list(_iter_sql_statements(sql)) == [
        "INSERT INTO t(a) VALUES('x;y')",
        'INSERT INTO t(a) VALUES("z")',
    ]


def test_schema_header_and_comments_are_removed():
    sql = "CREATE DATABASE IF NOT EXISTS homecare_db;\nUSE homecare_db;\n-- tables\nCREATE TABLE a (id INT);\n"

    statements = list(_iter_sql_statements(_strip_comments(_strip_create_db_and_use(sql))))

    assert statements == ["CREATE TABLE a (id INT)"]


def test_driver_errors_become_storage_unavailable():
    with pytest.raises(StorageUnavailableError):
        with storage_errors("The attendance store"):
            raise mysql.connector.errors.OperationalError(msg="Lost connection")


def test_unique_open_session_violation_is_a_conflict():
    repo = MySQLAttendanceRepository(DuplicateOpenSessionCursor())

    with pytest.raises(ConflictError):
        repo.create_check_in(
            staff_id="E1",
            check_in_at=utc(2025, 6, 2, 12),
            location=GeoLocation(latitude=40.0, longitude=-74.0, accuracy_meters=5.0),
            source=AttendanceSource.WEB,
        )


def test_row_mapping_reads_naive_utc():
    row = {
        "event_id": 7,
        "staff_id": "E1",
        "check_in_at": datetime(2025, 6, 2, 12, 0),
        "check_out_at": None,
        "total_minutes": None,
        "check_in_latitude": "40.7128000",
        "check_in_longitude": "-74.0060000",
        "check_in_accuracy": "12.00",
        "check_out_latitude": None,
        "check_out_longitude": None,
        "check_out_accuracy": None,
        "source": "MOBILE",
        "client_check_in_at": None,
        "client_check_out_at": None,
    }

    event = _to_event(row)

    assert event.check_in_at == utc(2025, 6, 2, 12)
    assert event.is_open
    assert event.check_in_location.latitude == 40.7128
    assert event.source == AttendanceSource.MOBILE
