from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from .approvals.service import ApprovalService
from .attendance.service import SessionService
from .common.datetime_utils import local_date, now_utc
from .core.settings import TimeKeepingSettings
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_store import MySQLStore
from .database.store import Store
from .payroll.service import PayrollExportService
from .summary.aggregator import WeeklyAggregator
from .summary.flags.factory import FlagRuleFactory
from .users.mysql_employee_directory import MySQLEmployeeDirectory
from .users.repository import EmployeeDirectory
from .users.service import StaffDirectoryService


@dataclass(frozen=True)
class Container:
    settings: TimeKeepingSettings
    clock: Callable[[], datetime]

    store: Store
    directory: EmployeeDirectory

    staff_service: StaffDirectoryService
    aggregator: WeeklyAggregator
    session_service: SessionService
    approval_service: ApprovalService
    payroll_export_service: PayrollExportService

    conn: Optional[DatabaseConnection] = None

    def today(self) -> date:
        return local_date(self.clock(), self.settings.tz)


def assemble(
    *,
    store: Store,
    directory: EmployeeDirectory,
    settings: TimeKeepingSettings,
    clock: Callable[[], datetime] = now_utc,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    staff_service = StaffDirectoryService(directory, eligible_position_keywords=settings.eligible_position_keywords)
    aggregator = WeeklyAggregator(tz=settings.tz, flagger=FlagRuleFactory().build(settings))
    session_service = SessionService(store, staff_service, aggregator, clock=clock)
    approval_service = ApprovalService(
        store,
        staff_service,
        aggregator,
        clock=clock,
        unlock_reason_min_length=settings.unlock_reason_min_length,
    )
    payroll_export_service = PayrollExportService(approval_service)

    return Container(
        settings=settings,
        clock=clock,
        store=store,
        directory=directory,
        staff_service=staff_service,
        aggregator=aggregator,
        session_service=session_service,
        approval_service=approval_service,
        payroll_export_service=payroll_export_service,
        conn=conn,
    )


def build_container(*, db_config: dict, settings: TimeKeepingSettings) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble(
        store=MySQLStore(conn),
        directory=MySQLEmployeeDirectory(conn),
        settings=settings,
        conn=conn,
    )
