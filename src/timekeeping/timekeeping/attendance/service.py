from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import elapsed_minutes, local_date, now_utc
from ..common.validators import require_non_empty
from ..common.week import WeekWindow
from ..core.enums import AttendanceSource
from ..core.exceptions import ConflictError, NoOpenSessionError, ValidationError, WeekLockedError
from ..database.store import Store, StoreSession
from ..summary.aggregator import WeeklyAggregator
from ..users.model import Actor
from ..users.service import StaffDirectoryService
from .location import validate_location
from .model import AttendanceEvent, GeoLocation, SessionResult, SessionStatus

logger = logging.getLogger(__name__)


class SessionService:
    """Check-in/check-out state machine per staff member.

    NoActiveSession --check_in--> ActiveSession --check_out--> NoActiveSession.
    The server clock is authoritative; the client's time is kept as metadata.

    Week lock policy: check-in is always allowed, but the check-out that would
    put minutes into an approved week fails with WeekLockedError until the week
    is unlocked.
    """

    def __init__(
        self,
        store: Store,
        staff: StaffDirectoryService,
        aggregator: WeeklyAggregator,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._store = store
        self._staff = staff
        self._aggregator = aggregator
        self._clock = clock

    def check_in(
        self,
        *,
        actor: Actor,
        staff_id: str,
        location: Optional[GeoLocation],
        client_time: Optional[datetime] = None,
        source: AttendanceSource = AttendanceSource.WEB,
    ) -> SessionResult:
        staff_id = require_non_empty(staff_id, "staffId")
        self._staff.require_self_service(actor, staff_id)
        location = validate_location(location)

        with self._store.transaction() as tx:
            tx.attendance.lock_staff(staff_id)

            open_session = tx.attendance.get_open_session(staff_id)
            if open_session is not None:
                logger.warning("check-in rejected for %s: session %s already open", staff_id, open_session.event_id)
                raise ConflictError("You are already checked in. Check out first.")

            now = self._clock()
            event_id = tx.attendance.create_check_in(
                staff_id=staff_id,
                check_in_at=now,
                location=location,
                source=source,
                client_time=client_time,
            )
            event = tx.attendance.get_by_id(event_id)
            status = self._status(tx, staff_id, now)

        logger.info("staff %s checked in (session %s, source=%s)", staff_id, event_id, source.value)
        return SessionResult(event=event, status=status)

    def check_out(
        self,
        *,
        actor: Actor,
        staff_id: str,
        location: Optional[GeoLocation],
        client_time: Optional[datetime] = None,
    ) -> SessionResult:
        staff_id = require_non_empty(staff_id, "staffId")
        self._staff.require_self_service(actor, staff_id)
        location = validate_location(location)

        with self._store.transaction() as tx:
            tx.attendance.lock_staff(staff_id)

            open_session = tx.attendance.get_open_session(staff_id)
            if open_session is None:
                raise NoOpenSessionError("You are not checked in")

            week = WeekWindow.containing(local_date(open_session.check_in_at, self._aggregator.tz))
            state = tx.approvals.lock_week(staff_id=staff_id, week=week)
            if state.is_approved:
                logger.warning(
                    "check-out rejected for %s: week %s is approved", staff_id, week.start.isoformat()
                )
                raise WeekLockedError(
                    f"The week of {week.start.isoformat()} is approved. Ask Admin/HR to unlock it."
                )

            now = self._clock()
            if now <= open_session.check_in_at:
                raise ValidationError("Check-out time must be after check-in time")

            total_minutes = elapsed_minutes(open_session.check_in_at, now)
            closed = tx.attendance.close_session(
                event_id=open_session.event_id,
                check_out_at=now,
                location=location,
                total_minutes=total_minutes,
                client_time=client_time,
            )
            if not closed:
                raise NoOpenSessionError("Session was already closed")

            event = tx.attendance.get_by_id(open_session.event_id)
            status = self._status(tx, staff_id, now)

        logger.info(
            "staff %s checked out (session %s, %s minutes)", staff_id, open_session.event_id, total_minutes
        )
        return SessionResult(event=event, status=status)

    def get_status(self, *, staff_id: str) -> SessionStatus:
        staff_id = require_non_empty(staff_id, "staffId")
        with self._store.transaction() as tx:
            return self._status(tx, staff_id, self._clock())

    def list_attendance(self, *, staff_id: str, week_start: str, week_end: str) -> list[AttendanceEvent]:
        """Events of the week with anomaly flags attached."""
        staff_id = require_non_empty(staff_id, "staffId")
        week = WeekWindow.parse(week_start, week_end)
        start, end = week.utc_bounds(self._aggregator.tz)

        with self._store.transaction() as tx:
            events = tx.attendance.list_between(start=start, end=end, staff_id=staff_id)

        summary = self._aggregator.summarize(staff_id=staff_id, week=week, events=events, now=self._clock())
        return list(summary.events)

    @staticmethod
    def _status(tx: StoreSession, staff_id: str, now: datetime) -> SessionStatus:
        open_session = tx.attendance.get_open_session(staff_id)
        latest = tx.attendance.get_latest(staff_id)
        latest_closed = tx.attendance.get_latest_closed(staff_id)

        last_location = None
        if open_session is not None:
            last_location = open_session.check_in_location
        elif latest is not None:
            last_location = latest.last_location

        return SessionStatus(
            staff_id=staff_id,
            is_checked_in=open_session is not None,
            active_session_id=open_session.event_id if open_session else None,
            last_check_in_at=latest.check_in_at if latest else None,
            last_check_out_at=latest_closed.check_out_at if latest_closed else None,
            last_location=last_location,
            server_time=now,
        )
