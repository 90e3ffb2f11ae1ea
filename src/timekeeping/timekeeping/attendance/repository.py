from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceSource
from .model import AttendanceEvent, GeoLocation


class AttendanceRepository(Protocol):
    """Attendance events, bound to the caller's open transaction."""

    def lock_staff(self, staff_id: str) -> None:
        """Serialize check-in/check-out for one staff member until commit."""

        raise NotImplementedError

    def get_by_id(self, event_id: int) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def get_open_session(self, staff_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def get_latest(self, staff_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def get_latest_closed(self, staff_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def create_check_in(
        self,
        *,
        staff_id: str,
        check_in_at: datetime,
        location: GeoLocation,
        source: AttendanceSource,
        client_time: Optional[datetime] = None,
    ) -> int:
        """Raises ConflictError if an open session already exists."""

        raise NotImplementedError

    def close_session(
        self,
        *,
        event_id: int,
        check_out_at: datetime,
        location: GeoLocation,
        total_minutes: int,
        client_time: Optional[datetime] = None,
    ) -> bool:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start: datetime,
        end: datetime,
        staff_id: Optional[str] = None,
    ) -> Sequence[AttendanceEvent]:
        """Events with ``start <= check_in_at < end`` ordered by check-in."""

        raise NotImplementedError
