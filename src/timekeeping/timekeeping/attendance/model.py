from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceFlag, AttendanceSource


@dataclass(frozen=True)
class GeoLocation:
    """Single GPS fix captured at check-in or check-out."""

    latitude: float
    longitude: float
    accuracy_meters: float


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one check-in/check-out session.

    ``check_out_at`` and ``total_minutes`` stay ``None`` while the session is open.
    ``flags`` are attached on read by the weekly aggregator and never persisted.
    """

    event_id: int
    staff_id: str
    check_in_at: datetime
    check_in_location: GeoLocation
    source: AttendanceSource
    check_out_at: Optional[datetime] = None
    check_out_location: Optional[GeoLocation] = None
    total_minutes: Optional[int] = None
    client_check_in_at: Optional[datetime] = None
    client_check_out_at: Optional[datetime] = None
    flags: tuple[AttendanceFlag, ...] = ()

    @property
    def is_open(self) -> bool:
        return self.check_out_at is None

    @property
    def last_location(self) -> GeoLocation:
        return self.check_out_location or self.check_in_location


@dataclass(frozen=True)
class SessionStatus:
    """Read model returned by GetStatus and after every check-in/out."""

    staff_id: str
    is_checked_in: bool
    active_session_id: Optional[int]
    last_check_in_at: Optional[datetime]
    last_check_out_at: Optional[datetime]
    last_location: Optional[GeoLocation]
    server_time: datetime


@dataclass(frozen=True)
class SessionResult:
    event: AttendanceEvent
    status: SessionStatus
