from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..attendance.model import AttendanceEvent
from ..audit.model import AuditEntry
from ..core.enums import ApprovalStatus
from ..summary.model import DailySummary


@dataclass(frozen=True)
class WeekState:
    """Persisted lock state of one staff week.

    A week without a stored row is PENDING.
    """

    staff_id: str
    week_start: date
    week_end: date
    status: ApprovalStatus = ApprovalStatus.PENDING
    approved_by: Optional[str] = None
    approved_by_name: Optional[str] = None
    approved_at: Optional[datetime] = None
    approved_final_minutes: Optional[int] = None

    @property
    def is_approved(self) -> bool:
        return self.status == ApprovalStatus.APPROVED


@dataclass(frozen=True)
class DailyAdjustment:
    """One requested per-day override. ``minutes=None`` clears the override."""

    date: date
    minutes: Optional[int]


@dataclass(frozen=True)
class WeeklyApproval:
    """Review row for one staff member and week."""

    staff_id: str
    staff_name: str
    position: str
    week_start: date
    week_end: date
    status: ApprovalStatus
    computed_minutes: int
    final_minutes: int
    flags_count: int
    approved_by: Optional[str] = None
    approved_by_name: Optional[str] = None
    approved_at: Optional[datetime] = None
    daily: tuple[DailySummary, ...] = ()


@dataclass(frozen=True)
class WeeklyDetail:
    approval: WeeklyApproval
    daily: tuple[DailySummary, ...]
    events: tuple[AttendanceEvent, ...]
    audit: tuple[AuditEntry, ...] = ()


@dataclass(frozen=True)
class WeeklyApprovalList:
    rows: list[WeeklyApproval]
    totals: dict = field(default_factory=dict)
