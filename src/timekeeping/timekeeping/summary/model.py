from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceEvent
from ..common.week import WeekWindow
from ..core.enums import AttendanceFlag


@dataclass(frozen=True)
class DailySummary:
    """One agency-local calendar day of a week. Derived on every read."""

    date: date
    computed_minutes: int
    adjusted_minutes: Optional[int] = None
    event_count: int = 0
    flags: tuple[AttendanceFlag, ...] = ()

    @property
    def result_minutes(self) -> int:
        if self.adjusted_minutes is not None:
            return self.adjusted_minutes
        return self.computed_minutes


@dataclass(frozen=True)
class WeeklySummary:
    staff_id: str
    week: WeekWindow
    daily: tuple[DailySummary, ...]
    events: tuple[AttendanceEvent, ...]

    @property
    def computed_minutes(self) -> int:
        return sum(d.computed_minutes for d in self.daily)

    @property
    def final_minutes(self) -> int:
        return sum(d.result_minutes for d in self.daily)

    @property
    def flags_count(self) -> int:
        """Per event, the number of distinct flags it carries, summed over the week."""
        return sum(len(set(e.flags)) for e in self.events)
