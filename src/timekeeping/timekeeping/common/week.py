from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from ..core.exceptions import ValidationError
from .datetime_utils import days_between, local_midnight_utc, parse_iso_date


@dataclass(frozen=True)
class WeekWindow:
    """Sunday..Saturday range, the unit of approval."""

    start: date
    end: date

    def __post_init__(self) -> None:
        # date.weekday(): Monday=0 .. Sunday=6
        if self.start.weekday() != 6:
            raise ValidationError(f"Week must start on a Sunday (got {self.start.isoformat()})")
        if self.end != self.start + timedelta(days=6):
            raise ValidationError(f"Week must end on the Saturday after {self.start.isoformat()}")

    @classmethod
    def containing(cls, day: date) -> "WeekWindow":
        start = day - timedelta(days=(day.weekday() + 1) % 7)
        return cls(start=start, end=start + timedelta(days=6))

    @classmethod
    def parse(cls, start: str, end: str) -> "WeekWindow":
        try:
            return cls(start=parse_iso_date(start), end=parse_iso_date(end))
        except (TypeError, ValueError):
            raise ValidationError("Week bounds must be YYYY-MM-DD dates")

    def days(self) -> list[date]:
        return days_between(self.start, self.end)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def utc_bounds(self, tz: ZoneInfo) -> tuple[datetime, datetime]:
        """[local Sunday 00:00, local next Sunday 00:00) expressed in UTC."""
        return local_midnight_utc(self.start, tz), local_midnight_utc(self.end + timedelta(days=1), tz)
