from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current server time (authoritative clock).

    Note: Wrapped so services can take a clock and tests can pass a fixed one.
    """
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_db_utc(value: Optional[datetime]) -> Optional[datetime]:
    """MySQL DATETIME columns hold naive UTC."""
    if value is None:
        return None
    return ensure_utc(value).replace(tzinfo=None)


def from_db_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def local_date(value: datetime, tz: ZoneInfo) -> date:
    """Calendar date of an instant in the agency's time zone."""
    return ensure_utc(value).astimezone(tz).date()


def local_midnight_utc(day: date, tz: ZoneInfo) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=tz).astimezone(timezone.utc)


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounded half up."""
    seconds = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return int((seconds + 30) // 60)


def parse_client_time(value: object) -> Optional[datetime]:
    """Best-effort parse of the client's ISO timestamp.

    The client clock is advisory metadata, so anything unparseable is dropped.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def minutes_to_hhmm(minutes: Optional[int]) -> str:
    """Format minutes as '9h 05m'."""
    if minutes is None:
        return "-"
    return f"{minutes // 60}h {minutes % 60:02d}m"


def minutes_to_hours(minutes: Optional[int]) -> str:
    if not minutes:
        return "0.00"
    return f"{minutes / 60:.2f}"


def days_between(start: date, end: date) -> list[date]:
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]
