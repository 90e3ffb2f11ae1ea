from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from zoneinfo import ZoneInfo

from . import constants


@dataclass(frozen=True)
class TimeKeepingSettings:
    """Business knobs read from the active settings module."""

    timezone: str = constants.DEFAULT_TIMEZONE
    low_accuracy_meters: float = constants.DEFAULT_LOW_ACCURACY_METERS
    short_session_minutes: int = constants.DEFAULT_SHORT_SESSION_MINUTES
    long_session_minutes: int = constants.DEFAULT_LONG_SESSION_MINUTES
    unlock_reason_min_length: int = constants.DEFAULT_UNLOCK_REASON_MIN_LENGTH
    eligible_position_keywords: tuple[str, ...] = constants.DEFAULT_ELIGIBLE_POSITION_KEYWORDS

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_module(cls, settings: Any) -> "TimeKeepingSettings":
        keywords = getattr(settings, "ELIGIBLE_POSITION_KEYWORDS", constants.DEFAULT_ELIGIBLE_POSITION_KEYWORDS)
        return cls(
            timezone=str(getattr(settings, "TIMEZONE", constants.DEFAULT_TIMEZONE)),
            low_accuracy_meters=float(getattr(settings, "LOW_ACCURACY_METERS", constants.DEFAULT_LOW_ACCURACY_METERS)),
            short_session_minutes=int(getattr(settings, "SHORT_SESSION_MINUTES", constants.DEFAULT_SHORT_SESSION_MINUTES)),
            long_session_minutes=int(getattr(settings, "LONG_SESSION_MINUTES", constants.DEFAULT_LONG_SESSION_MINUTES)),
            unlock_reason_min_length=int(
                getattr(settings, "UNLOCK_REASON_MIN_LENGTH", constants.DEFAULT_UNLOCK_REASON_MIN_LENGTH)
            ),
            eligible_position_keywords=tuple(k.strip().lower() for k in keywords if k and k.strip()),
        )
