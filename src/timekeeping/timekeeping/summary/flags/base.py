from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from zoneinfo import ZoneInfo

from ...attendance.model import AttendanceEvent
from ...core.enums import AttendanceFlag


@dataclass(frozen=True)
class FlagContext:
    tz: ZoneInfo
    today: date


class FlagRule(ABC):
    """Strategy Pattern: one advisory anomaly check."""

    flag: AttendanceFlag

    @abstractmethod
    def applies(self, event: AttendanceEvent, ctx: FlagContext) -> bool:
        raise NotImplementedError
