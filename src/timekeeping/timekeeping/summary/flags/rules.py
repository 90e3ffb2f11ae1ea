from __future__ import annotations

from ...attendance.model import AttendanceEvent
from ...common.datetime_utils import local_date
from ...core.enums import AttendanceFlag
from .base import FlagContext, FlagRule


class MissingCheckoutRule(FlagRule):
    """Session still open after the day it started has ended."""

    flag = AttendanceFlag.MISSING_CHECKOUT

    def applies(self, event: AttendanceEvent, ctx: FlagContext) -> bool:
        return event.is_open and local_date(event.check_in_at, ctx.tz) < ctx.today


class LowAccuracyRule(FlagRule):
    flag = AttendanceFlag.LOW_ACCURACY

    def __init__(self, threshold_meters: float):
        self.threshold_meters = float(threshold_meters)

    def applies(self, event: AttendanceEvent, ctx: FlagContext) -> bool:
        locations = [event.check_in_location, event.check_out_location]
        return any(loc is not None and loc.accuracy_meters > self.threshold_meters for loc in locations)


class ShortSessionRule(FlagRule):
    flag = AttendanceFlag.SHORT_SESSION

    def __init__(self, min_minutes: int):
        self.min_minutes = int(min_minutes)

    def applies(self, event: AttendanceEvent, ctx: FlagContext) -> bool:
        return event.total_minutes is not None and event.total_minutes < self.min_minutes


class LongSessionRule(FlagRule):
    flag = AttendanceFlag.LONG_SESSION

    def __init__(self, max_minutes: int):
        self.max_minutes = int(max_minutes)

    def applies(self, event: AttendanceEvent, ctx: FlagContext) -> bool:
        return event.total_minutes is not None and event.total_minutes > self.max_minutes


class OvernightSessionRule(FlagRule):
    """Closed session whose check-out falls on a later local day than its check-in."""

    flag = AttendanceFlag.OVERNIGHT_SESSION

    def applies(self, event: AttendanceEvent, ctx: FlagContext) -> bool:
        if event.check_out_at is None:
            return False
        return local_date(event.check_out_at, ctx.tz) != local_date(event.check_in_at, ctx.tz)
