from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Mapping, Optional
from zoneinfo import ZoneInfo

from ..attendance.model import AttendanceEvent
from ..common.datetime_utils import local_date
from ..common.week import WeekWindow
from .flags.base import FlagContext
from .flags.factory import AnomalyFlagger
from .model import DailySummary, WeeklySummary


class WeeklyAggregator:
    """Groups a staff member's events into local calendar days of one week.

    Pure: the result depends only on the arguments. A session is attributed
    entirely to the local date of its check-in, even when it runs past midnight.
    Open sessions count as zero minutes.
    """

    def __init__(self, *, tz: ZoneInfo, flagger: AnomalyFlagger):
        self._tz = tz
        self._flagger = flagger

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def summarize(
        self,
        *,
        staff_id: str,
        week: WeekWindow,
        events: Iterable[AttendanceEvent],
        adjustments: Optional[Mapping[date, int]] = None,
        now: datetime,
    ) -> WeeklySummary:
        adjustments = adjustments or {}
        ctx = FlagContext(tz=self._tz, today=local_date(now, self._tz))

        by_day: dict[date, list[AttendanceEvent]] = defaultdict(list)
        flagged: list[AttendanceEvent] = []
        for event in sorted(events, key=lambda e: (e.check_in_at, e.event_id)):
            if event.staff_id != staff_id:
                continue
            day = local_date(event.check_in_at, self._tz)
            if not week.contains(day):
                continue
            event = replace(event, flags=self._flagger.flags_for(event, ctx))
            by_day[day].append(event)
            flagged.append(event)

        daily = []
        for day in week.days():
            day_events = by_day.get(day, [])
            day_flags: list = []
            for e in day_events:
                for f in e.flags:
                    if f not in day_flags:
                        day_flags.append(f)
            daily.append(
                DailySummary(
                    date=day,
                    computed_minutes=sum(e.total_minutes or 0 for e in day_events),
                    adjusted_minutes=adjustments.get(day),
                    event_count=len(day_events),
                    flags=tuple(day_flags),
                )
            )

        return WeeklySummary(staff_id=staff_id, week=week, daily=tuple(daily), events=tuple(flagged))
