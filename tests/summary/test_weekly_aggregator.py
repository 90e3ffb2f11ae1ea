from __future__ import annotations

from datetime import date
from zoneinfo import ZoneInfo

import pytest

from src.timekeeping.timekeeping.attendance.model import AttendanceEvent, GeoLocation
from src.timekeeping.timekeeping.common.week import WeekWindow
from src.timekeeping.timekeeping.core.enums import AttendanceFlag, AttendanceSource
from src.timekeeping.timekeeping.core.settings import TimeKeepingSettings
from src.timekeeping.timekeeping.summary.aggregator import WeeklyAggregator
from src.timekeeping.timekeeping.summary.flags.factory import FlagRuleFactory
from tests.conftest import utc

NY = ZoneInfo("America/New_York")
WEEK = WeekWindow(start=date(2025, 6, 1), end=date(2025, 6, 7))
GOOD = GeoLocation(latitude=40.7, longitude=-74.0, accuracy_meters=10.0)
POOR = GeoLocation(latitude=40.7, longitude=-74.0, accuracy_meters=250.0)


def _event(event_id, check_in_at, check_out_at=None, minutes=None, staff_id="E1", loc=GOOD):
    return AttendanceEvent(
        event_id=event_id,
        staff_id=staff_id,
        check_in_at=check_in_at,
        check_in_location=loc,
        source=AttendanceSource.WEB,
        check_out_at=check_out_at,
        check_out_location=loc if check_out_at else None,
        total_minutes=minutes,
    )


@pytest.fixture
def aggregator():
    return WeeklyAggregator(tz=NY, flagger=FlagRuleFactory().build(TimeKeepingSettings()))


def _by_date(summary):
    return {d.date: d for d in summary.daily}


def test_always_seven_days_even_without_events(aggregator):
    summary = aggregator.summarize(staff_id="E1", week=WEEK, events=[], now=utc(2025, 6, 8, 12))

    assert [d.date for d in summary.daily] == WEEK.days()
    assert summary.computed_minutes == 0
    assert summary.final_minutes == 0
    assert summary.flags_count == 0


def test_sessions_on_the_same_day_are_summed(aggregator):
    events = [
        _event(1, utc(2025, 6, 2, 12), utc(2025, 6, 2, 16), 240),
        _event(2, utc(2025, 6, 2, 17), utc(2025, 6, 2, 21), 240),
        _event(3, utc(2025, 6, 3, 13), utc(2025, 6, 3, 14, 30), 90),
    ]

    summary = aggregator.summarize(staff_id="E1", week=WEEK, events=events, now=utc(2025, 6, 8, 12))
    days = _by_date(summary)

    assert days[date(2025, 6, 2)].computed_minutes == 480
    assert days[date(2025, 6, 2)].event_count == 2
    assert days[date(2025, 6, 3)].computed_minutes == 90
    assert summary.computed_minutes == 570


def test_cross_midnight_session_belongs_to_check_in_day(aggregator):
    # Tue 22:00 -> Wed 02:00 local
    event = _event(1, utc(2025, 6, 4, 2), utc(2025, 6, 4, 6), 240)

    summary = aggregator.summarize(staff_id="E1", week=WEEK, events=[event], now=utc(2025, 6, 8, 12))
    days = _by_date(summary)

    assert days[date(2025, 6, 3)].computed_minutes == 240
    assert days[date(2025, 6, 4)].computed_minutes == 0
    assert AttendanceFlag.OVERNIGHT_SESSION in days[date(2025, 6, 3)].flags


def test_local_day_boundary_uses_agency_zone(aggregator):
    # 2025-06-08 01:00 UTC is still Saturday 2025-06-07 21:00 in New York
    event = _event(1, utc(2025, 6, 8, 1), utc(2025, 6, 8, 2), 60)

    summary = aggregator.summarize(staff_id="E1", week=WEEK, events=[event], now=utc(2025, 6, 9))

    assert _by_date(summary)[date(2025, 6, 7)].computed_minutes == 60


def test_events_outside_week_or_for_other_staff_are_ignored(aggregator):
    events = [
        _event(1, utc(2025, 5, 31, 14), utc(2025, 5, 31, 15), 60),
        _event(2, utc(2025, 6, 2, 14), utc(2025, 6, 2, 15), 60, staff_id="E2"),
    ]

    summary = aggregator.summarize(staff_id="E1", week=WEEK, events=events, now=utc(2025, 6, 8))

    assert summary.computed_minutes == 0
    assert summary.events == ()


def test_adjustment_replaces_only_its_day(aggregator):
    events = [
        _event(1, utc(2025, 6, 2, 12), utc(2025, 6, 2, 21), 540),
        _event(2, utc(2025, 6, 3, 12), utc(2025, 6, 3, 20), 480),
    ]

    summary = aggregator.summarize(
        staff_id="E1",
        week=WEEK,
        events=events,
        adjustments={date(2025, 6, 2): 480, date(2025, 6, 6): 0},
        now=utc(2025, 6, 8),
    )
    days = _by_date(summary)

    assert days[date(2025, 6, 2)].computed_minutes == 540
    assert days[date(2025, 6, 2)].result_minutes == 480
    assert days[date(2025, 6, 3)].result_minutes == 480
    assert days[date(2025, 6, 6)].adjusted_minutes == 0
    assert summary.computed_minutes == 1020
    assert summary.final_minutes == sum(d.result_minutes for d in summary.daily) == 960


def test_open_session_counts_zero_and_is_flagged_after_its_day(aggregator):
    event = _event(1, utc(2025, 6, 2, 12))

    same_day = aggregator.summarize(staff_id="E1", week=WEEK, events=[event], now=utc(2025, 6, 2, 18))
    next_day = aggregator.summarize(staff_id="E1", week=WEEK, events=[event], now=utc(2025, 6, 3, 18))

    assert same_day.computed_minutes == 0
    assert same_day.events[0].flags == ()
    assert next_day.events[0].flags == (AttendanceFlag.MISSING_CHECKOUT,)
    assert next_day.flags_count == 1


def test_flags_for_accuracy_and_session_length(aggregator):
    events = [
        _event(1, utc(2025, 6, 2, 12), utc(2025, 6, 2, 12, 3), 3, loc=POOR),
        _event(2, utc(2025, 6, 3, 10), utc(2025, 6, 3, 23), 780),
    ]

    summary = aggregator.summarize(staff_id="E1", week=WEEK, events=events, now=utc(2025, 6, 8))
    flags = {e.event_id: set(e.flags) for e in summary.events}

    assert flags[1] == {AttendanceFlag.LOW_ACCURACY, AttendanceFlag.SHORT_SESSION}
    assert flags[2] == {AttendanceFlag.LONG_SESSION}
    assert summary.flags_count == 3


def test_summarize_is_deterministic(aggregator):
    events = [
        _event(2, utc(2025, 6, 3, 12), utc(2025, 6, 3, 20), 480),
        _event(1, utc(2025, 6, 2, 12), utc(2025, 6, 2, 21), 540),
    ]

    first = aggregator.summarize(staff_id="E1", week=WEEK, events=events, now=utc(2025, 6, 8))
    second = aggregator.summarize(staff_id="E1", week=WEEK, events=list(reversed(events)), now=utc(2025, 6, 8))

    assert first == second
    assert [e.event_id for e in first.events] == [1, 2]


def test_flags_count_sums_distinct_flags_per_event(aggregator):
    events = [
        _event(1, utc(2025, 6, 2, 12), utc(2025, 6, 2, 12, 2), 2),
        _event(2, utc(2025, 6, 3, 12), utc(2025, 6, 3, 12, 1), 1),
    ]

    summary = aggregator.summarize(staff_id="E1", week=WEEK, events=events, now=utc(2025, 6, 8))

    assert summary.flags_count == 2
