from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone

import pytest

from src.timekeeping.timekeeping.approvals.model import WeekState
from src.timekeeping.timekeeping.attendance.model import AttendanceEvent
from src.timekeeping.timekeeping.audit.model import AuditEntry
from src.timekeeping.timekeeping.container import assemble
from src.timekeeping.timekeeping.core.enums import Role
from src.timekeeping.timekeeping.core.exceptions import ConflictError, StorageUnavailableError
from src.timekeeping.timekeeping.core.settings import TimeKeepingSettings
from src.timekeeping.timekeeping.users.model import Actor, StaffProfile

# 2025-06-01 is a Sunday; America/New_York is on EDT (UTC-4) the whole week.
WEEK_START = "2025-06-01"
WEEK_END = "2025-06-07"


def utc(y, m, d, hh=0, mm=0, ss=0) -> datetime:
    return datetime(y, m, d, hh, mm, ss, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class MemoryState:
    events: dict = field(default_factory=dict)
    weeks: dict = field(default_factory=dict)
    adjustments: dict = field(default_factory=dict)
    audit: list = field(default_factory=list)
    next_event_id: int = 1


class InMemoryAttendanceRepository:
    def __init__(self, state: MemoryState):
        self._s = state

    def lock_staff(self, staff_id):
        return None

    def get_by_id(self, event_id):
        return self._s.events.get(event_id)

    def get_open_session(self, staff_id):
        return next((e for e in self._s.events.values() if e.staff_id == staff_id and e.is_open), None)

    def get_latest(self, staff_id):
        mine = [e for e in self._s.events.values() if e.staff_id == staff_id]
        return max(mine, key=lambda e: (e.check_in_at, e.event_id), default=None)

    def get_latest_closed(self, staff_id):
        mine = [e for e in self._s.events.values() if e.staff_id == staff_id and not e.is_open]
        return max(mine, key=lambda e: (e.check_out_at, e.event_id), default=None)

    def create_check_in(self, *, staff_id, check_in_at, location, source, client_time=None):
        if self.get_open_session(staff_id) is not None:
            raise ConflictError("open session exists")
        event_id = self._s.next_event_id
        self._s.next_event_id += 1
        self._s.events[event_id] = AttendanceEvent(
            event_id=event_id,
            staff_id=staff_id,
            check_in_at=check_in_at,
            check_in_location=location,
            source=source,
            client_check_in_at=client_time,
        )
        return event_id

    def close_session(self, *, event_id, check_out_at, location, total_minutes, client_time=None):
        event = self._s.events.get(event_id)
        if event is None or not event.is_open:
            return False
        self._s.events[event_id] = replace(
            event,
            check_out_at=check_out_at,
            check_out_location=location,
            total_minutes=total_minutes,
            client_check_out_at=client_time,
        )
        return True

    def list_between(self, *, start, end, staff_id=None):
        rows = [
            e
            for e in self._s.events.values()
            if start <= e.check_in_at < end and (staff_id is None or e.staff_id == staff_id)
        ]
        return sorted(rows, key=lambda e: (e.check_in_at, e.event_id))

    # test helper
    def add_closed(self, *, staff_id, check_in_at, check_out_at, location, source, total_minutes):
        event_id = self.create_check_in(staff_id=staff_id, check_in_at=check_in_at, location=location, source=source)
        self.close_session(
            event_id=event_id, check_out_at=check_out_at, location=location, total_minutes=total_minutes
        )
        return event_id


class InMemoryApprovalRepository:
    def __init__(self, state: MemoryState):
        self._s = state

    def lock_week(self, *, staff_id, week):
        key = (staff_id, week.start)
        if key not in self._s.weeks:
            self._s.weeks[key] = WeekState(staff_id=staff_id, week_start=week.start, week_end=week.end)
        return self._s.weeks[key]

    def get_week(self, *, staff_id, week):
        return self._s.weeks.get((staff_id, week.start))

    def list_weeks(self, *, week):
        return [s for (_, start), s in self._s.weeks.items() if start == week.start]

    def set_status(
        self,
        *,
        staff_id,
        week,
        status,
        approved_by=None,
        approved_by_name=None,
        approved_at=None,
        approved_final_minutes=None,
    ):
        key = (staff_id, week.start)
        if key not in self._s.weeks:
            return False
        self._s.weeks[key] = replace(
            self._s.weeks[key],
            status=status,
            approved_by=approved_by,
            approved_by_name=approved_by_name,
            approved_at=approved_at,
            approved_final_minutes=approved_final_minutes,
        )
        return True

    def get_adjustments(self, *, staff_id, week):
        return {d: m for (s, d), m in self._s.adjustments.items() if s == staff_id and week.contains(d)}

    def list_adjustments(self, *, week):
        out: dict = {}
        for (s, d), m in self._s.adjustments.items():
            if week.contains(d):
                out.setdefault(s, {})[d] = m
        return out

    def set_adjustment(self, *, staff_id, work_date, minutes, updated_by):
        if minutes is None:
            self._s.adjustments.pop((staff_id, work_date), None)
        else:
            self._s.adjustments[(staff_id, work_date)] = minutes


class InMemoryAuditRepository:
    def __init__(self, state: MemoryState, store: "InMemoryStore"):
        self._s = state
        self._store = store

    def append(self, *, staff_id, week_start, action, actor_id, actor_name, reason, created_at, details=None):
        if self._store.fail_audit:
            raise StorageUnavailableError("audit log unavailable")
        entry = AuditEntry(
            audit_id=len(self._s.audit) + 1,
            staff_id=staff_id,
            week_start=week_start,
            action=action,
            actor_id=actor_id,
            actor_name=actor_name,
            reason=reason,
            created_at=created_at,
            details=dict(details or {}),
        )
        self._s.audit.append(entry)
        return entry.audit_id

    def list_for_week(self, *, staff_id, week_start):
        return [a for a in self._s.audit if a.staff_id == staff_id and a.week_start == week_start]


class InMemorySession:
    def __init__(self, store: "InMemoryStore"):
        self.attendance = InMemoryAttendanceRepository(store.state)
        self.approvals = InMemoryApprovalRepository(store.state)
        self.audit = InMemoryAuditRepository(store.state, store)


class InMemoryStore:
    """One global lock stands in for row locks; rollback restores a snapshot."""

    def __init__(self):
        self.state = MemoryState()
        self.fail_audit = False
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self):
        with self._lock:
            snapshot = copy.deepcopy(self.state)
            try:
                yield InMemorySession(self)
            except BaseException:
                self.state.__dict__.update(snapshot.__dict__)
                raise


class InMemoryDirectory:
    def __init__(self, profiles):
        self._profiles = {p.staff_id: p for p in profiles}

    def get_profile(self, staff_id):
        return self._profiles.get(staff_id)

    def get_profiles(self, staff_ids):
        return {s: self._profiles[s] for s in staff_ids if s in self._profiles}


PROFILES = [
    StaffProfile(staff_id="E1", full_name="Alice Nguyen", position="Office Coordinator"),
    StaffProfile(staff_id="E2", full_name="Bao Tran", position="Office Assistant"),
    StaffProfile(staff_id="D1", full_name="Dana Smith", position="Direct Support Professional"),
    StaffProfile(staff_id="X1", full_name="Former Clerk", position="Office Clerk", is_active=False),
]


@pytest.fixture
def clock():
    # Monday 2025-06-02 08:00 EDT
    return FakeClock(utc(2025, 6, 2, 12, 0))


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def directory():
    return InMemoryDirectory(PROFILES)


@pytest.fixture
def settings():
    return TimeKeepingSettings()


@pytest.fixture
def container(store, directory, settings, clock):
    return assemble(store=store, directory=directory, settings=settings, clock=clock)


@pytest.fixture
def staff_e1():
    return Actor(user_id="u-e1", display_name="Alice Nguyen", role=Role.STAFF, staff_id="E1")


@pytest.fixture
def staff_e2():
    return Actor(user_id="u-e2", display_name="Bao Tran", role=Role.STAFF, staff_id="E2")


@pytest.fixture
def admin():
    return Actor(user_id="admin", display_name="Admin Demo", role=Role.ADMIN)


@pytest.fixture
def hr():
    return Actor(user_id="hr1", display_name="Helen Reyes", role=Role.HR, staff_id="HR1")
