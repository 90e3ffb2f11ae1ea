from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping, Optional

from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.validators import optional_text, parse_duration_minutes, require_non_empty
from ..common.week import WeekWindow
from ..core.constants import DEFAULT_UNLOCK_REASON_MIN_LENGTH
from ..core.enums import ApprovalStatus, AuditAction
from ..core.exceptions import (
    AlreadyApprovedError,
    ReasonRequiredError,
    ValidationError,
    WeekLockedError,
    WeekNotApprovedError,
)
from ..database.store import Store, StoreSession
from ..summary.aggregator import WeeklyAggregator
from ..summary.model import WeeklySummary
from ..users.model import Actor, StaffProfile
from ..users.service import StaffDirectoryService, require_approver
from .model import DailyAdjustment, WeekState, WeeklyApproval, WeeklyApprovalList, WeeklyDetail

logger = logging.getLogger(__name__)


class ApprovalService:
    """Weekly review: adjust per day, approve (lock), unlock with a reason.

    Every mutation locks the week row, applies the change and appends its
    audit entry inside one store transaction.
    """

    def __init__(
        self,
        store: Store,
        staff: StaffDirectoryService,
        aggregator: WeeklyAggregator,
        *,
        clock: Callable[[], datetime] = now_utc,
        unlock_reason_min_length: int = DEFAULT_UNLOCK_REASON_MIN_LENGTH,
    ):
        self._store = store
        self._staff = staff
        self._aggregator = aggregator
        self._clock = clock
        self._unlock_reason_min_length = int(unlock_reason_min_length)

    # -------- Reads --------
    def list_weekly_approvals(
        self,
        *,
        actor: Actor,
        week_start: str,
        week_end: str,
        query: str = "",
        status: Optional[str] = None,
    ) -> WeeklyApprovalList:
        require_approver(actor)
        week = WeekWindow.parse(week_start, week_end)
        status_filter = self._parse_status_filter(status)
        start, end = week.utc_bounds(self._aggregator.tz)

        with self._store.transaction() as tx:
            events = tx.attendance.list_between(start=start, end=end)
            states = {s.staff_id: s for s in tx.approvals.list_weeks(week=week)}
            adjustments = tx.approvals.list_adjustments(week=week)

        staff_ids = {e.staff_id for e in events} | set(states) | set(adjustments)
        profiles = self._staff.get_profiles(staff_ids)
        now = self._clock()

        rows: list[WeeklyApproval] = []
        for staff_id in staff_ids:
            summary = self._aggregator.summarize(
                staff_id=staff_id,
                week=week,
                events=[e for e in events if e.staff_id == staff_id],
                adjustments=adjustments.get(staff_id),
                now=now,
            )
            rows.append(self._to_approval(summary, states.get(staff_id), profiles.get(staff_id)))

        q = (query or "").strip().lower()
        if q:
            rows = [
                r
                for r in rows
                if q in r.staff_id.lower() or q in r.staff_name.lower() or q in r.position.lower()
            ]
        if status_filter is not None:
            rows = [r for r in rows if r.status == status_filter]

        rows.sort(key=lambda r: (r.staff_name.lower(), r.staff_id))
        totals = {
            "computedMinutes": sum(r.computed_minutes for r in rows),
            "finalMinutes": sum(r.final_minutes for r in rows),
            "pending": sum(1 for r in rows if r.status == ApprovalStatus.PENDING),
            "approved": sum(1 for r in rows if r.status == ApprovalStatus.APPROVED),
        }
        return WeeklyApprovalList(rows=rows, totals=totals)

    def get_weekly_detail(self, *, staff_id: str, week_start: str, week_end: str) -> WeeklyDetail:
        staff_id = require_non_empty(staff_id, "staffId")
        week = WeekWindow.parse(week_start, week_end)

        with self._store.transaction() as tx:
            summary = self._summarize(tx, staff_id, week)
            state = tx.approvals.get_week(staff_id=staff_id, week=week)
            audit = tuple(tx.audit.list_for_week(staff_id=staff_id, week_start=week.start))

        approval = self._to_approval(summary, state, self._staff.get_profile(staff_id))
        return WeeklyDetail(approval=approval, daily=summary.daily, events=summary.events, audit=audit)

    def approved_totals(self, *, actor: Actor, week_start: str, week_end: str) -> list[WeeklyApproval]:
        """Rows payroll may consume: APPROVED weeks only, with the frozen final minutes."""
        listing = self.list_weekly_approvals(
            actor=actor,
            week_start=week_start,
            week_end=week_end,
            status=ApprovalStatus.APPROVED.value,
        )
        return listing.rows

    # -------- Mutations --------
    def save_adjustment(
        self,
        *,
        actor: Actor,
        staff_id: str,
        week_start: str,
        week_end: str,
        daily: Iterable[Mapping[str, Any]],
        reason: str = "",
    ) -> WeeklyApproval:
        require_approver(actor)
        staff_id = require_non_empty(staff_id, "staffId")
        week = WeekWindow.parse(week_start, week_end)
        # Parse everything first: a single bad value must leave every day untouched.
        adjustments = self._parse_adjustments(week, daily)
        reason_text = optional_text(reason)

        with self._store.transaction() as tx:
            state = tx.approvals.lock_week(staff_id=staff_id, week=week)
            if state.is_approved:
                logger.warning("adjustment rejected for %s week %s: approved", staff_id, week.start.isoformat())
                raise WeekLockedError("This week is approved. Unlock it before adjusting.")

            for adj in adjustments:
                tx.approvals.set_adjustment(
                    staff_id=staff_id,
                    work_date=adj.date,
                    minutes=adj.minutes,
                    updated_by=actor.user_id,
                )

            summary = self._summarize(tx, staff_id, week)
            tx.audit.append(
                staff_id=staff_id,
                week_start=week.start,
                action=AuditAction.ADJUST,
                actor_id=actor.user_id,
                actor_name=actor.display_name,
                reason=reason_text,
                created_at=self._clock(),
                details={
                    "daily": [{"date": a.date.isoformat(), "minutes": a.minutes} for a in adjustments],
                    "computedMinutes": summary.computed_minutes,
                    "finalMinutes": summary.final_minutes,
                },
            )

        logger.info(
            "%s adjusted %s day(s) for %s week %s (final=%s)",
            actor.user_id,
            len(adjustments),
            staff_id,
            week.start.isoformat(),
            summary.final_minutes,
        )
        return self._to_approval(summary, state, self._staff.get_profile(staff_id))

    def approve(
        self,
        *,
        actor: Actor,
        staff_id: str,
        week_start: str,
        week_end: str,
        reason: str = "",
    ) -> WeeklyApproval:
        require_approver(actor)
        staff_id = require_non_empty(staff_id, "staffId")
        week = WeekWindow.parse(week_start, week_end)

        with self._store.transaction() as tx:
            state = tx.approvals.lock_week(staff_id=staff_id, week=week)
            if state.is_approved:
                logger.warning("approve rejected for %s week %s: already approved", staff_id, week.start.isoformat())
                raise AlreadyApprovedError("This week is already approved")

            summary = self._summarize(tx, staff_id, week)
            now = self._clock()
            tx.approvals.set_status(
                staff_id=staff_id,
                week=week,
                status=ApprovalStatus.APPROVED,
                approved_by=actor.user_id,
                approved_by_name=actor.display_name,
                approved_at=now,
                approved_final_minutes=summary.final_minutes,
            )
            tx.audit.append(
                staff_id=staff_id,
                week_start=week.start,
                action=AuditAction.APPROVE,
                actor_id=actor.user_id,
                actor_name=actor.display_name,
                reason=optional_text(reason),
                created_at=now,
                details={"computedMinutes": summary.computed_minutes, "finalMinutes": summary.final_minutes},
            )
            state = tx.approvals.get_week(staff_id=staff_id, week=week)

        logger.info(
            "%s approved %s week %s (final=%s)", actor.user_id, staff_id, week.start.isoformat(), summary.final_minutes
        )
        return self._to_approval(summary, state, self._staff.get_profile(staff_id))

    def unlock(
        self,
        *,
        actor: Actor,
        staff_id: str,
        week_start: str,
        week_end: str,
        reason: str,
    ) -> WeeklyApproval:
        require_approver(actor)
        staff_id = require_non_empty(staff_id, "staffId")
        week = WeekWindow.parse(week_start, week_end)

        reason_text = (reason or "").strip()
        if len(reason_text) < self._unlock_reason_min_length:
            logger.warning("unlock rejected for %s week %s: missing reason", staff_id, week.start.isoformat())
            raise ReasonRequiredError(
                f"Unlock requires a reason (min {self._unlock_reason_min_length} chars)"
            )

        with self._store.transaction() as tx:
            state = tx.approvals.lock_week(staff_id=staff_id, week=week)
            if not state.is_approved:
                raise WeekNotApprovedError("This week is not approved")

            tx.approvals.set_status(staff_id=staff_id, week=week, status=ApprovalStatus.PENDING)
            tx.audit.append(
                staff_id=staff_id,
                week_start=week.start,
                action=AuditAction.UNLOCK,
                actor_id=actor.user_id,
                actor_name=actor.display_name,
                reason=reason_text,
                created_at=self._clock(),
                details={
                    "previousApprovedBy": state.approved_by,
                    "previousFinalMinutes": state.approved_final_minutes,
                },
            )
            summary = self._summarize(tx, staff_id, week)
            state = tx.approvals.get_week(staff_id=staff_id, week=week)

        logger.info("%s unlocked %s week %s: %s", actor.user_id, staff_id, week.start.isoformat(), reason_text)
        return self._to_approval(summary, state, self._staff.get_profile(staff_id))

    # -------- Helpers --------
    def _summarize(self, tx: StoreSession, staff_id: str, week: WeekWindow) -> WeeklySummary:
        start, end = week.utc_bounds(self._aggregator.tz)
        events = tx.attendance.list_between(start=start, end=end, staff_id=staff_id)
        adjustments = tx.approvals.get_adjustments(staff_id=staff_id, week=week)
        return self._aggregator.summarize(
            staff_id=staff_id,
            week=week,
            events=events,
            adjustments=adjustments,
            now=self._clock(),
        )

    @staticmethod
    def _parse_status_filter(status: Optional[str]) -> Optional[ApprovalStatus]:
        value = (status or "").strip().upper()
        if not value or value == "ALL":
            return None
        try:
            return ApprovalStatus(value)
        except ValueError:
            raise ValidationError(f"Unknown status filter: {status}")

    @staticmethod
    def _parse_adjustments(week: WeekWindow, daily: Iterable[Mapping[str, Any]]) -> list[DailyAdjustment]:
        out: list[DailyAdjustment] = []
        seen: set[date] = set()
        for item in daily or []:
            if not isinstance(item, Mapping):
                raise ValidationError("Each daily adjustment must be an object with date and minutes")
            try:
                day = parse_iso_date(str(item.get("date") or ""))
            except ValueError:
                raise ValidationError(f"Invalid adjustment date: {item.get('date')!r}")
            if not week.contains(day):
                raise ValidationError(f"{day.isoformat()} is outside the selected week")
            if day in seen:
                raise ValidationError(f"Duplicate adjustment for {day.isoformat()}")
            seen.add(day)
            out.append(DailyAdjustment(date=day, minutes=parse_duration_minutes(item.get("minutes"))))
        return out

    @staticmethod
    def _to_approval(
        summary: WeeklySummary,
        state: Optional[WeekState],
        profile: Optional[StaffProfile],
    ) -> WeeklyApproval:
        approved = state is not None and state.is_approved
        return WeeklyApproval(
            staff_id=summary.staff_id,
            staff_name=profile.full_name if profile else summary.staff_id,
            position=profile.position if profile else "",
            week_start=summary.week.start,
            week_end=summary.week.end,
            status=state.status if state else ApprovalStatus.PENDING,
            computed_minutes=summary.computed_minutes,
            final_minutes=(
                state.approved_final_minutes
                if approved and state.approved_final_minutes is not None
                else summary.final_minutes
            ),
            flags_count=summary.flags_count,
            approved_by=state.approved_by if approved else None,
            approved_by_name=state.approved_by_name if approved else None,
            approved_at=state.approved_at if approved else None,
            daily=summary.daily,
        )
