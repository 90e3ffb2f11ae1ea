from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Protocol, Sequence

from ..common.week import WeekWindow
from ..core.enums import ApprovalStatus
from .model import WeekState


class ApprovalRepository(Protocol):
    """Week lock state and per-day adjustments, bound to an open transaction."""

    def lock_week(self, *, staff_id: str, week: WeekWindow) -> WeekState:
        """Create the PENDING row if missing, then hold its row lock until commit."""

        raise NotImplementedError

    def get_week(self, *, staff_id: str, week: WeekWindow) -> Optional[WeekState]:
        raise NotImplementedError

    def list_weeks(self, *, week: WeekWindow) -> Sequence[WeekState]:
        raise NotImplementedError

    def set_status(
        self,
        *,
        staff_id: str,
        week: WeekWindow,
        status: ApprovalStatus,
        approved_by: Optional[str] = None,
        approved_by_name: Optional[str] = None,
        approved_at: Optional[datetime] = None,
        approved_final_minutes: Optional[int] = None,
    ) -> bool:
        raise NotImplementedError

    def get_adjustments(self, *, staff_id: str, week: WeekWindow) -> Mapping[date, int]:
        raise NotImplementedError

    def list_adjustments(self, *, week: WeekWindow) -> Mapping[str, Mapping[date, int]]:
        """All staff members' adjustments inside the week, keyed by staff id."""

        raise NotImplementedError

    def set_adjustment(self, *, staff_id: str, work_date: date, minutes: Optional[int], updated_by: str) -> None:
        """Upsert the override, or remove it when ``minutes`` is None."""

        raise NotImplementedError
