from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Sequence

from ..core.exceptions import AuthorizationError, NotEligibleError
from .model import Actor, StaffProfile
from .repository import EmployeeDirectory

logger = logging.getLogger(__name__)


def require_approver(actor: Optional[Actor]) -> Actor:
    if actor is None or not actor.is_approver:
        raise AuthorizationError("Only Admin/HR may review time keeping")
    return actor


class StaffDirectoryService:
    """Resolves staff ids against the employee directory and applies eligibility."""

    def __init__(self, directory: EmployeeDirectory, *, eligible_position_keywords: Sequence[str] = ()):
        self._directory = directory
        self._keywords = tuple(k.lower() for k in eligible_position_keywords)

    def get_profile(self, staff_id: str) -> Optional[StaffProfile]:
        return self._directory.get_profile(staff_id)

    def get_profiles(self, staff_ids: Iterable[str]) -> Mapping[str, StaffProfile]:
        return self._directory.get_profiles(staff_ids)

    def is_eligible(self, profile: Optional[StaffProfile]) -> bool:
        if profile is None or not profile.is_active:
            return False
        if not self._keywords:
            return True
        position = (profile.position or "").strip().lower()
        return any(k in position for k in self._keywords)

    def can_view(self, actor: Actor, staff_id: str) -> bool:
        return actor.is_approver or (actor.staff_id is not None and actor.staff_id == staff_id)

    def require_self_service(self, actor: Actor, staff_id: str) -> StaffProfile:
        """Check-in/out is only ever done by the staff member for themselves."""
        if actor.staff_id is None or actor.staff_id != staff_id:
            logger.warning("user %s tried to record attendance for staff %s", actor.user_id, staff_id)
            raise AuthorizationError("You can only check in or out for yourself")

        profile = self._directory.get_profile(staff_id)
        if not self.is_eligible(profile):
            raise NotEligibleError("Time keeping is not enabled for this employee")
        return profile
