from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol

from .model import StaffProfile


class EmployeeDirectory(Protocol):
    """Employee master data, owned outside this service (read-only here)."""

    def get_profile(self, staff_id: str) -> Optional[StaffProfile]:
        raise NotImplementedError

    def get_profiles(self, staff_ids: Iterable[str]) -> Mapping[str, StaffProfile]:
        raise NotImplementedError
