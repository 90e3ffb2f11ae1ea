from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Actor:
    """Authenticated caller, built at the trusted boundary (server-side session).

    Never constructed from client-supplied request fields.
    """

    user_id: str
    display_name: str
    role: Role
    staff_id: Optional[str] = None

    @property
    def is_approver(self) -> bool:
        return self.role.is_approver


@dataclass(frozen=True)
class StaffProfile:
    """Read-only view of an employee record owned by the employee directory."""

    staff_id: str
    full_name: str
    position: str
    is_active: bool = True
