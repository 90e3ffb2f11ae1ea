from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles asserted by the identity provider."""

    ADMIN = "ADMIN"
    HR = "HR"
    STAFF = "STAFF"

    @property
    def is_approver(self) -> bool:
        return self in {Role.ADMIN, Role.HR}


class AttendanceSource(str, Enum):
    """Where a check-in request came from (advisory metadata only)."""

    MOBILE = "MOBILE"
    WEB = "WEB"


class ApprovalStatus(str, Enum):
    """Weekly lock state."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"


class AuditAction(str, Enum):
    ADJUST = "ADJUST"
    APPROVE = "APPROVE"
    UNLOCK = "UNLOCK"


class AttendanceFlag(str, Enum):
    """Reviewer hints attached at summarize time. Never stored."""

    MISSING_CHECKOUT = "MISSING_CHECKOUT"
    LOW_ACCURACY = "LOW_ACCURACY"
    SHORT_SESSION = "SHORT_SESSION"
    LONG_SESSION = "LONG_SESSION"
    OVERNIGHT_SESSION = "OVERNIGHT_SESSION"
