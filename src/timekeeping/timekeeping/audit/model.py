from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditEntry:
    """Append-only record of a reviewer action on one staff week."""

    audit_id: int
    staff_id: str
    week_start: date
    action: AuditAction
    actor_id: str
    created_at: datetime
    actor_name: Optional[str] = None
    reason: Optional[str] = None
    details: Mapping[str, Any] = field(default_factory=dict)

    @property
    def week_key(self) -> str:
        return f"{self.staff_id}:{self.week_start.isoformat()}"
