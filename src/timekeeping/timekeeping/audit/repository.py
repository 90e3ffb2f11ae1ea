from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import AuditAction
from .model import AuditEntry


class AuditRepository(Protocol):
    """Append-only: entries are never updated or deleted."""

    def append(
        self,
        *,
        staff_id: str,
        week_start: date,
        action: AuditAction,
        actor_id: str,
        actor_name: Optional[str],
        reason: Optional[str],
        created_at: datetime,
        details: Optional[Mapping[str, Any]] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_week(self, *, staff_id: str, week_start: date) -> Sequence[AuditEntry]:
        raise NotImplementedError
