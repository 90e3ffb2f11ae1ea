from __future__ import annotations

from typing import ContextManager, Protocol

from ..approvals.repository import ApprovalRepository
from ..attendance.repository import AttendanceRepository
from ..audit.repository import AuditRepository


class StoreSession(Protocol):
    """Repositories bound to one open transaction."""

    attendance: AttendanceRepository
    approvals: ApprovalRepository
    audit: AuditRepository


class Store(Protocol):
    """Transactional store.

    ``transaction()`` commits when the block exits normally and rolls back on
    any exception, so a state change and its audit entry land together or not
    at all. Storage faults surface as ``StorageUnavailableError``.
    """

    def transaction(self) -> ContextManager[StoreSession]:
        raise NotImplementedError
