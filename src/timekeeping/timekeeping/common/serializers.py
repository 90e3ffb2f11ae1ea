"""JSON shapes for the time keeping API (camelCase, ISO-8601 UTC timestamps)."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..approvals.model import WeeklyApproval, WeeklyApprovalList, WeeklyDetail
from ..attendance.model import AttendanceEvent, GeoLocation, SessionResult, SessionStatus
from ..audit.model import AuditEntry
from ..summary.model import DailySummary
from ..users.model import Actor, StaffProfile


def _dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _d(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def location_to_dict(loc: Optional[GeoLocation]) -> Optional[dict]:
    if loc is None:
        return None
    return {"latitude": loc.latitude, "longitude": loc.longitude, "accuracy": loc.accuracy_meters}


def event_to_dict(e: AttendanceEvent) -> dict:
    return {
        "id": e.event_id,
        "staffId": e.staff_id,
        "checkInAt": _dt(e.check_in_at),
        "checkOutAt": _dt(e.check_out_at),
        "totalMinutes": e.total_minutes,
        # Flat check-in fix, the shape the attendance table renders.
        "latitude": e.check_in_location.latitude,
        "longitude": e.check_in_location.longitude,
        "accuracy": e.check_in_location.accuracy_meters,
        "checkInLocation": location_to_dict(e.check_in_location),
        "checkOutLocation": location_to_dict(e.check_out_location),
        "clientCheckInAt": _dt(e.client_check_in_at),
        "clientCheckOutAt": _dt(e.client_check_out_at),
        "source": e.source.value,
        "flags": [f.value for f in e.flags],
    }


def status_to_dict(s: SessionStatus) -> dict:
    loc = s.last_location
    return {
        "staffId": s.staff_id,
        "isCheckedIn": s.is_checked_in,
        "activeSessionId": s.active_session_id,
        "lastCheckInAt": _dt(s.last_check_in_at),
        "lastCheckOutAt": _dt(s.last_check_out_at),
        "lastLocation": location_to_dict(loc),
        "lastLat": loc.latitude if loc else None,
        "lastLng": loc.longitude if loc else None,
        "lastAccuracy": loc.accuracy_meters if loc else None,
        "serverTime": _dt(s.server_time),
    }


def session_result_to_dict(r: SessionResult) -> dict:
    return {"event": event_to_dict(r.event), "status": status_to_dict(r.status)}


def daily_to_dict(d: DailySummary) -> dict:
    return {
        "date": d.date.isoformat(),
        "computedMinutes": d.computed_minutes,
        "adjustedMinutes": d.adjusted_minutes,
        "resultMinutes": d.result_minutes,
        "eventCount": d.event_count,
        "flags": [f.value for f in d.flags],
    }


def approval_to_dict(a: WeeklyApproval, *, include_daily: bool = False) -> dict:
    out = {
        "staffId": a.staff_id,
        "name": a.staff_name,
        "position": a.position,
        "weekStart": a.week_start.isoformat(),
        "weekEnd": a.week_end.isoformat(),
        "status": a.status.value,
        "computedMinutes": a.computed_minutes,
        "finalMinutes": a.final_minutes,
        "flagsCount": a.flags_count,
        "approvedBy": a.approved_by,
        "approvedByName": a.approved_by_name,
        "approvedAt": _dt(a.approved_at),
    }
    if include_daily:
        out["daily"] = [daily_to_dict(d) for d in a.daily]
    return out


def approval_list_to_dict(listing: WeeklyApprovalList) -> dict:
    return {"rows": [approval_to_dict(r) for r in listing.rows], "totals": dict(listing.totals)}


def audit_to_dict(a: AuditEntry) -> dict:
    return {
        "id": a.audit_id,
        "weekKey": a.week_key,
        "staffId": a.staff_id,
        "weekStart": _d(a.week_start),
        "action": a.action.value,
        "actorId": a.actor_id,
        "actorName": a.actor_name,
        "reason": a.reason,
        "details": dict(a.details),
        "createdAt": _dt(a.created_at),
    }


def detail_to_dict(d: WeeklyDetail) -> dict:
    return {
        "row": approval_to_dict(d.approval, include_daily=True),
        "daily": [daily_to_dict(x) for x in d.daily],
        "attendance": [event_to_dict(e) for e in d.events],
        "audit": [audit_to_dict(a) for a in d.audit],
    }


def actor_to_dict(actor: Actor, profile: Optional[StaffProfile] = None) -> dict:
    return {
        "id": actor.user_id,
        "displayName": actor.display_name,
        "userType": actor.role.value,
        "staffId": actor.staff_id,
        "isApprover": actor.is_approver,
        "employee": (
            {
                "staffId": profile.staff_id,
                "name": profile.full_name,
                "position": profile.position,
                "isActive": profile.is_active,
            }
            if profile
            else None
        ),
    }
