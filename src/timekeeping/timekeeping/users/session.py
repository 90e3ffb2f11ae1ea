"""Trusted boundary: the Flask session is the only source of the caller's identity.

The identity provider writes ``user_id``, ``name``, ``role`` and ``staff_id``
into the signed session cookie at login. Actor fields sent in request bodies
or query strings are never read.
"""
from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, jsonify, session

from ..core.enums import Role
from .model import Actor


def current_actor() -> Optional[Actor]:
    if "user_id" not in session:
        return None
    try:
        role = Role(str(session.get("role") or "").upper())
    except ValueError:
        return None
    staff_id = session.get("staff_id")
    return Actor(
        user_id=str(session["user_id"]),
        display_name=str(session.get("name") or session["user_id"]),
        role=role,
        staff_id=str(staff_id) if staff_id else None,
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        actor = current_actor()
        if actor is None:
            return jsonify({"success": False, "error": "Unauthenticated", "message": "Please log in"}), 401
        g.actor = actor
        return view(*args, **kwargs)

    return wrapper


def approver_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        actor = current_actor()
        if actor is None:
            return jsonify({"success": False, "error": "Unauthenticated", "message": "Please log in"}), 401
        if not actor.is_approver:
            return jsonify({"success": False, "error": "AuthorizationError", "message": "Admin/HR only"}), 403
        g.actor = actor
        return view(*args, **kwargs)

    return wrapper
