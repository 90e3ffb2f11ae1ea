from __future__ import annotations

import logging

from flask import jsonify, request

from ..core.exceptions import (
    AlreadyApprovedError,
    AuthorizationError,
    ConflictError,
    DomainError,
    LocationUnavailableError,
    NoOpenSessionError,
    StorageUnavailableError,
    ValidationError,
    WeekLockedError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (ConflictError, 409),
    (NoOpenSessionError, 409),
    (WeekLockedError, 409),
    (AlreadyApprovedError, 409),
    (LocationUnavailableError, 422),
)


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(e: Exception):
    """Client-correctable domain errors keep their specific name for the UI."""
    if isinstance(e, StorageUnavailableError):
        return jsonify({"success": False, "error": "StorageUnavailableError", "message": str(e), "retry": True}), 503

    if isinstance(e, DomainError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls)), 400)
        return jsonify({"success": False, "error": type(e).__name__, "message": str(e)}), status

    logger.exception("unexpected error in %s %s", request.method, request.path)
    return jsonify({"success": False, "error": "InternalError", "message": "Unexpected server error"}), 500
