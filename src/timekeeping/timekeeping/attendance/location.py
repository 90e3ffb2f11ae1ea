"""Location capture: turn a request payload into a validated GPS fix."""
from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from ..core.constants import MAX_LATITUDE, MAX_LONGITUDE
from ..core.exceptions import InvalidLocationError, LocationUnavailableError
from .model import GeoLocation


def _as_number(value: Any, field_name: str) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidLocationError(f"GPS {field_name} is required")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise InvalidLocationError(f"GPS {field_name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidLocationError(f"GPS {field_name} must be a number")
    if not math.isfinite(number):
        raise InvalidLocationError(f"GPS {field_name} must be a finite number")
    return number


def validate_location(location: Optional[GeoLocation]) -> GeoLocation:
    if location is None:
        raise InvalidLocationError("GPS location is required for every check-in/out")
    for name, value in (
        ("latitude", location.latitude),
        ("longitude", location.longitude),
        ("accuracy", location.accuracy_meters),
    ):
        if not math.isfinite(value):
            raise InvalidLocationError(f"GPS {name} must be a finite number")
    if abs(location.latitude) > MAX_LATITUDE:
        raise InvalidLocationError("GPS latitude must be within [-90, 90]")
    if abs(location.longitude) > MAX_LONGITUDE:
        raise InvalidLocationError("GPS longitude must be within [-180, 180]")
    if location.accuracy_meters < 0:
        raise InvalidLocationError("GPS accuracy cannot be negative")
    return location


def capture_location(payload: Mapping[str, Any]) -> GeoLocation:
    """Build a GeoLocation from ``latitude``/``longitude``/``accuracy`` fields.

    A ``locationError`` field means the device could not get a fix at all; that
    is reported separately so the caller can tell the user to retry GPS.
    """
    device_error = payload.get("locationError")
    if device_error:
        raise LocationUnavailableError(f"Could not get GPS location: {device_error}")

    accuracy = payload.get("accuracy")
    if accuracy is None:
        accuracy = payload.get("accuracyMeters")

    location = GeoLocation(
        latitude=_as_number(payload.get("latitude"), "latitude"),
        longitude=_as_number(payload.get("longitude"), "longitude"),
        accuracy_meters=_as_number(accuracy, "accuracy"),
    )
    return validate_location(location)
