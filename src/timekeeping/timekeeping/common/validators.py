from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from ..core.constants import MAX_DAILY_MINUTES
from ..core.exceptions import InvalidDurationError, ValidationError

_HH_MM = re.compile(r"^(\d{1,2})\s*:\s*(\d{1,2})$")
_DECIMAL_HOURS = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None


def parse_duration_minutes(value: object) -> Optional[int]:
    """Parse an adjustment value into whole minutes.

    Accepted: ``None`` or blank (clears the adjustment), an int of minutes,
    ``"H:MM"`` / ``"HH:MM"``, or decimal hours such as ``"1.25"``.
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise InvalidDurationError(f"Invalid duration: {value!r}")

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not value.is_integer():
            raise InvalidDurationError(f"Minutes must be a whole number: {value!r}")
        minutes = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        m = _HH_MM.match(text)
        if m:
            hours, mins = int(m.group(1)), int(m.group(2))
            if mins >= 60:
                raise InvalidDurationError(f"Invalid duration: {value!r} (minutes must be 0-59)")
            minutes = hours * 60 + mins
        elif _DECIMAL_HOURS.match(text):
            try:
                hours_dec = Decimal(text)
            except InvalidOperation:
                raise InvalidDurationError(f"Invalid duration: {value!r}")
            minutes = int((hours_dec * 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        else:
            raise InvalidDurationError(f"Invalid duration: {value!r} (use H:MM or decimal hours)")
    else:
        raise InvalidDurationError(f"Invalid duration: {value!r}")

    if minutes < 0:
        raise InvalidDurationError(f"Duration cannot be negative: {value!r}")
    if minutes > MAX_DAILY_MINUTES:
        raise InvalidDurationError(f"Duration exceeds one day: {value!r}")
    return minutes
