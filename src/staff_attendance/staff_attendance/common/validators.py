from __future__ import annotations

from typing import Any

from ..core.constants import DAY_NAMES
from ..core.exceptions import ValidationError
from .datetime_utils import parse_hhmm


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_coordinates(latitude: Any, longitude: Any) -> tuple[float, float]:
    """Validate a GPS fix sent by the client."""
    if latitude is None or longitude is None or latitude == "" or longitude == "":
        raise ValidationError("Location is required")
    try:
        lat = float(latitude)
        lng = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("Location is invalid")
    if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lng <= 180.0):
        raise ValidationError("Location is out of range")
    return lat, lng


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if number <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return number


def require_non_negative_number(value: Any, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number


def require_working_days(value: Any) -> tuple[str, ...]:
    """Weekday names, de-duplicated and returned in Sunday-first order."""
    if not isinstance(value, (list, tuple)):
        raise ValidationError("Working days must be a list of day names")
    days = set()
    for name in value:
        if name not in DAY_NAMES:
            raise ValidationError(f"Unknown working day: {name!r}")
        days.add(name)
    if not days:
        raise ValidationError("At least one working day is required")
    return tuple(d for d in DAY_NAMES if d in days)


def require_office_hours(time_in: Any, time_out: Any) -> tuple[str, str]:
    """``HH:MM`` pair with the office closing after it opens."""
    start = parse_hhmm(time_in if isinstance(time_in, str) else "")
    end = parse_hhmm(time_out if isinstance(time_out, str) else "")
    if end <= start:
        raise ValidationError("Office time out must be after office time in")
    return f"{start // 60:02d}:{start % 60:02d}", f"{end // 60:02d}:{end % 60:02d}"
