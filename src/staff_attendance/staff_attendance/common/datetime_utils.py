"""Calendar helpers pinned to the office timezone.

Every "which day is it" question goes through this module. Timestamps are
carried around as aware UTC datetimes; calendar dates are plain ``date``
objects in the office timezone, never a truncated UTC timestamp.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, Union

import pytz

from ..core.constants import DAY_NAMES, LOCAL_TIMEZONE
from ..core.exceptions import ValidationError

LOCAL_TZ = pytz.timezone(LOCAL_TIMEZONE)


def now_utc() -> datetime:
    """Current instant as an aware UTC datetime.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(pytz.utc)


def ensure_aware(ts: datetime) -> datetime:
    # Naive values come from DATETIME columns, which are written in UTC.
    if ts.tzinfo is None:
        return pytz.utc.localize(ts)
    return ts


def to_utc_naive(ts: datetime) -> datetime:
    """Aware datetime -> naive UTC, the form stored in DATETIME columns."""
    return ensure_aware(ts).astimezone(pytz.utc).replace(tzinfo=None)


def to_local(ts: datetime) -> datetime:
    return ensure_aware(ts).astimezone(LOCAL_TZ)


def local_date(ts: datetime) -> date:
    """Calendar date of ``ts`` in the office timezone."""
    return to_local(ts).date()


def date_key(value: Union[date, datetime]) -> str:
    """``YYYY-MM-DD`` key; datetimes are converted to the office timezone first."""
    if isinstance(value, datetime):
        value = local_date(value)
    return value.strftime("%Y-%m-%d")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Invalid date (expected YYYY-MM-DD)")


def weekday_name(day: date) -> str:
    # date.weekday() is Monday=0; DAY_NAMES starts at Sunday.
    return DAY_NAMES[(day.weekday() + 1) % 7]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def parse_month(value: str) -> tuple[date, date]:
    """``YYYY-MM`` -> (first day, last day), both inclusive."""
    try:
        parsed = datetime.strptime((value or "").strip(), "%Y-%m")
    except ValueError:
        raise ValidationError("Invalid month (expected YYYY-MM)")
    return month_bounds(parsed.year, parsed.month)


def month_range(value: str | None = None, *, now: datetime | None = None) -> tuple[date, date]:
    """Range for a ``month`` query parameter, defaulting to the current local month."""
    if value:
        return parse_month(value)
    today = local_date(now or now_utc())
    return month_bounds(today.year, today.month)


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def parse_hhmm(value: str) -> int:
    """``HH:MM`` -> minutes since midnight."""
    try:
        parsed = datetime.strptime((value or "").strip(), "%H:%M")
    except ValueError:
        raise ValidationError("Invalid time (expected HH:MM)")
    return parsed.hour * 60 + parsed.minute


def elapsed_ms(start: datetime, end: datetime) -> float:
    return (ensure_aware(end) - ensure_aware(start)).total_seconds() * 1000


def format_local_time(ts: datetime | None) -> str:
    if ts is None:
        return "-"
    return to_local(ts).strftime("%H:%M")
