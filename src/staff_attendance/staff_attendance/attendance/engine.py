"""Attendance status and working-hours rules.

Pure functions over the domain model: nothing here reads the clock or the
database. Callers pass ``now`` and the records they loaded, and persist
whatever they decide to keep.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import date_key, elapsed_ms, iter_days, local_date, parse_hhmm, weekday_name
from ..core.constants import DEFAULT_DAILY_HOURS
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCompletedError,
    AlreadyPunchedInError,
    IsHolidayError,
    NotAWorkingDayError,
)
from ..holidays.model import Holiday
from ..users.model import StaffProfile
from .model import AttendanceRecord, LunchBreak


@dataclass(frozen=True)
class DailyStatus:
    status: AttendanceStatus
    record: Optional[AttendanceRecord]
    active_lunch_break: Optional[LunchBreak]
    lunch_breaks: tuple[LunchBreak, ...]
    total_lunch_minutes: int
    working_hours: Optional[float]
    net_working_hours: Optional[float]


@dataclass(frozen=True)
class Statistics:
    expected_working_days: int
    expected_daily_hours: float
    expected_total_hours: float
    total_hours_worked: float
    total_net_hours_worked: float
    completed_days: int
    total_records: int


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round2(value: float) -> float:
    """Two decimals, exact ties rounded up (0.125 -> 0.13)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def lunch_duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between ``start`` and ``end``, rounded to the nearest minute."""
    return round_half_up(elapsed_ms(start, end) / 60000)


def compute_working_hours(punch_in: datetime, punch_out: datetime) -> float:
    """Hours between punch-in and punch-out, rounded to 2 decimals."""
    return round2(elapsed_ms(punch_in, punch_out) / 3_600_000)


def fill_lunch_durations(lunch_breaks: Iterable[LunchBreak]) -> tuple[LunchBreak, ...]:
    """Compute missing durations for finished breaks; active breaks are left as they are."""
    out = []
    for lb in lunch_breaks:
        if lb.duration is None and lb.lunch_end_time is not None:
            lb = replace(lb, duration=lunch_duration_minutes(lb.lunch_start_time, lb.lunch_end_time))
        out.append(lb)
    return tuple(out)


def net_working_hours(working_hours: Optional[float], total_lunch_minutes: int) -> Optional[float]:
    if working_hours is None:
        return None
    if total_lunch_minutes > 0:
        return max(0.0, float(working_hours) - total_lunch_minutes / 60)
    return float(working_hours)


def _resolve_status(record: Optional[AttendanceRecord], *, is_today: bool) -> AttendanceStatus:
    if record is None:
        return AttendanceStatus.NOT_PUNCHED_IN
    # Leave wins over the punch fields.
    if record.is_leave:
        return AttendanceStatus.ON_LEAVE
    if record.punch_out_time is not None:
        return AttendanceStatus.PUNCHED_OUT
    if record.punch_in_time is None:
        return AttendanceStatus.NOT_PUNCHED_IN
    # An unclosed break on a past day is stale; the day just stays punched in.
    if is_today and record.active_lunch_break is not None:
        return AttendanceStatus.ON_LUNCH_BREAK
    return AttendanceStatus.PUNCHED_IN


def derive_daily_status(record: Optional[AttendanceRecord], *, is_today: bool) -> DailyStatus:
    """Status of one calendar day plus its lunch and hours aggregates."""
    status = _resolve_status(record, is_today=is_today)
    if record is None:
        return DailyStatus(
            status=status,
            record=None,
            active_lunch_break=None,
            lunch_breaks=(),
            total_lunch_minutes=0,
            working_hours=None,
            net_working_hours=None,
        )

    lunch_breaks = fill_lunch_durations(record.lunch_breaks)
    total_lunch = sum(lb.duration or 0 for lb in lunch_breaks)
    working_hours = float(record.working_hours) if record.working_hours is not None else None

    return DailyStatus(
        status=status,
        record=record,
        active_lunch_break=record.active_lunch_break if status == AttendanceStatus.ON_LUNCH_BREAK else None,
        lunch_breaks=lunch_breaks,
        total_lunch_minutes=total_lunch,
        working_hours=working_hours,
        net_working_hours=net_working_hours(working_hours, total_lunch),
    )


def expected_daily_hours(profile: Optional[StaffProfile]) -> float:
    if not profile or not profile.office_time_in or not profile.office_time_out:
        return float(DEFAULT_DAILY_HOURS)
    return (parse_hhmm(profile.office_time_out) - parse_hhmm(profile.office_time_in)) / 60


def is_expected_working_day(day: date, working_days: set[str], holiday_keys: set[str]) -> bool:
    return weekday_name(day) in working_days and date_key(day) not in holiday_keys


def compute_expected_statistics(
    records: Sequence[AttendanceRecord],
    profile: Optional[StaffProfile],
    holidays: Iterable[Holiday],
    range_start: date,
    range_end: date,
) -> Statistics:
    """Expected vs actual hours for ``[range_start, range_end]`` (both inclusive)."""
    working_days = set(profile.working_days) if profile else set()
    holiday_keys = {date_key(h.holiday_date) for h in holidays}

    expected_days = sum(
        1 for day in iter_days(range_start, range_end) if is_expected_working_day(day, working_days, holiday_keys)
    )
    daily_hours = expected_daily_hours(profile)

    in_range = [r for r in records if range_start <= r.work_date <= range_end]

    # Sum raw values; round only the totals.
    total_hours = 0.0
    total_net = 0.0
    for r in in_range:
        day = derive_daily_status(r, is_today=False)
        total_hours += day.working_hours or 0.0
        total_net += day.net_working_hours or 0.0

    return Statistics(
        expected_working_days=expected_days,
        expected_daily_hours=daily_hours,
        expected_total_hours=round2(expected_days * daily_hours),
        total_hours_worked=round2(total_hours),
        total_net_hours_worked=round2(total_net),
        completed_days=sum(1 for r in in_range if r.is_completed),
        total_records=len(in_range),
    )


def validate_punch_in(
    now: datetime,
    profile: StaffProfile,
    today_holiday: Optional[Holiday],
    existing_record: Optional[AttendanceRecord],
) -> None:
    """Raise the matching ``PunchError`` if a punch-in at ``now`` is not allowed."""
    day_name = weekday_name(local_date(now))
    if day_name not in set(profile.working_days):
        raise NotAWorkingDayError(day_name, profile.working_days)

    if today_holiday is not None:
        raise IsHolidayError(today_holiday.name)

    if existing_record is not None:
        if existing_record.punch_in_time is not None and existing_record.punch_out_time is None:
            raise AlreadyPunchedInError()
        # Closed days and leave days cannot be reopened.
        raise AlreadyCompletedError()
