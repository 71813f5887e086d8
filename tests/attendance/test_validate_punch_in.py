from __future__ import annotations

from datetime import date, datetime

import pytest
import pytz

from src.staff_attendance.staff_attendance.attendance.engine import validate_punch_in
from src.staff_attendance.staff_attendance.attendance.model import AttendanceRecord
from src.staff_attendance.staff_attendance.common.datetime_utils import LOCAL_TZ
from src.staff_attendance.staff_attendance.core.exceptions import (
    AlreadyCompletedError,
    AlreadyPunchedInError,
    IsHolidayError,
    NotAWorkingDayError,
    PunchError,
)
from src.staff_attendance.staff_attendance.holidays.model import Holiday
from src.staff_attendance.staff_attendance.users.model import StaffProfile

MONDAY_ONLY = StaffProfile(user_id=2, full_name="John Doe", working_days=("Monday",))
TUESDAY_MORNING = LOCAL_TZ.localize(datetime(2026, 6, 2, 9, 0))
MONDAY_MORNING = LOCAL_TZ.localize(datetime(2026, 6, 1, 9, 0))


def test_allowed_on_working_day_without_record():
    assert validate_punch_in(MONDAY_MORNING, MONDAY_ONLY, None, None) is None


def test_not_a_working_day_names_allowed_days():
    with pytest.raises(NotAWorkingDayError) as exc:
        validate_punch_in(TUESDAY_MORNING, MONDAY_ONLY, None, None)

    assert exc.value.day_name == "Tuesday"
    assert exc.value.working_days == ["Monday"]
    assert "Monday" in str(exc.value)
    assert exc.value.code == "NOT_A_WORKING_DAY"


def test_weekday_is_taken_in_office_timezone():
    # 20:00 UTC on Monday is already 01:30 Tuesday in the office.
    late_monday_utc = pytz.utc.localize(datetime(2026, 6, 1, 20, 0))

    with pytest.raises(NotAWorkingDayError) as exc:
        validate_punch_in(late_monday_utc, MONDAY_ONLY, None, None)

    assert exc.value.day_name == "Tuesday"


def test_holiday_blocks_punch_in():
    holiday = Holiday(holiday_id=1, holiday_date=date(2026, 6, 1), name="Founders Day")

    with pytest.raises(IsHolidayError) as exc:
        validate_punch_in(MONDAY_MORNING, MONDAY_ONLY, holiday, None)

    assert "Founders Day" in str(exc.value)


def test_open_record_blocks_second_punch_in():
    existing = AttendanceRecord(
        attendance_id=1,
        user_id=2,
        work_date=date(2026, 6, 1),
        punch_in_time=LOCAL_TZ.localize(datetime(2026, 6, 1, 8, 0)),
    )

    with pytest.raises(AlreadyPunchedInError):
        validate_punch_in(MONDAY_MORNING, MONDAY_ONLY, None, existing)


def test_completed_record_blocks_punch_in():
    existing = AttendanceRecord(
        attendance_id=1,
        user_id=2,
        work_date=date(2026, 6, 1),
        punch_in_time=LOCAL_TZ.localize(datetime(2026, 6, 1, 8, 0)),
        punch_out_time=LOCAL_TZ.localize(datetime(2026, 6, 1, 8, 30)),
        working_hours=0.5,
    )

    with pytest.raises(AlreadyCompletedError):
        validate_punch_in(MONDAY_MORNING, MONDAY_ONLY, None, existing)


def test_leave_day_blocks_punch_in():
    existing = AttendanceRecord(attendance_id=1, user_id=2, work_date=date(2026, 6, 1), work_done="ON_LEAVE: trip")

    with pytest.raises(PunchError):
        validate_punch_in(MONDAY_MORNING, MONDAY_ONLY, None, existing)


def test_working_day_check_comes_before_holiday_check():
    holiday = Holiday(holiday_id=1, holiday_date=date(2026, 6, 2), name="Founders Day")

    with pytest.raises(NotAWorkingDayError):
        validate_punch_in(TUESDAY_MORNING, MONDAY_ONLY, holiday, None)
