from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import date_key, ensure_aware, format_local_time, local_date, month_range, now_utc, weekday_name
from ..common.validators import require_coordinates, require_positive_int
from ..core.exceptions import (
    AuthorizationError,
    LunchAlreadyActiveError,
    NoActiveAttendanceError,
    NoActiveLunchBreakError,
    NotFoundError,
    ValidationError,
)
from ..holidays.repository import HolidayRepository
from ..users.repository import UserRepository
from .engine import (
    DailyStatus,
    compute_working_hours,
    derive_daily_status,
    lunch_duration_minutes,
    round2,
    validate_punch_in,
)
from .model import AttendanceRecord, GeoPoint, LunchBreak, WorkNote
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _resolve_now(now: Optional[datetime]) -> datetime:
    return ensure_aware(now) if now is not None else now_utc()


def _iso(ts: Optional[datetime]) -> Optional[str]:
    return ts.isoformat() if ts is not None else None


def lunch_to_dict(lb: LunchBreak) -> dict[str, Any]:
    return {
        "id": lb.lunch_id,
        "lunchStartTime": _iso(lb.lunch_start_time),
        "lunchEndTime": _iso(lb.lunch_end_time),
        "duration": lb.duration,
    }


def status_to_dict(day: DailyStatus) -> dict[str, Any]:
    """JSON shape of a derived day, shared by the staff and admin views."""
    r = day.record
    note = r.work_note if r else None
    return {
        "status": day.status.value,
        "record": None
        if r is None
        else {
            "id": r.attendance_id,
            "date": date_key(r.work_date),
            "weekday": weekday_name(r.work_date),
            "punchInTime": _iso(r.punch_in_time),
            "punchOutTime": _iso(r.punch_out_time),
            "punchIn": format_local_time(r.punch_in_time),
            "punchOut": format_local_time(r.punch_out_time),
            "workDone": r.work_done,
            "leaveReason": note.text if note and note.is_leave else None,
        },
        "activeLunchBreak": lunch_to_dict(day.active_lunch_break) if day.active_lunch_break else None,
        "lunchBreaks": [lunch_to_dict(lb) for lb in day.lunch_breaks],
        "totalLunchMinutes": day.total_lunch_minutes,
        "workingHours": round2(day.working_hours) if day.working_hours is not None else None,
        "netWorkingHours": round2(day.net_working_hours) if day.net_working_hours is not None else None,
    }


class AttendanceService:
    """Punch in/out, lunch breaks and leave for the logged-in staff member.

    Every rule about *whether* an action is allowed lives in ``engine``; this
    class loads state, asks the engine, and writes the result.
    """

    def __init__(self, attendance: AttendanceRepository, users: UserRepository, holidays: HolidayRepository):
        self._attendance = attendance
        self._users = users
        self._holidays = holidays

    def _open_record(self, user_id: int, now: datetime) -> AttendanceRecord:
        record = self._attendance.get_for_user_and_date(user_id, local_date(now))
        if not record or record.punch_in_time is None or record.punch_out_time is not None:
            raise NoActiveAttendanceError()
        return record

    def punch_in(self, user_id: int, *, latitude: Any, longitude: Any, now: datetime | None = None) -> AttendanceRecord:
        lat, lng = require_coordinates(latitude, longitude)
        now = _resolve_now(now)
        today = local_date(now)

        profile = self._users.get_profile(user_id)
        if not profile:
            raise NotFoundError("Staff profile not found")

        existing = self._attendance.get_for_user_and_date(user_id, today)
        validate_punch_in(now, profile, self._holidays.get_for_date(today), existing)

        attendance_id = self._attendance.create_punch_in(
            user_id=user_id,
            work_date=today,
            punch_in_time=now,
            location=GeoPoint(lat, lng),
        )
        logger.info("punch in user=%s date=%s id=%s", user_id, today, attendance_id)
        return self._attendance.get_by_id(attendance_id)

    def punch_out(
        self,
        user_id: int,
        *,
        latitude: Any,
        longitude: Any,
        work_done: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        lat, lng = require_coordinates(latitude, longitude)
        now = _resolve_now(now)
        location = GeoPoint(lat, lng)

        record = self._open_record(user_id, now)
        if now < record.punch_in_time:
            raise ValidationError("Punch-out time cannot be before punch-in time")

        # A break left open is closed by the punch-out itself.
        active = record.active_lunch_break
        if active is not None:
            self._attendance.end_lunch(
                lunch_id=active.lunch_id,
                end_time=now,
                location=location,
                duration=lunch_duration_minutes(active.lunch_start_time, now),
            )

        note = (work_done or "").strip() or None
        hours = compute_working_hours(record.punch_in_time, now)
        if not self._attendance.update_punch_out(
            attendance_id=record.attendance_id,
            punch_out_time=now,
            location=location,
            working_hours=hours,
            work_done=note,
        ):
            raise NoActiveAttendanceError()

        logger.info("punch out user=%s id=%s hours=%.2f", user_id, record.attendance_id, hours)
        return self._attendance.get_by_id(record.attendance_id)

    def start_lunch(self, user_id: int, *, latitude: Any, longitude: Any, now: datetime | None = None) -> LunchBreak:
        lat, lng = require_coordinates(latitude, longitude)
        now = _resolve_now(now)

        record = self._open_record(user_id, now)
        if record.active_lunch_break is not None:
            raise LunchAlreadyActiveError()

        lunch_id = self._attendance.start_lunch(
            attendance_id=record.attendance_id,
            start_time=now,
            location=GeoPoint(lat, lng),
        )
        logger.info("lunch start user=%s id=%s lunch=%s", user_id, record.attendance_id, lunch_id)
        return LunchBreak(
            lunch_id=lunch_id,
            attendance_id=record.attendance_id,
            lunch_start_time=now,
            start_location=GeoPoint(lat, lng),
        )

    def end_lunch(self, user_id: int, *, latitude: Any, longitude: Any, now: datetime | None = None) -> LunchBreak:
        lat, lng = require_coordinates(latitude, longitude)
        now = _resolve_now(now)

        record = self._open_record(user_id, now)
        active = record.active_lunch_break
        if active is None:
            raise NoActiveLunchBreakError()

        duration = lunch_duration_minutes(active.lunch_start_time, now)
        if not self._attendance.end_lunch(
            lunch_id=active.lunch_id,
            end_time=now,
            location=GeoPoint(lat, lng),
            duration=duration,
        ):
            raise NoActiveLunchBreakError()

        logger.info("lunch end user=%s lunch=%s minutes=%s", user_id, active.lunch_id, duration)
        return LunchBreak(
            lunch_id=active.lunch_id,
            attendance_id=record.attendance_id,
            lunch_start_time=active.lunch_start_time,
            lunch_end_time=now,
            duration=duration,
            start_location=active.start_location,
            end_location=GeoPoint(lat, lng),
        )

    def mark_leave(self, user_id: int, *, reason: str, now: datetime | None = None) -> AttendanceRecord:
        now = _resolve_now(now)
        today = local_date(now)

        if self._attendance.get_for_user_and_date(user_id, today):
            raise ValidationError("Attendance already recorded for today")

        attendance_id = self._attendance.create_leave(
            user_id=user_id,
            work_date=today,
            work_done=WorkNote.leave(reason),
        )
        logger.info("leave user=%s date=%s id=%s", user_id, today, attendance_id)
        return self._attendance.get_by_id(attendance_id)

    def delete_record(self, *, user_id: int, record_id: Any) -> None:
        record_id = require_positive_int(record_id, "Attendance record ID")

        record = self._attendance.get_by_id(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        if record.user_id != user_id:
            logger.warning("user=%s tried to delete record=%s of user=%s", user_id, record_id, record.user_id)
            raise AuthorizationError("You can only delete your own attendance records")

        self._attendance.delete(record_id)
        logger.info("attendance deleted user=%s id=%s", user_id, record_id)

    def get_today_status(self, user_id: int, *, now: datetime | None = None) -> DailyStatus:
        today = local_date(_resolve_now(now))
        return derive_daily_status(self._attendance.get_for_user_and_date(user_id, today), is_today=True)

    def get_month(self, user_id: int, month: Optional[str] = None, *, now: datetime | None = None) -> list[DailyStatus]:
        """Records of a ``YYYY-MM`` month (default: current month), newest first."""
        now = _resolve_now(now)
        today = local_date(now)
        start, end = month_range(month, now=now)
        return [
            derive_daily_status(r, is_today=(r.work_date == today))
            for r in self._attendance.list_range(user_id=user_id, start=start, end=end)
        ]

