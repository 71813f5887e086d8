from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.staff_attendance.staff_attendance.attendance.model import AttendanceRecord, GeoPoint, LunchBreak
from src.staff_attendance.staff_attendance.core.enums import Role
from src.staff_attendance.staff_attendance.holidays.model import Holiday
from src.staff_attendance.staff_attendance.users.model import StaffProfile, User

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")


class InMemoryAttendance:
    def __init__(self):
        self._records: dict[int, AttendanceRecord] = {}
        self._next_id = 0
        self._next_lunch_id = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._records[record.attendance_id] = record
        self._next_id = max(self._next_id, record.attendance_id)
        return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._records.get(int(attendance_id))

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._records.values():
            if r.user_id == user_id and r.work_date == work_date:
                return r
        return None

    def list_range(self, *, user_id: int, start: date, end: date):
        items = [r for r in self._records.values() if r.user_id == user_id and start <= r.work_date <= end]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items

    def create_punch_in(self, *, user_id: int, work_date: date, punch_in_time: datetime, location: GeoPoint) -> int:
        self._next_id += 1
        self._records[self._next_id] = AttendanceRecord(
            attendance_id=self._next_id,
            user_id=user_id,
            work_date=work_date,
            punch_in_time=punch_in_time,
            punch_in_location=location,
        )
        return self._next_id

    def create_leave(self, *, user_id: int, work_date: date, work_done: str) -> int:
        self._next_id += 1
        self._records[self._next_id] = AttendanceRecord(
            attendance_id=self._next_id,
            user_id=user_id,
            work_date=work_date,
            work_done=work_done,
        )
        return self._next_id

    def update_punch_out(self, *, attendance_id, punch_out_time, location, working_hours, work_done=None) -> bool:
        rec = self._records.get(attendance_id)
        if not rec or rec.punch_out_time is not None:
            return False
        self._records[attendance_id] = replace(
            rec,
            punch_out_time=punch_out_time,
            punch_out_location=location,
            working_hours=working_hours,
            work_done=work_done,
        )
        return True

    def start_lunch(self, *, attendance_id: int, start_time: datetime, location: GeoPoint) -> int:
        self._next_lunch_id += 1
        rec = self._records[attendance_id]
        lb = LunchBreak(
            lunch_id=self._next_lunch_id,
            attendance_id=attendance_id,
            lunch_start_time=start_time,
            start_location=location,
        )
        self._records[attendance_id] = replace(rec, lunch_breaks=rec.lunch_breaks + (lb,))
        return self._next_lunch_id

    def end_lunch(self, *, lunch_id: int, end_time: datetime, location, duration: int) -> bool:
        for rec in self._records.values():
            for i, lb in enumerate(rec.lunch_breaks):
                if lb.lunch_id == lunch_id and lb.lunch_end_time is None:
                    ended = replace(lb, lunch_end_time=end_time, end_location=location, duration=duration)
                    breaks = rec.lunch_breaks[:i] + (ended,) + rec.lunch_breaks[i + 1 :]
                    self._records[rec.attendance_id] = replace(rec, lunch_breaks=breaks)
                    return True
        return False

    def delete(self, attendance_id: int) -> bool:
        return self._records.pop(int(attendance_id), None) is not None


class InMemoryUsers:
    def __init__(self, users: list[User], profiles: list[StaffProfile]):
        self._users = {u.user_id: u for u in users}
        self._profiles = {p.user_id: p for p in profiles}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self._users.values():
            if u.email == email:
                return u
        return None

    def get_profile(self, user_id: int) -> Optional[StaffProfile]:
        return self._profiles.get(int(user_id))

    def list_staff(self):
        return [p for uid, p in self._profiles.items() if self._users[uid].role == Role.STAFF]

    def create_staff(self, *, email: str, password_hash: str, profile: StaffProfile) -> int:
        user_id = max(self._users, default=0) + 1
        self._users[user_id] = User(user_id=user_id, email=email, password_hash=password_hash, role=Role.STAFF)
        self._profiles[user_id] = replace(profile, user_id=user_id)
        return user_id

    def update_user(self, user_id: int, *, email=None, password_hash=None) -> None:
        user = self._users[user_id]
        self._users[user_id] = replace(
            user,
            email=email if email is not None else user.email,
            password_hash=password_hash if password_hash is not None else user.password_hash,
        )

    def update_profile(self, profile: StaffProfile) -> None:
        self._profiles[profile.user_id] = profile

    def delete_user(self, user_id: int) -> bool:
        self._profiles.pop(int(user_id), None)
        return self._users.pop(int(user_id), None) is not None


class InMemoryHolidays:
    def __init__(self, holidays: Optional[list[Holiday]] = None):
        self._items = {h.holiday_id: h for h in holidays or []}
        self.last_range = None

    def get_for_date(self, holiday_date: date) -> Optional[Holiday]:
        for h in self._items.values():
            if h.holiday_date == holiday_date:
                return h
        return None

    def list_range(self, *, start: date, end: date):
        self.last_range = (start, end)
        return sorted((h for h in self._items.values() if start <= h.holiday_date <= end), key=lambda h: h.holiday_date)

    def list_all(self):
        return sorted(self._items.values(), key=lambda h: h.holiday_date)

    def create(self, *, holiday_date: date, name: str) -> int:
        holiday_id = max(self._items, default=0) + 1
        self._items[holiday_id] = Holiday(holiday_id=holiday_id, holiday_date=holiday_date, name=name)
        return holiday_id

    def delete(self, holiday_id: int) -> bool:
        return self._items.pop(int(holiday_id), None) is not None


@pytest.fixture
def staff_profile() -> StaffProfile:
    return StaffProfile(
        user_id=2,
        full_name="John Doe",
        working_days=WEEKDAYS,
        office_time_in="09:00",
        office_time_out="18:00",
        salary=50000.0,
    )


@pytest.fixture
def users_repo(staff_profile) -> InMemoryUsers:
    admin = User(user_id=1, email="admin@example.com", password_hash=generate_password_hash("admin123"), role=Role.ADMIN)
    staff = User(user_id=2, email="staff@example.com", password_hash=generate_password_hash("staff123"), role=Role.STAFF)
    other = User(user_id=3, email="other@example.com", password_hash=generate_password_hash("other123"), role=Role.STAFF)
    other_profile = replace(staff_profile, user_id=3, full_name="Jane Roe")
    return InMemoryUsers([admin, staff, other], [staff_profile, other_profile])


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def holidays_repo() -> InMemoryHolidays:
    return InMemoryHolidays()
