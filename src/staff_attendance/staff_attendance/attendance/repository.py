from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, GeoPoint


class AttendanceRepository(Protocol):
    """Storage of attendance records and their lunch breaks.

    Records are returned with ``lunch_breaks`` loaded, ordered by start time.
    The store must keep ``(user_id, work_date)`` unique.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_range(self, *, user_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records with ``start <= work_date <= end``, newest first."""

        raise NotImplementedError

    def create_punch_in(
        self,
        *,
        user_id: int,
        work_date: date,
        punch_in_time: datetime,
        location: GeoPoint,
    ) -> int:
        raise NotImplementedError

    def create_leave(self, *, user_id: int, work_date: date, work_done: str) -> int:
        raise NotImplementedError

    def update_punch_out(
        self,
        *,
        attendance_id: int,
        punch_out_time: datetime,
        location: GeoPoint,
        working_hours: float,
        work_done: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def start_lunch(self, *, attendance_id: int, start_time: datetime, location: GeoPoint) -> int:
        raise NotImplementedError

    def end_lunch(self, *, lunch_id: int, end_time: datetime, location: Optional[GeoPoint], duration: int) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        """Delete a record; its lunch breaks go with it."""

        raise NotImplementedError
