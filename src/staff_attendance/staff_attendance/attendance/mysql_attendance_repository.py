from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import ensure_aware, to_utc_naive
from ..core.exceptions import AlreadyPunchedInError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders, to_float
from .model import AttendanceRecord, GeoPoint, LunchBreak
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    attendance_id, user_id, work_date,
    punch_in_time, punch_in_lat, punch_in_lng,
    punch_out_time, punch_out_lat, punch_out_lng,
    working_hours, work_done
"""

_LUNCH_COLUMNS = """
    lunch_id, attendance_id, lunch_start_time, lunch_end_time,
    start_lat, start_lng, end_lat, end_lng, duration
"""


def _point(lat: Any, lng: Any) -> Optional[GeoPoint]:
    if lat is None or lng is None:
        return None
    return GeoPoint(latitude=float(lat), longitude=float(lng))


def _ts(value: Optional[datetime]) -> Optional[datetime]:
    return ensure_aware(value) if value is not None else None


def _lunch_from_row(r: Dict[str, Any]) -> LunchBreak:
    return LunchBreak(
        lunch_id=int(r["lunch_id"]),
        attendance_id=int(r["attendance_id"]),
        lunch_start_time=ensure_aware(r["lunch_start_time"]),
        lunch_end_time=_ts(r.get("lunch_end_time")),
        duration=int(r["duration"]) if r.get("duration") is not None else None,
        start_location=_point(r.get("start_lat"), r.get("start_lng")),
        end_location=_point(r.get("end_lat"), r.get("end_lng")),
    )


def _record_from_row(r: Dict[str, Any], lunch_breaks: Sequence[LunchBreak]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        punch_in_time=_ts(r.get("punch_in_time")),
        punch_out_time=_ts(r.get("punch_out_time")),
        punch_in_location=_point(r.get("punch_in_lat"), r.get("punch_in_lng")),
        punch_out_location=_point(r.get("punch_out_lat"), r.get("punch_out_lng")),
        working_hours=to_float(r.get("working_hours")),
        work_done=r.get("work_done"),
        lunch_breaks=tuple(lunch_breaks),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, rows: List[Dict[str, Any]]) -> List[AttendanceRecord]:
        if not rows:
            return []

        ids = [int(r["attendance_id"]) for r in rows]
        cur.execute(
            f"""
            SELECT {_LUNCH_COLUMNS}
            FROM lunch_breaks
            WHERE attendance_id IN ({in_placeholders(ids)})
            ORDER BY lunch_start_time ASC
            """,
            tuple(ids),
        )
        by_record: Dict[int, List[LunchBreak]] = {i: [] for i in ids}
        for lr in fetchall(cur):
            lb = _lunch_from_row(lr)
            by_record[lb.attendance_id].append(lb)

        return [_record_from_row(r, by_record[int(r["attendance_id"])]) for r in rows]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return self._load(cur, [r])[0]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            if not r:
                return None
            return self._load(cur, [r])[0]

    def list_range(self, *, user_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date DESC
                """,
                (int(user_id), start, end),
            )
            return self._load(cur, fetchall(cur))

    def create_punch_in(
        self,
        *,
        user_id: int,
        work_date: date,
        punch_in_time: datetime,
        location: GeoPoint,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(user_id, work_date, punch_in_time, punch_in_lat, punch_in_lng)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(user_id), work_date, to_utc_naive(punch_in_time), location.latitude, location.longitude),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno != errorcode.ER_DUP_ENTRY:
                raise
            # Lost a race against a concurrent punch-in for the same day.
            raise AlreadyPunchedInError()

    def create_leave(self, *, user_id: int, work_date: date, work_done: str) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO attendance_records(user_id, work_date, work_done) VALUES(%s,%s,%s)",
                    (int(user_id), work_date, work_done),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno != errorcode.ER_DUP_ENTRY:
                raise
            raise ValidationError("Attendance already recorded for this day")

    def update_punch_out(
        self,
        *,
        attendance_id: int,
        punch_out_time: datetime,
        location: GeoPoint,
        working_hours: float,
        work_done: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET punch_out_time=%s, punch_out_lat=%s, punch_out_lng=%s, working_hours=%s, work_done=%s
                WHERE attendance_id=%s AND punch_out_time IS NULL
                """,
                (
                    to_utc_naive(punch_out_time),
                    location.latitude,
                    location.longitude,
                    working_hours,
                    work_done,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def start_lunch(self, *, attendance_id: int, start_time: datetime, location: GeoPoint) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO lunch_breaks(attendance_id, lunch_start_time, start_lat, start_lng)
                VALUES(%s,%s,%s,%s)
                """,
                (int(attendance_id), to_utc_naive(start_time), location.latitude, location.longitude),
            )
            return int(cur.lastrowid)

    def end_lunch(self, *, lunch_id: int, end_time: datetime, location: Optional[GeoPoint], duration: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE lunch_breaks
                SET lunch_end_time=%s, end_lat=%s, end_lng=%s, duration=%s
                WHERE lunch_id=%s AND lunch_end_time IS NULL
                """,
                (
                    to_utc_naive(end_time),
                    location.latitude if location else None,
                    location.longitude if location else None,
                    int(duration),
                    int(lunch_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
