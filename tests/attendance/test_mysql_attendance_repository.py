from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest
import pytz
from mysql.connector import errorcode

from src.staff_attendance.staff_attendance.attendance.model import GeoPoint
from src.staff_attendance.staff_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.staff_attendance.staff_attendance.core.exceptions import AlreadyPunchedInError, ValidationError


class FailingCursor:
    def __init__(self, error: Exception):
        self._error = error

    def execute(self, sql, params=None):
        raise self._error

    def close(self):
        pass


class FakeConnection:
    def __init__(self, error: Exception):
        self._error = error
        self.rolled_back = False

    def cursor(self, dictionary: bool = False):
        return FailingCursor(self._error)

    def commit(self):
        pass

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, error: Exception):
        self.conn = FakeConnection(error)

    def connect(self, *, with_database: bool = True):
        return self.conn


def punch_in(repo: MySQLAttendanceRepository) -> int:
    return repo.create_punch_in(
        user_id=2,
        work_date=date(2026, 6, 2),
        punch_in_time=pytz.utc.localize(datetime(2026, 6, 2, 3, 30)),
        location=GeoPoint(12.97, 77.59),
    )


def test_duplicate_day_becomes_already_punched_in():
    factory = FakeConnFactory(mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY))

    with pytest.raises(AlreadyPunchedInError):
        punch_in(MySQLAttendanceRepository(factory))
    assert factory.conn.rolled_back


def test_foreign_key_failure_is_not_remapped():
    error = mysql.connector.IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)

    with pytest.raises(mysql.connector.IntegrityError) as exc_info:
        punch_in(MySQLAttendanceRepository(FakeConnFactory(error)))
    assert exc_info.value.errno == errorcode.ER_NO_REFERENCED_ROW_2


def test_leave_on_recorded_day_is_a_validation_error():
    factory = FakeConnFactory(mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY))

    with pytest.raises(ValidationError):
        MySQLAttendanceRepository(factory).create_leave(user_id=2, work_date=date(2026, 6, 2), work_done="ON_LEAVE")
