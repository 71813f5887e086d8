from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .reports.service import AttendanceReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, StaffDirectory


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    attendance_repo: MySQLAttendanceRepository
    holidays_repo: MySQLHolidayRepository

    auth_service: AuthService
    staff_directory: StaffDirectory
    attendance_service: AttendanceService
    holiday_service: HolidayService
    report_service: AttendanceReportService


def build_container(*, db_config: Mapping) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    users_repo = MySQLUserRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        auth_service=AuthService(users_repo),
        staff_directory=StaffDirectory(users_repo),
        attendance_service=AttendanceService(attendance_repo, users_repo, holidays_repo),
        holiday_service=HolidayService(holidays_repo),
        report_service=AttendanceReportService(attendance_repo, users_repo, holidays_repo),
    )
