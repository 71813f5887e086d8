from __future__ import annotations

from datetime import date, datetime

import pytest

from src.staff_attendance.staff_attendance.attendance.model import AttendanceRecord, LunchBreak
from src.staff_attendance.staff_attendance.common.datetime_utils import LOCAL_TZ
from src.staff_attendance.staff_attendance.core.enums import Role
from src.staff_attendance.staff_attendance.core.exceptions import AuthorizationError, NotFoundError
from src.staff_attendance.staff_attendance.reports.service import AttendanceReportService


def ist(*args) -> datetime:
    return LOCAL_TZ.localize(datetime(*args))


@pytest.fixture
def report_service(attendance_repo, users_repo, holidays_repo) -> AttendanceReportService:
    return AttendanceReportService(attendance_repo, users_repo, holidays_repo)


def test_month_report(report_service, attendance_repo, holidays_repo):
    holidays_repo.create(holiday_date=date(2026, 6, 15), name="Founders Day")
    attendance_repo.add(
        AttendanceRecord(
            attendance_id=1,
            user_id=2,
            work_date=date(2026, 6, 1),
            punch_in_time=ist(2026, 6, 1, 9, 0),
            punch_out_time=ist(2026, 6, 1, 18, 0),
            working_hours=9.0,
            lunch_breaks=(LunchBreak(1, 1, ist(2026, 6, 1, 13, 0), ist(2026, 6, 1, 13, 30)),),
        )
    )
    attendance_repo.add(
        AttendanceRecord(attendance_id=2, user_id=2, work_date=date(2026, 6, 2), work_done="ON_LEAVE: flu")
    )

    report = report_service.build_staff_month(
        current_role=Role.ADMIN, staff_id=2, month="2026-06", now=ist(2026, 6, 20, 12, 0)
    )
    data = report.to_dict()

    assert data["statistics"] == {
        "totalHoursWorked": 9.0,
        "totalNetHoursWorked": 8.5,
        "expectedTotalHours": 189.0,
        "expectedDailyHours": 9.0,
        "completedDays": 1,
        "expectedWorkingDays": 21,
        "totalRecords": 2,
    }
    assert [row["status"] for row in data["attendanceRecords"]] == ["on_leave", "punched_out"]
    assert data["attendanceRecords"][1]["record"]["punchIn"] == "09:00"
    assert data["attendanceRecords"][1]["totalLunchMinutes"] == 30
    assert data["holidays"] == [{"id": 1, "date": "2026-06-15", "name": "Founders Day"}]
    assert data["staff"]["profile"]["working_days"][0] == "Monday"
    assert data["range"] == {"start": "2026-06-01", "end": "2026-06-30"}


def test_report_is_admin_only(report_service):
    with pytest.raises(AuthorizationError):
        report_service.build_staff_month(current_role=Role.STAFF, staff_id=2, month="2026-06")


def test_unknown_staff(report_service):
    with pytest.raises(NotFoundError):
        report_service.build_staff_month(current_role=Role.ADMIN, staff_id=404, month="2026-06")
