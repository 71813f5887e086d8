from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from ..attendance.engine import Statistics, compute_expected_statistics, derive_daily_status
from ..attendance.repository import AttendanceRepository
from ..attendance.service import status_to_dict
from ..common.datetime_utils import date_key, local_date, month_range, now_utc
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..holidays.repository import HolidayRepository
from ..users.repository import UserRepository


@dataclass(frozen=True)
class MonthReport:
    staff: dict
    statistics: Statistics
    rows: list[dict]
    holidays: list[dict]
    start: str
    end: str

    def to_dict(self) -> dict:
        return {
            "staff": self.staff,
            "statistics": {
                "totalHoursWorked": self.statistics.total_hours_worked,
                "totalNetHoursWorked": self.statistics.total_net_hours_worked,
                "expectedTotalHours": self.statistics.expected_total_hours,
                "expectedDailyHours": self.statistics.expected_daily_hours,
                "completedDays": self.statistics.completed_days,
                "expectedWorkingDays": self.statistics.expected_working_days,
                "totalRecords": self.statistics.total_records,
            },
            "attendanceRecords": self.rows,
            "holidays": self.holidays,
            "range": {"start": self.start, "end": self.end},
        }


class AttendanceReportService:
    """Admin dashboard: one staff member's month, expected vs actual."""

    def __init__(self, attendance: AttendanceRepository, users: UserRepository, holidays: HolidayRepository):
        self._attendance = attendance
        self._users = users
        self._holidays = holidays

    def build_staff_month(
        self,
        *,
        current_role: Role,
        staff_id: int,
        month: Optional[str] = None,
        now: datetime | None = None,
    ) -> MonthReport:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        user = self._users.get_by_id(int(staff_id))
        if not user:
            raise NotFoundError("Staff not found")
        profile = self._users.get_profile(user.user_id)

        now = now or now_utc()
        today = local_date(now)
        start, end = month_range(month, now=now)

        records = self._attendance.list_range(user_id=user.user_id, start=start, end=end)
        holidays = self._holidays.list_range(start=start, end=end)
        stats = compute_expected_statistics(records, profile, holidays, start, end)

        rows = [status_to_dict(derive_daily_status(r, is_today=(r.work_date == today))) for r in records]

        staff = {"id": user.user_id, "email": user.email, "role": user.role.value, "profile": None}
        if profile:
            staff["profile"] = asdict(profile)
            staff["profile"]["working_days"] = list(profile.working_days)

        return MonthReport(
            staff=staff,
            statistics=stats,
            rows=rows,
            holidays=[{"id": h.holiday_id, "date": date_key(h.holiday_date), "name": h.name} for h in holidays],
            start=date_key(start),
            end=date_key(end),
        )
