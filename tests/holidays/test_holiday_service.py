from __future__ import annotations

from datetime import date

import pytest

from src.staff_attendance.staff_attendance.core.enums import Role
from src.staff_attendance.staff_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.staff_attendance.staff_attendance.holidays.service import HolidayService


def test_admin_creates_holiday(holidays_repo):
    svc = HolidayService(holidays_repo)

    holiday_id = svc.create(current_role=Role.ADMIN, holiday_date=date(2026, 8, 15), name=" Independence Day ")

    assert holidays_repo.get_for_date(date(2026, 8, 15)).name == "Independence Day"
    assert holiday_id == 1


def test_staff_cannot_create_holiday(holidays_repo):
    svc = HolidayService(holidays_repo)

    with pytest.raises(AuthorizationError):
        svc.create(current_role=Role.STAFF, holiday_date=date(2026, 8, 15), name="Independence Day")


def test_one_holiday_per_date(holidays_repo):
    svc = HolidayService(holidays_repo)
    svc.create(current_role=Role.ADMIN, holiday_date=date(2026, 8, 15), name="Independence Day")

    with pytest.raises(ValidationError):
        svc.create(current_role=Role.ADMIN, holiday_date=date(2026, 8, 15), name="Again")


def test_name_is_required(holidays_repo):
    with pytest.raises(ValidationError):
        HolidayService(holidays_repo).create(current_role=Role.ADMIN, holiday_date=date(2026, 8, 15), name="  ")


def test_list_for_month_uses_month_bounds(holidays_repo):
    svc = HolidayService(holidays_repo)
    svc.create(current_role=Role.ADMIN, holiday_date=date(2026, 2, 28), name="A")
    svc.create(current_role=Role.ADMIN, holiday_date=date(2026, 3, 1), name="B")

    items = svc.list_for_month("2026-02")

    assert [h.name for h in items] == ["A"]
    assert holidays_repo.last_range == (date(2026, 2, 1), date(2026, 2, 28))


def test_delete(holidays_repo):
    svc = HolidayService(holidays_repo)
    holiday_id = svc.create(current_role=Role.ADMIN, holiday_date=date(2026, 8, 15), name="Independence Day")

    svc.delete(current_role=Role.ADMIN, holiday_id=holiday_id)

    with pytest.raises(NotFoundError):
        svc.delete(current_role=Role.ADMIN, holiday_id=holiday_id)
