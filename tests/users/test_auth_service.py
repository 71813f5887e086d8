from __future__ import annotations

import pytest

from src.staff_attendance.staff_attendance.core.enums import Role
from src.staff_attendance.staff_attendance.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.staff_attendance.staff_attendance.users.service import AuthService, StaffDirectory


def test_authenticate_staff(users_repo):
    user = AuthService(users_repo).authenticate("Staff@Example.com", "staff123")

    assert user.user_id == 2
    assert user.role == Role.STAFF
    assert user.full_name == "John Doe"
    assert not user.is_admin


def test_authenticate_admin_has_no_profile(users_repo):
    user = AuthService(users_repo).authenticate("admin@example.com", "admin123")

    assert user.is_admin
    assert user.full_name is None


@pytest.mark.parametrize(
    "email, password",
    [("staff@example.com", "wrong"), ("nobody@example.com", "staff123"), ("staff@example.com", "")],
)
def test_authenticate_rejects_bad_credentials(users_repo, email, password):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        AuthService(users_repo).authenticate(email, password)


def test_authenticate_requires_email(users_repo):
    with pytest.raises(ValidationError):
        AuthService(users_repo).authenticate("  ", "x")


def test_staff_directory(users_repo):
    directory = StaffDirectory(users_repo)

    assert [p.full_name for p in directory.list_staff(current_role=Role.ADMIN)] == ["John Doe", "Jane Roe"]
    assert directory.get_profile(2).office_time_in == "09:00"
    with pytest.raises(AuthorizationError):
        directory.list_staff(current_role=Role.STAFF)
    with pytest.raises(NotFoundError):
        directory.get_profile(1)
