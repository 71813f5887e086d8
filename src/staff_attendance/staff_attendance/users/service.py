from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    require_non_empty,
    require_non_negative_number,
    require_office_hours,
    require_positive_int,
    require_working_days,
)
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import StaffProfile, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login.

    Controllers rebuild one per request and pass it to services explicitly.
    """

    user_id: int
    email: str
    role: Role
    full_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class StaffMember:
    """Login account plus work settings, as the admin screens show them."""

    user: User
    profile: Optional[StaffProfile]


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "Email").lower()
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("failed login for %s", email)
            raise AuthenticationError("Invalid email or password")

        profile = self._users.get_profile(user.user_id)
        return SessionUser(
            user_id=user.user_id,
            email=user.email,
            role=user.role,
            full_name=profile.full_name if profile else None,
        )


class StaffDirectory:
    """Use case: staff profiles (read for everyone, managed by admins)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_profile(self, user_id: int) -> StaffProfile:
        profile = self._users.get_profile(int(user_id))
        if not profile:
            raise NotFoundError("Staff profile not found")
        return profile

    def list_staff(self, *, current_role: Role) -> Sequence[StaffProfile]:
        self._require_admin(current_role)
        return self._users.list_staff()

    def _require_admin(self, current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

    def _require_email_free(self, email: str, *, owner_id: Optional[int] = None) -> None:
        existing = self._users.get_by_email(email)
        if existing and existing.user_id != owner_id:
            raise ValidationError("User with this email already exists")

    def _load_staff(self, staff_id: Any) -> StaffMember:
        user = self._users.get_by_id(require_positive_int(staff_id, "Staff id"))
        if not user or user.role != Role.STAFF:
            raise NotFoundError("Staff not found")
        return StaffMember(user=user, profile=self._users.get_profile(user.user_id))

    def get_staff(self, *, current_role: Role, staff_id: Any) -> StaffMember:
        self._require_admin(current_role)
        return self._load_staff(staff_id)

    def create_staff(
        self,
        *,
        current_role: Role,
        email: str,
        password: str,
        full_name: str,
        salary: Any,
        working_days: Any,
        office_time_in: str,
        office_time_out: str,
    ) -> StaffMember:
        self._require_admin(current_role)

        email = require_non_empty(email, "Email").lower()
        if not password:
            raise ValidationError("Password is required")
        time_in, time_out = require_office_hours(office_time_in, office_time_out)
        profile = StaffProfile(
            user_id=0,
            full_name=require_non_empty(full_name, "Full name"),
            working_days=require_working_days(working_days),
            office_time_in=time_in,
            office_time_out=time_out,
            salary=require_non_negative_number(salary, "Salary"),
        )
        self._require_email_free(email)

        user_id = self._users.create_staff(
            email=email,
            password_hash=generate_password_hash(password),
            profile=profile,
        )
        logger.info("staff created id=%s email=%s", user_id, email)
        return self._load_staff(user_id)

    def update_staff(
        self,
        *,
        current_role: Role,
        staff_id: Any,
        email: Optional[str] = None,
        password: Optional[str] = None,
        full_name: Optional[str] = None,
        salary: Any = None,
        working_days: Any = None,
        office_time_in: Optional[str] = None,
        office_time_out: Optional[str] = None,
    ) -> StaffMember:
        """Partial update: only the fields passed (not ``None``/empty) change."""
        self._require_admin(current_role)
        member = self._load_staff(staff_id)
        user_id = member.user.user_id

        new_email = email.strip().lower() if email and email.strip() else None
        if new_email:
            self._require_email_free(new_email, owner_id=user_id)
        password_hash = generate_password_hash(password) if password else None
        if new_email or password_hash:
            self._users.update_user(user_id, email=new_email, password_hash=password_hash)

        profile = member.profile
        if profile is not None:
            changes: dict[str, Any] = {}
            if full_name:
                changes["full_name"] = require_non_empty(full_name, "Full name")
            if salary not in (None, ""):
                changes["salary"] = require_non_negative_number(salary, "Salary")
            if working_days is not None:
                changes["working_days"] = require_working_days(working_days)
            if office_time_in or office_time_out:
                time_in, time_out = require_office_hours(
                    office_time_in or profile.office_time_in,
                    office_time_out or profile.office_time_out,
                )
                changes["office_time_in"], changes["office_time_out"] = time_in, time_out
            if changes:
                self._users.update_profile(replace(profile, **changes))

        logger.info("staff updated id=%s", user_id)
        return self._load_staff(user_id)

    def delete_staff(self, *, current_role: Role, staff_id: Any) -> None:
        self._require_admin(current_role)
        member = self._load_staff(staff_id)
        if not self._users.delete_user(member.user.user_id):
            raise NotFoundError("Staff not found")
        logger.info("staff deleted id=%s email=%s", member.user.user_id, member.user.email)
