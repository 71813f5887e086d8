from __future__ import annotations

import json
from typing import Any, Dict, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float
from .model import StaffProfile, User
from .repository import UserRepository


def _user_from_row(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
    )


def _profile_from_row(row: Dict[str, Any]) -> StaffProfile:
    # working_days is a JSON array of weekday names, e.g. ["Monday", "Tuesday"].
    raw_days = row.get("working_days") or "[]"
    return StaffProfile(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        working_days=tuple(json.loads(raw_days)),
        office_time_in=row.get("office_time_in"),
        office_time_out=row.get("office_time_out"),
        salary=to_float(row.get("salary")),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, email, password_hash, role, is_active
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            return _user_from_row(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, email, password_hash, role, is_active
                FROM users
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            return _user_from_row(row) if row else None

    def get_profile(self, user_id: int) -> Optional[StaffProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, salary, working_days, office_time_in, office_time_out
                FROM staff_profiles
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            return _profile_from_row(row) if row else None

    def list_staff(self) -> Sequence[StaffProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.user_id, p.full_name, p.salary, p.working_days, p.office_time_in, p.office_time_out
                FROM staff_profiles p
                JOIN users u ON u.user_id = p.user_id
                WHERE u.role=%s AND u.is_active=1
                ORDER BY p.full_name ASC
                """,
                (Role.STAFF.value,),
            )
            return [_profile_from_row(r) for r in fetchall(cur)]

    def create_staff(self, *, email: str, password_hash: str, profile: StaffProfile) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO users (email, password_hash, role) VALUES (%s, %s, %s)",
                    (email, password_hash, Role.STAFF.value),
                )
                user_id = int(cur.lastrowid)
                cur.execute(
                    """
                    INSERT INTO staff_profiles (user_id, full_name, salary, working_days, office_time_in, office_time_out)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (
                        user_id,
                        profile.full_name,
                        profile.salary,
                        json.dumps(list(profile.working_days)),
                        profile.office_time_in,
                        profile.office_time_out,
                    ),
                )
                return user_id
        except mysql.connector.IntegrityError as e:
            if e.errno != errorcode.ER_DUP_ENTRY:
                raise
            raise ValidationError("User with this email already exists")

    def update_user(self, user_id: int, *, email: Optional[str] = None, password_hash: Optional[str] = None) -> None:
        sets = []
        params: list[Any] = []
        if email is not None:
            sets.append("email=%s")
            params.append(email)
        if password_hash is not None:
            sets.append("password_hash=%s")
            params.append(password_hash)
        if not sets:
            return

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE users SET {', '.join(sets)} WHERE user_id=%s", (*params, int(user_id)))
        except mysql.connector.IntegrityError as e:
            if e.errno != errorcode.ER_DUP_ENTRY:
                raise
            raise ValidationError("User with this email already exists")

    def update_profile(self, profile: StaffProfile) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE staff_profiles
                SET full_name=%s, salary=%s, working_days=%s, office_time_in=%s, office_time_out=%s
                WHERE user_id=%s
                """,
                (
                    profile.full_name,
                    profile.salary,
                    json.dumps(list(profile.working_days)),
                    profile.office_time_in,
                    profile.office_time_out,
                    int(profile.user_id),
                ),
            )

    def delete_user(self, user_id: int) -> bool:
        # Profile, attendance records and lunch breaks go with it (ON DELETE CASCADE).
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
