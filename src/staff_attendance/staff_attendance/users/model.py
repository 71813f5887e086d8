from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: login account.

    Note: Plain data object (no DB access code here).
    """

    user_id: int
    email: str
    password_hash: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class StaffProfile:
    """Read-only work settings of a staff member."""

    user_id: int
    full_name: str
    working_days: tuple[str, ...]
    office_time_in: Optional[str] = None  # HH:MM, office timezone
    office_time_out: Optional[str] = None
    salary: Optional[float] = None
