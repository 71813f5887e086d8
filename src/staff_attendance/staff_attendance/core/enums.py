from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization checks."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"


class AttendanceStatus(str, Enum):
    """Status of a staff member for one calendar day (derived, never stored)."""

    NOT_PUNCHED_IN = "not_punched_in"
    ON_LEAVE = "on_leave"
    PUNCHED_OUT = "punched_out"
    ON_LUNCH_BREAK = "on_lunch_break"
    PUNCHED_IN = "punched_in"


class WorkNoteKind(str, Enum):
    LEAVE = "leave"
    WORKED = "worked"
