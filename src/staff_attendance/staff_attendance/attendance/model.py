from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import LEAVE_MARKER
from ..core.enums import WorkNoteKind


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class WorkNote:
    """Tagged view of the free-text work-done field.

    On disk a leave day is a note starting with ``ON_LEAVE`` (optionally
    ``ON_LEAVE: <reason>``); everything else is a regular work-done note.
    """

    kind: WorkNoteKind
    text: str

    @classmethod
    def parse(cls, work_done: Optional[str]) -> Optional["WorkNote"]:
        if work_done is None:
            return None
        if work_done.startswith(LEAVE_MARKER):
            reason = work_done[len(LEAVE_MARKER):].lstrip(":").strip()
            return cls(kind=WorkNoteKind.LEAVE, text=reason)
        return cls(kind=WorkNoteKind.WORKED, text=work_done)

    @staticmethod
    def leave(reason: str) -> str:
        """Encode a leave reason for storage."""
        reason = (reason or "").strip()
        return f"{LEAVE_MARKER}: {reason}" if reason else LEAVE_MARKER

    @property
    def is_leave(self) -> bool:
        return self.kind == WorkNoteKind.LEAVE


@dataclass(frozen=True)
class LunchBreak:
    lunch_id: int
    attendance_id: int
    lunch_start_time: datetime
    lunch_end_time: Optional[datetime] = None
    duration: Optional[int] = None  # minutes, filled when the break ends
    start_location: Optional[GeoPoint] = None
    end_location: Optional[GeoPoint] = None

    @property
    def is_active(self) -> bool:
        return self.lunch_end_time is None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one staff member's attendance for one calendar day.

    ``work_date`` is the office-timezone date; timestamps are aware UTC datetimes.
    """

    attendance_id: int
    user_id: int
    work_date: date
    punch_in_time: Optional[datetime] = None
    punch_out_time: Optional[datetime] = None
    punch_in_location: Optional[GeoPoint] = None
    punch_out_location: Optional[GeoPoint] = None
    working_hours: Optional[float] = None
    work_done: Optional[str] = None
    lunch_breaks: tuple[LunchBreak, ...] = ()

    @property
    def work_note(self) -> Optional[WorkNote]:
        return WorkNote.parse(self.work_done)

    @property
    def is_leave(self) -> bool:
        note = self.work_note
        return bool(note and note.is_leave)

    @property
    def is_completed(self) -> bool:
        return self.punch_in_time is not None and self.punch_out_time is not None

    @property
    def active_lunch_break(self) -> Optional[LunchBreak]:
        for lb in self.lunch_breaks:
            if lb.is_active:
                return lb
        return None
