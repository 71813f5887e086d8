from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def get_for_date(self, holiday_date: date) -> Optional[Holiday]:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date) -> Sequence[Holiday]:
        """Holidays with ``start <= holiday_date <= end``, oldest first."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, *, holiday_date: date, name: str) -> int:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError
