from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_range
from ..common.validators import require_non_empty, require_positive_int
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list_for_month(self, month: Optional[str] = None, *, now: datetime | None = None) -> Sequence[Holiday]:
        start, end = month_range(month, now=now)
        return self._holidays.list_range(start=start, end=end)

    def list_all(self) -> Sequence[Holiday]:
        return self._holidays.list_all()

    def create(self, *, current_role: Role, holiday_date: date, name: str) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        name = require_non_empty(name, "Holiday name")
        if self._holidays.get_for_date(holiday_date):
            raise ValidationError("A holiday already exists on this date")

        holiday_id = self._holidays.create(holiday_date=holiday_date, name=name)
        logger.info("holiday created id=%s date=%s name=%r", holiday_id, holiday_date, name)
        return holiday_id

    def delete(self, *, current_role: Role, holiday_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        holiday_id = require_positive_int(holiday_id, "Holiday id")
        if not self._holidays.delete(holiday_id):
            raise NotFoundError("Holiday not found")
        logger.info("holiday deleted id=%s", holiday_id)
