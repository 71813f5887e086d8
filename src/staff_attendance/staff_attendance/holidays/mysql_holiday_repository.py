from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository


def _from_row(r: Dict[str, Any]) -> Holiday:
    return Holiday(holiday_id=int(r["holiday_id"]), holiday_date=r["holiday_date"], name=str(r["name"]))


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_date(self, holiday_date: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_id, holiday_date, name FROM holidays WHERE holiday_date=%s",
                (holiday_date,),
            )
            r = fetchone(cur)
            return _from_row(r) if r else None

    def list_range(self, *, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, holiday_date, name
                FROM holidays
                WHERE holiday_date BETWEEN %s AND %s
                ORDER BY holiday_date ASC
                """,
                (start, end),
            )
            return [_from_row(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT holiday_id, holiday_date, name FROM holidays ORDER BY holiday_date ASC")
            return [_from_row(r) for r in fetchall(cur)]

    def create(self, *, holiday_date: date, name: str) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("INSERT INTO holidays(holiday_date, name) VALUES(%s,%s)", (holiday_date, name))
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno != errorcode.ER_DUP_ENTRY:
                raise
            raise ValidationError("A holiday already exists on this date")

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
