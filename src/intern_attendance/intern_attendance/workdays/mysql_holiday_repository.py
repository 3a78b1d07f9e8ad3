from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import HolidayResult
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_dates_between(self, start: date, end: date) -> Sequence[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_date AS d FROM holidays
                WHERE holiday_date BETWEEN %s AND %s
                UNION
                SELECT DISTINCT work_date AS d FROM attendance_records
                WHERE work_date BETWEEN %s AND %s AND status=%s
                ORDER BY d
                """,
                (start, end, start, end, AttendanceStatus.HARI_LIBUR.value),
            )
            return [r["d"] for r in fetchall(cur)]

    def declare(
        self,
        *,
        holiday_date: date,
        user_ids: Sequence[int],
        created_by: Optional[int],
        description: Optional[str] = None,
    ) -> HolidayResult:
        created = 0
        updated = 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(holiday_date, description, created_by)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE description=VALUES(description)
                """,
                (holiday_date, description, created_by),
            )
            for user_id in user_ids:
                cur.execute(
                    """
                    INSERT INTO attendance_records(user_id, work_date, check_in_time, status)
                    VALUES(%s,%s,NULL,%s)
                    ON DUPLICATE KEY UPDATE status=VALUES(status), check_in_time=NULL
                    """,
                    (int(user_id), holiday_date, AttendanceStatus.HARI_LIBUR.value),
                )
                # MySQL reports 1 for a fresh insert, 2 (or 0 when unchanged) for an update
                if cur.rowcount == 1:
                    created += 1
                else:
                    updated += 1
        return HolidayResult(created=created, updated=updated, total=len(user_ids))

    def cancel(self, *, holiday_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_date=%s", (holiday_date,))
            cur.execute(
                "DELETE FROM attendance_records WHERE work_date=%s AND status=%s",
                (holiday_date, AttendanceStatus.HARI_LIBUR.value),
            )
            return int(cur.rowcount)
