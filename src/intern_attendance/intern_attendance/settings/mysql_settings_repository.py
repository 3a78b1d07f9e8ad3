from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import LateThresholdSetting
from .repository import LateThresholdRepository


def _to_setting(row: dict) -> LateThresholdSetting:
    return LateThresholdSetting(
        version=int(row["version"]),
        threshold=row["threshold"],
        reason=row.get("reason"),
        changed_by=row.get("changed_by"),
        created_at=row.get("created_at"),
    )


class MySQLLateThresholdRepository(LateThresholdRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_latest(self) -> Optional[LateThresholdSetting]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT version, threshold, reason, changed_by, created_at
                FROM late_threshold_settings
                ORDER BY version DESC
                LIMIT 1
                """
            )
            row = fetchone(cur)
            return _to_setting(row) if row else None

    def append(self, *, threshold: str, reason: Optional[str], changed_by: Optional[int]) -> LateThresholdSetting:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO late_threshold_settings(threshold, reason, changed_by) VALUES(%s,%s,%s)",
                (threshold, reason, changed_by),
            )
            version = int(cur.lastrowid)
            cur.execute(
                "SELECT version, threshold, reason, changed_by, created_at FROM late_threshold_settings WHERE version=%s",
                (version,),
            )
            return _to_setting(fetchone(cur))
