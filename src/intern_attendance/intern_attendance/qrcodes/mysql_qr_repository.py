from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_violation_as_conflict
from .model import QRToken, QRTokenSummary
from .repository import QRTokenRepository

_SELECT = """
    SELECT t.token_id, t.token_date, t.token_value, t.is_active, t.created_by, t.created_at,
           GROUP_CONCAT(s.user_id) AS scanned_ids
    FROM qr_tokens t
    LEFT JOIN qr_token_scans s ON s.token_id = t.token_id
"""


def _to_token(r: dict) -> QRToken:
    raw = r.get("scanned_ids") or ""
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    return QRToken(
        token_id=int(r["token_id"]),
        token_date=r["token_date"],
        value=r["token_value"],
        active=bool(r["is_active"]),
        created_by=int(r["created_by"]),
        scanned_by=frozenset(int(x) for x in str(raw).split(",") if x),
        created_at=r.get("created_at"),
    )


class MySQLQRTokenRepository(QRTokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def replace_active_for_date(self, *, token_date: date, value: str, created_by: int) -> QRToken:
        with unique_violation_as_conflict("QR Code untuk hari ini sedang dibuat oleh admin lain. Coba lagi."):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "UPDATE qr_tokens SET is_active=0 WHERE token_date=%s AND is_active=1",
                    (token_date,),
                )
                cur.execute(
                    "INSERT INTO qr_tokens(token_date, token_value, is_active, created_by) VALUES(%s,%s,1,%s)",
                    (token_date, value, int(created_by)),
                )
                token_id = int(cur.lastrowid)
                cur.execute(_SELECT + " WHERE t.token_id=%s GROUP BY t.token_id", (token_id,))
                return _to_token(fetchone(cur))

    def find_by_value(self, value: str) -> Optional[QRToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.token_value=%s GROUP BY t.token_id", (value,))
            r = fetchone(cur)
            return _to_token(r) if r else None

    def get_active_for_date(self, token_date: date) -> Optional[QRToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.token_date=%s AND t.is_active=1 GROUP BY t.token_id", (token_date,))
            r = fetchone(cur)
            return _to_token(r) if r else None

    def add_scan(self, *, token_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO qr_token_scans(token_id, user_id) VALUES(%s,%s)",
                (int(token_id), int(user_id)),
            )
            return cur.rowcount > 0

    def list_since(self, since: date, *, limit: int) -> Sequence[QRTokenSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT t.token_id, t.token_date, t.is_active, t.created_at, COUNT(s.user_id) AS scanned_count
                FROM qr_tokens t
                LEFT JOIN qr_token_scans s ON s.token_id = t.token_id
                WHERE t.token_date >= %s
                GROUP BY t.token_id
                ORDER BY t.token_date DESC, t.token_id DESC
                LIMIT %s
                """,
                (since, int(limit)),
            )
            return [
                QRTokenSummary(
                    token_id=int(r["token_id"]),
                    token_date=r["token_date"],
                    scanned_count=int(r["scanned_count"] or 0),
                    active=bool(r["is_active"]),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
