from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, username, email, instansi, role, is_active"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        username=row["username"],
        role=Role(row["role"]),
        email=row.get("email"),
        instansi=row.get("instansi"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_by_role(self, role: Role, *, active_only: bool = True) -> Sequence[User]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE role=%s"
        if active_only:
            sql += " AND is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY full_name ASC", (role.value,))
            return [_to_user(r) for r in fetchall(cur)]

    def names_by_id(self, user_ids: Iterable[int]) -> Mapping[int, str]:
        ids = sorted({int(u) for u in user_ids})
        if not ids:
            return {}
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT user_id, full_name FROM users WHERE user_id IN ({placeholders})", tuple(ids))
            return {int(r["user_id"]): r["full_name"] for r in fetchall(cur)}
