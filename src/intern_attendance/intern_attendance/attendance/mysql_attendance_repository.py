from __future__ import annotations

import json
from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, CheckInModality
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_violation_as_conflict
from .model import AttendanceRecord, GeoSnapshot, NewCheckIn
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date, check_in_time, check_out_time, status, modality,
    token_id, late_threshold, proof, checkout_proof, client_timestamp, checkout_timestamp,
    location_in, location_out, note
"""

ALREADY_CHECKED_IN = "Anda sudah absen hari ini."


def _dump_geo(geo: Optional[GeoSnapshot]) -> Optional[str]:
    return json.dumps(geo.to_dict()) if geo else None


def _load_geo(value) -> Optional[GeoSnapshot]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value)
    return GeoSnapshot.from_dict(value)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        modality=CheckInModality(r["modality"]) if r.get("modality") else None,
        token_id=r.get("token_id"),
        late_threshold=r.get("late_threshold"),
        proof=r.get("proof"),
        checkout_proof=r.get("checkout_proof"),
        client_timestamp=r.get("client_timestamp"),
        checkout_timestamp=r.get("checkout_timestamp"),
        location_in=_load_geo(r.get("location_in")),
        location_out=_load_geo(r.get("location_out")),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_checkin(self, new: NewCheckIn) -> AttendanceRecord:
        with unique_violation_as_conflict(ALREADY_CHECKED_IN):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, work_date, check_in_time, status, modality, token_id,
                        late_threshold, proof, client_timestamp, location_in, note
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(new.user_id),
                        new.work_date,
                        new.check_in_time,
                        new.status.value,
                        new.modality.value,
                        new.token_id,
                        new.late_threshold,
                        new.proof,
                        new.client_timestamp,
                        _dump_geo(new.location),
                        new.note,
                    ),
                )
                attendance_id = int(cur.lastrowid)
                cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (attendance_id,))
                return _to_record(fetchone(cur))

    def complete_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: str,
        checkout_timestamp: Optional[str] = None,
        checkout_proof: Optional[str] = None,
        location: Optional[GeoSnapshot] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, checkout_timestamp=%s, checkout_proof=%s, location_out=%s
                WHERE attendance_id=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (check_out_time, checkout_timestamp, checkout_proof, _dump_geo(location), int(attendance_id)),
            )
            return cur.rowcount > 0

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        check_in_time: Optional[str],
        check_out_time: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, check_in_time=%s, check_out_time=%s
                WHERE attendance_id=%s
                """,
                (status.value, check_in_time, check_out_time, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(user_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_recent(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 50,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if start is not None:
            clauses.append("work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("work_date <= %s")
            params.append(end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records {where} ORDER BY work_date DESC, attendance_id DESC LIMIT %s",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE work_date=%s ORDER BY check_in_time ASC",
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]
