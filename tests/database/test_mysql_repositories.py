from __future__ import annotations

from datetime import date

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from src.intern_attendance.intern_attendance.attendance.model import NewCheckIn
from src.intern_attendance.intern_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.intern_attendance.intern_attendance.core.enums import AttendanceStatus, CheckInModality, EvaluationStatus
from src.intern_attendance.intern_attendance.core.exceptions import ConflictError
from src.intern_attendance.intern_attendance.database.bootstrap import _iter_sql_statements
from src.intern_attendance.intern_attendance.performance.model import EvaluationDraft
from src.intern_attendance.intern_attendance.performance.mysql_performance_repository import (
    MySQLPerformanceRepository,
)
from src.intern_attendance.intern_attendance.qrcodes.mysql_qr_repository import MySQLQRTokenRepository


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0
        self.lastrowid = None
        self._result = []

    def execute(self, sql, params=()):
        self._conn.statements.append((" ".join(sql.split()), params))
        handler = self._conn.on_execute
        outcome = handler(sql, params) if handler else None
        if isinstance(outcome, Exception):
            raise outcome
        self._result = outcome or []
        self.rowcount = self._conn.rowcount
        self.lastrowid = self._conn.lastrowid

    def fetchone(self):
        return self._result[0] if self._result else None

    def fetchall(self):
        return list(self._result)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, on_execute=None, rowcount=1, lastrowid=None):
        self.on_execute = on_execute
        self.rowcount = rowcount
        self.lastrowid = lastrowid
        self.statements = []
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, conn: FakeConnection):
        self._conn = conn

    def connect(self):
        return self._conn


def _duplicate(*_):
    return IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)


def _new_checkin() -> NewCheckIn:
    return NewCheckIn(
        user_id=1,
        work_date=date(2025, 1, 6),
        check_in_time="07:55",
        status=AttendanceStatus.HADIR,
        modality=CheckInModality.QR,
        late_threshold="08:00",
        token_id=5,
    )


def test_duplicate_checkin_becomes_conflict_and_rolls_back():
    conn = FakeConnection(on_execute=lambda sql, p: _duplicate() if "INSERT" in sql else None)

    with pytest.raises(ConflictError, match="sudah absen"):
        MySQLAttendanceRepository(FakeConnFactory(conn)).create_checkin(_new_checkin())
    assert conn.rolled_back
    assert not conn.committed


def test_other_integrity_errors_propagate():
    conn = FakeConnection(on_execute=lambda sql, p: IntegrityError(msg="fk", errno=errorcode.ER_NO_REFERENCED_ROW_2))

    with pytest.raises(IntegrityError):
        MySQLAttendanceRepository(FakeConnFactory(conn)).create_checkin(_new_checkin())


def test_checkout_update_is_conditional_on_open_record():
    conn = FakeConnection(rowcount=0)

    changed = MySQLAttendanceRepository(FakeConnFactory(conn)).complete_checkout(
        attendance_id=7, check_out_time="17:00"
    )

    assert changed is False
    sql, params = conn.statements[0]
    assert "check_out_time IS NULL" in sql
    assert params[-1] == 7


def test_token_generation_deactivates_then_inserts_in_one_transaction():
    row = {
        "token_id": 3, "token_date": date(2025, 1, 6), "token_value": "a" * 32,
        "is_active": 1, "created_by": 9, "created_at": None, "scanned_ids": None,
    }
    conn = FakeConnection(on_execute=lambda sql, p: [row] if "SELECT" in sql else None, lastrowid=3)
    repo = MySQLQRTokenRepository(FakeConnFactory(conn))

    token = repo.replace_active_for_date(token_date=date(2025, 1, 6), value="a" * 32, created_by=9)

    kinds = [sql.split()[0] for sql, _ in conn.statements]
    assert kinds == ["UPDATE", "INSERT", "SELECT"]
    assert conn.committed
    assert token.active and token.scanned_by == frozenset()


def test_concurrent_token_generation_surfaces_as_conflict():
    conn = FakeConnection(on_execute=lambda sql, p: _duplicate() if "INSERT" in sql else None)

    with pytest.raises(ConflictError):
        MySQLQRTokenRepository(FakeConnFactory(conn)).replace_active_for_date(
            token_date=date(2025, 1, 6), value="b" * 32, created_by=9
        )
    assert conn.rolled_back


def test_saving_over_final_row_conflicts_without_writing():
    conn = FakeConnection(
        on_execute=lambda sql, p: [{"evaluation_id": 4, "status": "Final"}] if "FOR UPDATE" in sql else None
    )
    draft = EvaluationDraft(
        user_id=1, month=1, year=2025, absen=30, kuantitas=20, kualitas=20,
        laporan=False, hasil=70, status=EvaluationStatus.DRAFT,
    )

    with pytest.raises(ConflictError, match="difinalisasi"):
        MySQLPerformanceRepository(FakeConnFactory(conn)).save_unless_final(draft)
    assert len(conn.statements) == 1
    assert conn.rolled_back


def test_schema_splitter_skips_comments_and_keeps_statements():
    sql = "-- users\nCREATE TABLE a (id INT);\n\n-- tokens\nCREATE TABLE b (id INT);\n"

    assert [s.split()[2] for s in _iter_sql_statements(sql)] == ["a", "b"]
