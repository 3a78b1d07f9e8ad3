from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EvaluationStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_violation_as_conflict
from .model import EvaluationDraft, PerformanceEvaluation
from .repository import PerformanceRepository

FINALIZED = "Penilaian sudah difinalisasi dan tidak bisa diubah."

_SELECT = """
    SELECT e.evaluation_id, e.user_id, e.month, e.year, e.absen, e.kuantitas, e.kualitas,
           e.laporan, e.hasil, e.status, e.updated_at, u.full_name
    FROM performance_evaluations e
    LEFT JOIN users u ON u.user_id = e.user_id
"""


def _to_evaluation(r: dict) -> PerformanceEvaluation:
    return PerformanceEvaluation(
        evaluation_id=int(r["evaluation_id"]),
        user_id=int(r["user_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        absen=float(r["absen"]),
        kuantitas=float(r["kuantitas"]),
        kualitas=float(r["kualitas"]),
        laporan=bool(r["laporan"]),
        hasil=float(r["hasil"]),
        status=EvaluationStatus(r["status"]),
        user_name=r.get("full_name"),
        updated_at=r.get("updated_at"),
    )


class MySQLPerformanceRepository(PerformanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, evaluation_id: int) -> Optional[PerformanceEvaluation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.evaluation_id=%s", (int(evaluation_id),))
            r = fetchone(cur)
            return _to_evaluation(r) if r else None

    def save_unless_final(self, draft: EvaluationDraft) -> PerformanceEvaluation:
        values = (
            draft.absen,
            draft.kuantitas,
            draft.kualitas,
            1 if draft.laporan else 0,
            draft.hasil,
            draft.status.value,
        )
        with unique_violation_as_conflict("Penilaian untuk user ini di bulan tersebut sudah ada."):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT evaluation_id, status FROM performance_evaluations
                    WHERE user_id=%s AND month=%s AND year=%s
                    FOR UPDATE
                    """,
                    (int(draft.user_id), int(draft.month), int(draft.year)),
                )
                existing = fetchone(cur)

                if existing:
                    if existing["status"] == EvaluationStatus.FINAL.value:
                        raise ConflictError(FINALIZED)
                    evaluation_id = int(existing["evaluation_id"])
                    cur.execute(
                        """
                        UPDATE performance_evaluations
                        SET absen=%s, kuantitas=%s, kualitas=%s, laporan=%s, hasil=%s, status=%s
                        WHERE evaluation_id=%s
                        """,
                        values + (evaluation_id,),
                    )
                else:
                    cur.execute(
                        """
                        INSERT INTO performance_evaluations(
                            user_id, month, year, absen, kuantitas, kualitas, laporan, hasil, status
                        )
                        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                        """,
                        (int(draft.user_id), int(draft.month), int(draft.year)) + values,
                    )
                    evaluation_id = int(cur.lastrowid)

                cur.execute(_SELECT + " WHERE e.evaluation_id=%s", (evaluation_id,))
                return _to_evaluation(fetchone(cur))

    def list_for_period(
        self, month: int, year: int, *, status: Optional[EvaluationStatus] = None
    ) -> Sequence[PerformanceEvaluation]:
        sql = _SELECT + " WHERE e.month=%s AND e.year=%s"
        params: list[object] = [int(month), int(year)]
        if status is not None:
            sql += " AND e.status=%s"
            params.append(status.value)
        sql += " ORDER BY e.hasil DESC, u.full_name ASC, e.user_id ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_evaluation(r) for r in fetchall(cur)]

    def set_status(self, evaluation_id: int, status: EvaluationStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE performance_evaluations SET status=%s WHERE evaluation_id=%s",
                (status.value, int(evaluation_id)),
            )
            return cur.rowcount > 0

    def delete_draft(self, evaluation_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM performance_evaluations WHERE evaluation_id=%s AND status=%s",
                (int(evaluation_id), EvaluationStatus.DRAFT.value),
            )
            return cur.rowcount > 0

    def reset_finals_for_period(self, month: int, year: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE performance_evaluations SET status=%s
                WHERE month=%s AND year=%s AND status=%s
                """,
                (EvaluationStatus.DRAFT.value, int(month), int(year), EvaluationStatus.FINAL.value),
            )
            return int(cur.rowcount)
