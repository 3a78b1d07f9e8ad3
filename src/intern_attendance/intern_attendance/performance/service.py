from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds
from ..common.validators import require_month_year, require_number_in_range
from ..core.constants import ABSEN_MAX, KUALITAS_MAX, KUANTITAS_MAX
from ..core.enums import EvaluationStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from ..workdays.service import WorkingDayService
from .calculator.base import ScoreCalculator
from .calculator.standard_calculator import StandardScoreCalculator
from .model import EvaluationDraft, PerformanceCalculation, PerformanceEvaluation
from .repository import PerformanceRepository

logger = logging.getLogger(__name__)


def _require_admin(role: Role) -> None:
    if not role.is_admin:
        raise AuthorizationError("Akses ditolak. Hanya admin.")


class PerformanceService:
    """Monthly scoring: attendance ratio to absen, plus admin-entered components."""

    def __init__(
        self,
        evaluations: PerformanceRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
        workdays: WorkingDayService,
        *,
        calculator: Optional[ScoreCalculator] = None,
    ):
        self._evaluations = evaluations
        self._attendance = attendance
        self._users = users
        self._workdays = workdays
        self._calculator = calculator or StandardScoreCalculator()

    def _require_evaluation(self, evaluation_id: int) -> PerformanceEvaluation:
        evaluation = self._evaluations.get_by_id(int(evaluation_id))
        if not evaluation:
            raise NotFoundError("Penilaian tidak ditemukan.")
        return evaluation

    def calculate(self, *, current_role: Role, user_id: int, month: Any, year: Any) -> PerformanceCalculation:
        _require_admin(current_role)
        month, year = require_month_year(month, year)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User tidak ditemukan.")

        working = set(self._workdays.working_days(month, year))
        start, end = month_bounds(month, year)

        total_points = 0.0
        attended_days = 0
        for record in self._attendance.list_for_user_between(int(user_id), start, end):
            if record.work_date not in working:
                continue
            points = self._calculator.points_for(record.status)
            total_points += points
            if points > 0:
                attended_days += 1

        return PerformanceCalculation(
            user_id=int(user_id),
            month=month,
            year=year,
            absen=self._calculator.absen(total_points=total_points, total_working_days=len(working)),
            attended_days=attended_days,
            total_working_days=len(working),
            total_points=round(total_points, 2),
            avg_points=round(total_points / max(attended_days, 1), 2),
            user_name=user.full_name,
        )

    def save(
        self,
        *,
        current_role: Role,
        user_id: int,
        month: Any,
        year: Any,
        kuantitas: Any = 0,
        kualitas: Any = 0,
        laporan: bool = False,
        status: Any = EvaluationStatus.DRAFT.value,
        absen: Any = None,
    ) -> PerformanceEvaluation:
        _require_admin(current_role)
        if not user_id:
            raise ValidationError("userId, bulan, dan tahun wajib diisi.")
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User tidak ditemukan.")
        month, year = require_month_year(month, year)

        kuantitas = require_number_in_range(kuantitas or 0, "Kuantitas", 0, KUANTITAS_MAX)
        kualitas = require_number_in_range(kualitas or 0, "Kualitas", 0, KUALITAS_MAX)
        try:
            new_status = EvaluationStatus(status or EvaluationStatus.DRAFT.value)
        except ValueError:
            raise ValidationError("Status penilaian harus Draft atau Final.")

        if absen is None:
            absen = self.calculate(current_role=current_role, user_id=user_id, month=month, year=year).absen
        else:
            absen = require_number_in_range(absen, "Absen", 0, ABSEN_MAX)

        laporan = bool(laporan)
        evaluation = self._evaluations.save_unless_final(
            EvaluationDraft(
                user_id=int(user_id),
                month=month,
                year=year,
                absen=absen,
                kuantitas=kuantitas,
                kualitas=kualitas,
                laporan=laporan,
                hasil=self._calculator.hasil(absen=absen, kuantitas=kuantitas, kualitas=kualitas, laporan=laporan),
                status=new_status,
            )
        )
        if evaluation.is_final:
            logger.info("Evaluation %s finalized for user %s (%s/%s)", evaluation.evaluation_id, user_id, month, year)
        return evaluation

    def reset_to_draft(self, *, current_role: Role, evaluation_id: int) -> PerformanceEvaluation:
        if current_role != Role.SUPERADMIN:
            raise AuthorizationError("Akses ditolak. Hanya superadmin.")

        evaluation = self._require_evaluation(evaluation_id)
        if not evaluation.is_final:
            return evaluation

        self._evaluations.set_status(evaluation.evaluation_id, EvaluationStatus.DRAFT)
        logger.info("Evaluation %s reset to Draft", evaluation.evaluation_id)
        return self._require_evaluation(evaluation_id)

    def list_for_period(self, *, current_role: Role, month: Any, year: Any) -> Sequence[PerformanceEvaluation]:
        _require_admin(current_role)
        month, year = require_month_year(month, year)
        return sorted(
            self._evaluations.list_for_period(month, year),
            key=lambda e: -e.hasil,
        )

    def ranking(self, *, current_role: Role, month: Any, year: Any) -> Sequence[PerformanceEvaluation]:
        _require_admin(current_role)
        month, year = require_month_year(month, year)
        finals = self._evaluations.list_for_period(month, year, status=EvaluationStatus.FINAL)
        return sorted(finals, key=lambda e: (-e.hasil, e.user_name or "", e.user_id))

    def delete_draft(self, *, current_role: Role, evaluation_id: int) -> None:
        _require_admin(current_role)
        evaluation = self._require_evaluation(evaluation_id)
        if evaluation.is_final or not self._evaluations.delete_draft(evaluation.evaluation_id):
            raise ConflictError("Penilaian final tidak bisa dihapus.")
        logger.info("Draft evaluation %s deleted", evaluation.evaluation_id)

    def delete_all_finals_for_period(self, *, current_role: Role, month: Any, year: Any) -> int:
        _require_admin(current_role)
        month, year = require_month_year(month, year)
        reset = self._evaluations.reset_finals_for_period(month, year)
        logger.info("%d final evaluations of %s/%s reset to Draft", reset, month, year)
        return reset
