from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EvaluationStatus
from .model import EvaluationDraft, PerformanceEvaluation


class PerformanceRepository(Protocol):
    def get_by_id(self, evaluation_id: int) -> Optional[PerformanceEvaluation]:
        raise NotImplementedError

    def save_unless_final(self, draft: EvaluationDraft) -> PerformanceEvaluation:
        """Insert or update the (user, month, year) row in one transaction.

        Raises ConflictError when the stored row is already Final, or when a
        concurrent insert claimed the period first.
        """

        raise NotImplementedError

    def list_for_period(
        self, month: int, year: int, *, status: Optional[EvaluationStatus] = None
    ) -> Sequence[PerformanceEvaluation]:
        raise NotImplementedError

    def set_status(self, evaluation_id: int, status: EvaluationStatus) -> bool:
        raise NotImplementedError

    def delete_draft(self, evaluation_id: int) -> bool:
        """Delete only if the row is still Draft."""

        raise NotImplementedError

    def reset_finals_for_period(self, month: int, year: int) -> int:
        raise NotImplementedError
