from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EvaluationStatus


@dataclass(frozen=True)
class PerformanceEvaluation:
    """Penilaian kinerja bulanan satu peserta magang.

    hasil = absen + kuantitas + kualitas + (5 jika laporan), maksimal 100.
    """

    evaluation_id: int
    user_id: int
    month: int
    year: int
    absen: float
    kuantitas: float
    kualitas: float
    laporan: bool
    hasil: float
    status: EvaluationStatus
    user_name: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def is_final(self) -> bool:
        return self.status == EvaluationStatus.FINAL

    def to_dict(self) -> dict:
        return {
            "id": self.evaluation_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "bulan": self.month,
            "tahun": self.year,
            "absen": self.absen,
            "kuantitas": self.kuantitas,
            "kualitas": self.kualitas,
            "laporan": self.laporan,
            "hasil": self.hasil,
            "status": self.status.value,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class EvaluationDraft:
    """Values to upsert for (user_id, month, year)."""

    user_id: int
    month: int
    year: int
    absen: float
    kuantitas: float
    kualitas: float
    laporan: bool
    hasil: float
    status: EvaluationStatus


@dataclass(frozen=True)
class PerformanceCalculation:
    user_id: int
    month: int
    year: int
    absen: float
    attended_days: int
    total_working_days: int
    total_points: float
    avg_points: float
    user_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "userName": self.user_name,
            "bulan": self.month,
            "tahun": self.year,
            "absen": self.absen,
            "detail": {
                "totalWorkingDays": self.total_working_days,
                "attendedDays": self.attended_days,
                "totalPoints": self.total_points,
                "avgPoints": self.avg_points,
            },
        }
