from __future__ import annotations

from typing import Mapping, Optional

from .base import ScoreCalculator
from ...core.constants import ABSEN_MAX, DEFAULT_ATTENDANCE_POINTS, LAPORAN_POINTS
from ...core.enums import AttendanceStatus


class StandardScoreCalculator(ScoreCalculator):
    """Standard rule: absen = total points / working days * 35, clamped to [0, 35].

    Statuses missing from the point table (e.g. "Hari Libur") are worth 0.
    """

    def __init__(self, points: Optional[Mapping[str, float]] = None):
        table = dict(DEFAULT_ATTENDANCE_POINTS)
        table.update(points or {})
        self._points = {str(k): float(v) for k, v in table.items()}

    def points_for(self, status: AttendanceStatus) -> float:
        return self._points.get(AttendanceStatus(status).value, 0.0)

    def absen(self, *, total_points: float, total_working_days: int) -> float:
        if total_working_days <= 0:
            return 0.0
        score = round(total_points / total_working_days * ABSEN_MAX, 2)
        return min(max(score, 0.0), ABSEN_MAX)

    def hasil(self, *, absen: float, kuantitas: float, kualitas: float, laporan: bool) -> float:
        return round(absen + kuantitas + kualitas + (LAPORAN_POINTS if laporan else 0.0), 2)
