from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import AttendanceStatus


class ScoreCalculator(ABC):
    """Calculator interface (Strategy Pattern for the monthly score)."""

    @abstractmethod
    def points_for(self, status: AttendanceStatus) -> float:
        raise NotImplementedError

    @abstractmethod
    def absen(self, *, total_points: float, total_working_days: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def hasil(self, *, absen: float, kuantitas: float, kualitas: float, laporan: bool) -> float:
        raise NotImplementedError
