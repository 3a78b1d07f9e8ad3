from __future__ import annotations

from dataclasses import dataclass

from .lateness import is_late
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, arrival: str, threshold: str) -> AttendanceStrategy:
        if is_late(arrival, threshold):
            return LateStrategy()
        return OnTimeStrategy()
