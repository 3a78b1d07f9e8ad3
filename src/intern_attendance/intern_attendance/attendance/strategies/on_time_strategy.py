from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class OnTimeStrategy(AttendanceStrategy):
    """Arrival at or before the threshold."""

    def decide_checkin(self, *, arrival_minutes: int, threshold_minutes: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HADIR)
