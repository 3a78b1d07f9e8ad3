from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, arrival_minutes: int, threshold_minutes: int) -> StatusDecision:
        late_by = max(arrival_minutes - threshold_minutes, 0)
        return StatusDecision(status=AttendanceStatus.TELAT, note=f"Terlambat {late_by} menit")
