from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, GeoSnapshot, NewCheckIn


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(self, new: NewCheckIn) -> AttendanceRecord:
        """Insert-if-absent on (user_id, work_date).

        Raises ConflictError when a row already exists; never reads first.
        """

        raise NotImplementedError

    def complete_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: str,
        checkout_timestamp: Optional[str] = None,
        checkout_proof: Optional[str] = None,
        location: Optional[GeoSnapshot] = None,
    ) -> bool:
        """Set check-out only while it is still empty. Returns False if nothing changed."""

        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        check_in_time: Optional[str],
        check_out_time: Optional[str],
    ) -> bool:
        """Admin-only override of status and recorded times."""

        raise NotImplementedError

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_recent(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 50,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
