from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import HolidayResult


class HolidayRepository(Protocol):
    def list_dates_between(self, start: date, end: date) -> Sequence[date]:
        """Holiday dates in [start, end], deduplicated.

        Covers both explicit holiday rows and dates carrying a "Hari Libur" attendance row.
        """

        raise NotImplementedError

    def declare(
        self,
        *,
        holiday_date: date,
        user_ids: Sequence[int],
        created_by: Optional[int],
        description: Optional[str] = None,
    ) -> HolidayResult:
        """Upsert the holiday and a "Hari Libur" attendance row per user, atomically."""

        raise NotImplementedError

    def cancel(self, *, holiday_date: date) -> int:
        """Remove the holiday and its "Hari Libur" attendance rows. Returns rows deleted."""

        raise NotImplementedError
