from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List

from ..common.datetime_utils import month_bounds

SATURDAY = 5
SUNDAY = 6


def working_days(month: int, year: int, holidays: Iterable[date] = ()) -> List[date]:
    """Business days of a month: every date except Saturdays, Sundays and ``holidays``.

    Pure and deterministic; the holiday collection may hold duplicates or dates
    from other months.
    """

    start, end = month_bounds(month, year)
    excluded = set(holidays)

    days: List[date] = []
    current = start
    while current <= end:
        if current.weekday() not in (SATURDAY, SUNDAY) and current not in excluded:
            days.append(current)
        current += timedelta(days=1)
    return days
