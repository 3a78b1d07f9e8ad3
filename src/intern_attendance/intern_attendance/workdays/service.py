from __future__ import annotations

from datetime import date
from typing import List

from ..common.datetime_utils import month_bounds
from .calculator import working_days
from .repository import HolidayRepository


class WorkingDayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def working_days(self, month: int, year: int) -> List[date]:
        start, end = month_bounds(month, year)
        return working_days(month, year, self._holidays.list_dates_between(start, end))
