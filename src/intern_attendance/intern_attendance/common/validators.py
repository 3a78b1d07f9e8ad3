from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError
from .datetime_utils import is_strict_hhmm, parse_hhmm


def require_hhmm(value: str, field_name: str) -> str:
    if not is_strict_hhmm(value):
        raise ValidationError(f"Format {field_name} harus HH:MM (contoh: 08:30)")
    parse_hhmm(value)
    return value


def require_number_in_range(value: Any, field_name: str, low: float, high: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} harus berupa angka.")
    if number < low or number > high:
        raise ValidationError(f"{field_name} harus antara {low:g}-{high:g}.")
    return number


def require_month_year(month: Any, year: Any) -> tuple[int, int]:
    try:
        m, y = int(month), int(year)
    except (TypeError, ValueError):
        raise ValidationError("Bulan dan tahun wajib berupa angka.")
    if not 1 <= m <= 12:
        raise ValidationError("Bulan harus antara 1-12.")
    if y < 1970:
        raise ValidationError("Tahun tidak valid.")
    return m, y
