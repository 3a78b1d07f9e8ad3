from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import Optional, Union

import pytz

from ..core.exceptions import ValidationError

_HHMM_STRICT = re.compile(r"^\d{2}:\d{2}$")
_HHMM_LOOSE = re.compile(r"^\s*(\d{1,2})[:.](\d{2})\s*$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Longer ISO strings ("2025-01-06T00:00:00.000Z") are cut to their date part.
    """
    v = (value or "").strip()[:10]
    try:
        return datetime.strptime(v, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Format tanggal harus YYYY-MM-DD")


def get_timezone(name: Optional[str], default: str):
    try:
        return pytz.timezone((name or "").strip() or default)
    except pytz.UnknownTimeZoneError:
        raise ValidationError(f"Zona waktu tidak valid: {name}")


def now_local(tz_name: str) -> datetime:
    """Current time in the organization's timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(pytz.timezone(tz_name))


def parse_client_timestamp(
    value: Union[str, int, float, None],
    *,
    timezone: Optional[str],
    default_timezone: str,
) -> Optional[datetime]:
    """Interpret a device timestamp in the caller's timezone.

    Accepts ISO 8601 strings (with or without offset) and epoch milliseconds.
    Returns an aware datetime in ``timezone`` or None when nothing was sent.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    tz = get_timezone(timezone, default_timezone)

    if isinstance(value, (int, float)) or (isinstance(value, str) and value.strip().isdigit()):
        return datetime.fromtimestamp(float(value) / 1000.0, tz=pytz.utc).astimezone(tz)

    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError("Format timestamp tidak valid")

    if parsed.tzinfo is None:
        return tz.localize(parsed)
    return parsed.astimezone(tz)


def parse_hhmm(value: str) -> int:
    """Parse "HH:MM" (or "HH.MM") into minutes since midnight."""
    m = _HHMM_LOOSE.match(value or "")
    if not m:
        raise ValidationError(f"Format jam harus HH:MM: {value!r}")
    hours, minutes = int(m.group(1)), int(m.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Jam di luar rentang: {value!r}")
    return hours * 60 + minutes


def is_strict_hhmm(value: str) -> bool:
    return bool(_HHMM_STRICT.match(value or ""))


def format_hhmm(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def month_bounds(month: int, year: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Bulan harus antara 1-12")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)
