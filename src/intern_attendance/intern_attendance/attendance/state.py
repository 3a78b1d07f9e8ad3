"""Attendance state machine per (user, date).

    NOT_CHECKED_IN --check_in--> CHECKED_IN --check_out--> CHECKED_OUT

Admin overrides change the status label only, never the check state.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, ValidationError
from .model import AttendanceRecord


class CheckState(str, Enum):
    NOT_CHECKED_IN = "NOT_CHECKED_IN"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class AttendanceAction(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


TRANSITIONS = {
    (CheckState.NOT_CHECKED_IN, AttendanceAction.CHECK_IN): CheckState.CHECKED_IN,
    (CheckState.CHECKED_IN, AttendanceAction.CHECK_OUT): CheckState.CHECKED_OUT,
}

_REJECTIONS = {
    (CheckState.CHECKED_IN, AttendanceAction.CHECK_IN): "Anda sudah absen hari ini.",
    (CheckState.CHECKED_OUT, AttendanceAction.CHECK_IN): "Anda sudah absen hari ini.",
    (CheckState.NOT_CHECKED_IN, AttendanceAction.CHECK_OUT): "Anda belum absen masuk hari ini. Silakan absen masuk terlebih dahulu.",
    (CheckState.CHECKED_OUT, AttendanceAction.CHECK_OUT): "Anda sudah absen pulang hari ini.",
}

ADMIN_OVERRIDE_STATUSES = frozenset(
    {
        AttendanceStatus.HADIR,
        AttendanceStatus.TELAT,
        AttendanceStatus.IZIN,
        AttendanceStatus.SAKIT,
        AttendanceStatus.ALPHA,
    }
)


def state_of(record: Optional[AttendanceRecord]) -> CheckState:
    if record is None or not record.check_in_time:
        return CheckState.NOT_CHECKED_IN
    if not record.check_out_time:
        return CheckState.CHECKED_IN
    return CheckState.CHECKED_OUT


def transition(current: CheckState, action: AttendanceAction) -> CheckState:
    nxt = TRANSITIONS.get((current, action))
    if nxt is None:
        raise ConflictError(_REJECTIONS.get((current, action), "Transisi absensi tidak valid."))
    return nxt


def require_override_status(value: str) -> AttendanceStatus:
    if not value:
        raise ValidationError("Status wajib diisi.")
    try:
        status = AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Status tidak valid.")
    if status not in ADMIN_OVERRIDE_STATUSES:
        raise ValidationError("Status Hari Libur hanya dapat diatur lewat penetapan hari libur.")
    return status
