from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Peran pengguna untuk pembatasan akses."""

    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @property
    def is_admin(self) -> bool:
        return self in {Role.ADMIN, Role.SUPERADMIN}


class AttendanceStatus(str, Enum):
    """Status kehadiran yang disimpan di database."""

    HADIR = "Hadir"
    TELAT = "Telat"
    IZIN = "Izin"
    SAKIT = "Sakit"
    ALPHA = "Alpha"
    HARI_LIBUR = "Hari Libur"


class CheckInModality(str, Enum):
    QR = "qr"
    PHOTO = "photo"


class EvaluationStatus(str, Enum):
    """Tahap siklus hidup penilaian kinerja."""

    DRAFT = "Draft"
    FINAL = "Final"
