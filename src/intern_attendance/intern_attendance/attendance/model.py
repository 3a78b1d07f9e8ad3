from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Optional

from ..core.enums import AttendanceStatus, CheckInModality

logger = logging.getLogger(__name__)


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class GeoSnapshot:
    """Lokasi perangkat saat absen (semua field opsional)."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: str = ""
    accuracy: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def parse(cls, latitude: Any = None, longitude: Any = None, address: Any = None, accuracy: Any = None) -> Optional["GeoSnapshot"]:
        """Build a snapshot from loose request values.

        Unparseable or out-of-range coordinates are dropped instead of failing the request.
        """

        lat, lon = _as_float(latitude), _as_float(longitude)
        if lat is not None and lon is not None and not (-90 <= lat <= 90 and -180 <= lon <= 180):
            logger.warning("Ignoring out-of-range coordinates lat=%s lon=%s", lat, lon)
            lat, lon = None, None

        snapshot = cls(
            latitude=lat,
            longitude=lon,
            address=str(address or "").strip(),
            accuracy=_as_float(accuracy),
        )
        if not snapshot.has_coordinates and not snapshot.address:
            return None
        return snapshot

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["GeoSnapshot"]:
        if not data:
            return None
        return cls(
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            address=data.get("address") or "",
            accuracy=data.get("accuracy"),
        )


@dataclass(frozen=True)
class AttendanceRecord:
    """Entitas domain: satu baris absensi per (peserta, tanggal)."""

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[str]
    check_out_time: Optional[str]
    status: AttendanceStatus
    modality: Optional[CheckInModality] = None
    token_id: Optional[int] = None
    late_threshold: Optional[str] = None
    proof: Optional[str] = None
    checkout_proof: Optional[str] = None
    client_timestamp: Optional[str] = None
    checkout_timestamp: Optional[str] = None
    location_in: Optional[GeoSnapshot] = None
    location_out: Optional[GeoSnapshot] = None
    note: Optional[str] = None

    def to_dict(self, *, include_proof: bool = False) -> dict:
        data = {
            "id": self.attendance_id,
            "userId": self.user_id,
            "tanggal": self.work_date.isoformat(),
            "jamMasuk": self.check_in_time or "",
            "jamKeluar": self.check_out_time or "",
            "status": self.status.value,
            "modality": self.modality.value if self.modality else None,
            "qrCodeId": self.token_id,
            "lateThreshold": self.late_threshold,
            "fotoTimestamp": self.client_timestamp or "",
            "fotoPulangTimestamp": self.checkout_timestamp or "",
            "locationMasuk": self.location_in.to_dict() if self.location_in else None,
            "locationPulang": self.location_out.to_dict() if self.location_out else None,
            "keterangan": self.note or "",
            "hasFoto": bool(self.proof),
            "hasFotoPulang": bool(self.checkout_proof),
        }
        if include_proof:
            data["foto"] = self.proof
            data["fotoPulang"] = self.checkout_proof
        return data


@dataclass(frozen=True)
class NewCheckIn:
    """Everything needed to insert the first row of the day."""

    user_id: int
    work_date: date
    check_in_time: str
    status: AttendanceStatus
    modality: CheckInModality
    late_threshold: str
    proof: Optional[str] = None
    client_timestamp: Optional[str] = None
    location: Optional[GeoSnapshot] = None
    token_id: Optional[int] = None
    note: Optional[str] = None
