from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class QRToken:
    """Token QR harian; hanya satu yang aktif per tanggal."""

    token_id: int
    token_date: date
    value: str
    active: bool
    created_by: int
    scanned_by: FrozenSet[int] = field(default_factory=frozenset)
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.token_id,
            "token": self.value,
            "tanggal": self.token_date.isoformat(),
            "active": self.active,
            "createdBy": self.created_by,
            "scannedBy": sorted(self.scanned_by),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class QRTokenSummary:
    token_id: int
    token_date: date
    scanned_count: int
    active: bool
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.token_id,
            "tanggal": self.token_date.isoformat(),
            "scannedCount": self.scanned_count,
            "active": self.active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
