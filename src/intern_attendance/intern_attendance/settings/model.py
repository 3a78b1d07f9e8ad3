from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class LateThresholdSetting:
    """Satu versi batas jam terlambat. Versi 0 berarti nilai bawaan (belum pernah diubah)."""

    version: int
    threshold: str
    reason: Optional[str] = None
    changed_by: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "threshold": self.threshold,
            "alasan": self.reason,
            "changedBy": self.changed_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
