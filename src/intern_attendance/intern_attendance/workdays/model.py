from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HolidayResult:
    """Ringkasan penetapan hari libur: baris baru, baris diperbarui, total peserta."""

    created: int
    updated: int
    total: int

    def to_dict(self) -> dict:
        return {"created": self.created, "updated": self.updated, "total": self.total}
