from __future__ import annotations

from typing import Optional, Protocol

from .model import LateThresholdSetting


class LateThresholdRepository(Protocol):
    def get_latest(self) -> Optional[LateThresholdSetting]:
        raise NotImplementedError

    def append(self, *, threshold: str, reason: Optional[str], changed_by: Optional[int]) -> LateThresholdSetting:
        """Store a new version; earlier versions are kept as history."""

        raise NotImplementedError
