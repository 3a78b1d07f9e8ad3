from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_hhmm
from ..core.constants import DEFAULT_LATE_THRESHOLD
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import LateThresholdSetting
from .repository import LateThresholdRepository

logger = logging.getLogger(__name__)


class LateThresholdService:
    """Persisted, versioned late threshold shared by every check-in classification."""

    def __init__(self, settings: LateThresholdRepository, *, default: str = DEFAULT_LATE_THRESHOLD):
        self._settings = settings
        self._default = require_hhmm(default, "batas jam terlambat")

    def get_current(self) -> LateThresholdSetting:
        latest = self._settings.get_latest()
        if latest is None:
            return LateThresholdSetting(version=0, threshold=self._default)
        return latest

    def set_threshold(
        self,
        *,
        current_role: Role,
        threshold: str,
        changed_by: int,
        reason: Optional[str] = None,
    ) -> LateThresholdSetting:
        if not current_role.is_admin:
            raise AuthorizationError("Akses ditolak. Hanya admin.")

        threshold = require_hhmm((threshold or "").strip(), "threshold")
        setting = self._settings.append(
            threshold=threshold,
            reason=(reason or "").strip() or None,
            changed_by=int(changed_by),
        )
        logger.info("Late threshold changed to %s by user %s (version %s)", threshold, changed_by, setting.version)
        return setting
