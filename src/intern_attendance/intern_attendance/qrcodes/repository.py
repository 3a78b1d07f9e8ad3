from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import QRToken, QRTokenSummary


class QRTokenRepository(Protocol):
    def replace_active_for_date(self, *, token_date: date, value: str, created_by: int) -> QRToken:
        """Deactivate every active token of ``token_date`` and insert a new active one.

        Runs as one transaction; raises ConflictError if a concurrent call won.
        """

        raise NotImplementedError

    def find_by_value(self, value: str) -> Optional[QRToken]:
        raise NotImplementedError

    def get_active_for_date(self, token_date: date) -> Optional[QRToken]:
        raise NotImplementedError

    def add_scan(self, *, token_id: int, user_id: int) -> bool:
        """Record a scanning user; returns False when the user was already recorded."""

        raise NotImplementedError

    def list_since(self, since: date, *, limit: int) -> Sequence[QRTokenSummary]:
        """Tokens dated on or after ``since``, most recent first."""

        raise NotImplementedError
