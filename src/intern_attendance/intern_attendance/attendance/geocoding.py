from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

import requests

from ..core.constants import DEFAULT_GEOCODER_TIMEOUT
from .model import GeoSnapshot

logger = logging.getLogger(__name__)


class ReverseGeocoder:
    """Best-effort address lookup for check-in coordinates (Nominatim-style API).

    Never raises: any network or payload problem leaves the snapshot without an address.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_GEOCODER_TIMEOUT,
        user_agent: str = "intern-attendance/1.0",
        session: Optional[requests.Session] = None,
    ):
        self._url = (url or "").strip()
        self._timeout = float(timeout)
        self._user_agent = user_agent
        self._session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self._url)

    def lookup(self, latitude: float, longitude: float) -> Optional[str]:
        if not self.enabled:
            return None
        try:
            resp = self._session.get(
                self._url,
                params={"format": "jsonv2", "lat": latitude, "lon": longitude},
                headers={"User-Agent": self._user_agent},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Reverse geocoding failed for %s,%s: %s", latitude, longitude, e)
            return None

        address = payload.get("display_name") if isinstance(payload, dict) else None
        return address or None

    def enrich(self, geo: Optional[GeoSnapshot]) -> Optional[GeoSnapshot]:
        if geo is None or geo.address or not geo.has_coordinates:
            return geo
        address = self.lookup(geo.latitude, geo.longitude)
        return replace(geo, address=address) if address else geo
