from __future__ import annotations

import io
import json
import logging
import secrets
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

import qrcode

from ..attendance.model import AttendanceRecord, GeoSnapshot
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_ORG_TIMEZONE, DEFAULT_QR_HISTORY_DAYS
from ..core.enums import CheckInModality, Role
from ..core.exceptions import AuthorizationError, InvalidTokenError, TokenExpiredError, ValidationError
from ..users.repository import UserRepository
from .model import QRToken, QRTokenSummary
from .repository import QRTokenRepository

logger = logging.getLogger(__name__)

PAYLOAD_TYPE = "absensi"


class QRTokenService:
    """Daily QR token lifecycle: issue, validate, scan, report."""

    def __init__(
        self,
        tokens: QRTokenRepository,
        attendance: AttendanceService,
        users: UserRepository,
        *,
        org_timezone: str = DEFAULT_ORG_TIMEZONE,
    ):
        self._tokens = tokens
        self._attendance = attendance
        self._users = users
        self._tz = org_timezone

    def _today(self, now: datetime | None) -> date:
        return (now or now_local(self._tz)).date()

    # -------- Issuance --------
    def generate(self, *, current_role: Role, admin_id: int, now: datetime | None = None) -> QRToken:
        if not current_role.is_admin:
            raise AuthorizationError("Akses ditolak. Hanya admin.")

        token = self._tokens.replace_active_for_date(
            token_date=self._today(now),
            value=secrets.token_hex(16),
            created_by=int(admin_id),
        )
        logger.info("QR token %s generated for %s by admin %s", token.token_id, token.token_date, admin_id)
        return token

    @staticmethod
    def scan_payload(token: QRToken) -> str:
        """Text encoded into the printed QR image."""
        return json.dumps(
            {"type": PAYLOAD_TYPE, "token": token.value, "date": token.token_date.isoformat()},
            separators=(",", ":"),
        )

    def render_png(self, token: QRToken) -> bytes:
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=2,
        )
        qr.add_data(self.scan_payload(token))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    # -------- Validation / scanning --------
    @staticmethod
    def extract_value(scanned: str) -> str:
        """Accept either the bare token value or the JSON scan payload."""
        raw = (scanned or "").strip()
        if not raw:
            raise ValidationError("Token QR wajib diisi.")
        if raw.startswith("{"):
            try:
                payload = json.loads(raw)
            except ValueError:
                raise InvalidTokenError("QR Code tidak valid.")
            if not isinstance(payload, dict) or payload.get("type") != PAYLOAD_TYPE:
                raise InvalidTokenError("QR Code tidak valid.")
            raw = str(payload.get("token") or "").strip()
            if not raw:
                raise InvalidTokenError("QR Code tidak valid.")
        return raw

    def validate(self, scanned: str, *, now: datetime | None = None) -> QRToken:
        token = self._tokens.find_by_value(self.extract_value(scanned))
        if token is None or not token.active:
            raise InvalidTokenError("QR Code tidak valid atau sudah tidak aktif.")
        if token.token_date != self._today(now):
            raise TokenExpiredError("QR Code sudah kadaluarsa. Minta admin membuat QR Code hari ini.")
        return token

    def scan(
        self,
        scanned: str,
        *,
        user_id: int,
        geo: Optional[GeoSnapshot] = None,
        client_timestamp=None,
        timezone: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        token = self.validate(scanned, now=now)
        record = self._attendance.check_in(
            int(user_id),
            modality=CheckInModality.QR,
            client_timestamp=client_timestamp,
            timezone=timezone,
            geo=geo,
            token_id=token.token_id,
            now=now,
        )
        self._tokens.add_scan(token_id=token.token_id, user_id=int(user_id))
        return record

    def scan_image(
        self,
        image_bytes: bytes,
        *,
        user_id: int,
        geo: Optional[GeoSnapshot] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        # zbar is a system library; only this path needs it.
        from PIL import Image, UnidentifiedImageError
        from pyzbar.pyzbar import decode as pyzbar_decode

        if not image_bytes:
            raise ValidationError("File gambar wajib diunggah.")
        try:
            img = Image.open(io.BytesIO(image_bytes)).convert("RGB")
        except UnidentifiedImageError:
            raise ValidationError("File bukan gambar yang valid.")

        decoded = pyzbar_decode(img)
        if not decoded:
            raise ValidationError("QR Code tidak terdeteksi pada gambar.")
        return self.scan(decoded[0].data.decode("utf-8"), user_id=user_id, geo=geo, now=now)

    # -------- Reporting --------
    def today(self, *, current_role: Role, now: datetime | None = None) -> Optional[dict]:
        if not current_role.is_admin:
            raise AuthorizationError("Akses ditolak. Hanya admin.")

        token = self._tokens.get_active_for_date(self._today(now))
        if token is None:
            return None
        names = self._users.names_by_id(token.scanned_by)
        data = token.to_dict()
        data["qrPayload"] = self.scan_payload(token)
        data["scannedUsers"] = [
            {"userId": uid, "nama": names.get(uid, "")} for uid in sorted(token.scanned_by)
        ]
        return data

    def active_token(self, *, now: datetime | None = None) -> Optional[QRToken]:
        return self._tokens.get_active_for_date(self._today(now))

    def history(
        self,
        *,
        current_role: Role,
        limit_days: int = DEFAULT_QR_HISTORY_DAYS,
        now: datetime | None = None,
    ) -> Sequence[QRTokenSummary]:
        if not current_role.is_admin:
            raise AuthorizationError("Akses ditolak. Hanya admin.")
        if int(limit_days) < 1:
            raise ValidationError("Jumlah hari harus minimal 1.")

        since = self._today(now) - timedelta(days=int(limit_days) - 1)
        # Several regenerations a day are possible; cap generously.
        return self._tokens.list_since(since, limit=int(limit_days) * 10)
