from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import format_hhmm, now_local, parse_client_timestamp, parse_hhmm
from ..common.validators import require_hhmm
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_ORG_TIMEZONE
from ..core.enums import CheckInModality, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..settings.service import LateThresholdService
from ..users.repository import UserRepository
from ..workdays.model import HolidayResult
from ..workdays.repository import HolidayRepository
from .factory import AttendanceStrategyFactory
from .geocoding import ReverseGeocoder
from .model import AttendanceRecord, GeoSnapshot, NewCheckIn
from .repository import AttendanceRepository
from .state import AttendanceAction, require_override_status, state_of, transition

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        thresholds: LateThresholdService,
        holidays: HolidayRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        geocoder: ReverseGeocoder | None = None,
        org_timezone: str = DEFAULT_ORG_TIMEZONE,
    ):
        self._attendance = attendance
        self._users = users
        self._thresholds = thresholds
        self._holidays = holidays
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._geocoder = geocoder
        self._tz = org_timezone

    def today(self, *, now: datetime | None = None) -> date:
        return (now or now_local(self._tz)).date()

    def _moment(self, client_timestamp, timezone: Optional[str], now: datetime | None) -> datetime:
        """Client device time when supplied, else the server clock in the org timezone."""

        parsed = parse_client_timestamp(client_timestamp, timezone=timezone, default_timezone=self._tz)
        return parsed or now or now_local(self._tz)

    def _enrich(self, geo: Optional[GeoSnapshot]) -> Optional[GeoSnapshot]:
        if self._geocoder is None:
            return geo
        return self._geocoder.enrich(geo)

    def _require_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Data absensi tidak ditemukan.")
        return record

    @staticmethod
    def _require_owner_or_admin(record: AttendanceRecord, *, actor_id: int, actor_role: Role) -> None:
        if int(record.user_id) != int(actor_id) and not actor_role.is_admin:
            raise AuthorizationError("Akses ditolak.")

    # -------- Check-in / check-out --------
    def check_in(
        self,
        user_id: int,
        *,
        modality: CheckInModality,
        proof: Optional[str] = None,
        client_timestamp=None,
        timezone: Optional[str] = None,
        geo: Optional[GeoSnapshot] = None,
        token_id: Optional[int] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise NotFoundError("User tidak ditemukan.")
        if modality == CheckInModality.PHOTO and not proof:
            raise ValidationError("Foto wajib diambil untuk absensi.")
        if modality == CheckInModality.QR and token_id is None:
            raise ValidationError("Token QR wajib diisi.")

        server_now = now or now_local(self._tz)
        existing = self._attendance.get_for_user_and_date(int(user_id), server_now.date())
        transition(state_of(existing), AttendanceAction.CHECK_IN)
        arrival = self._moment(client_timestamp, timezone, server_now)
        check_in_time = format_hhmm(arrival)

        threshold = self._thresholds.get_current().threshold
        strategy = self._factory.for_checkin(arrival=check_in_time, threshold=threshold)
        decision = strategy.decide_checkin(
            arrival_minutes=parse_hhmm(check_in_time),
            threshold_minutes=parse_hhmm(threshold),
        )

        # Concurrent check-ins still race past the read above; the unique insert decides.
        record = self._attendance.create_checkin(
            NewCheckIn(
                user_id=int(user_id),
                work_date=server_now.date(),
                check_in_time=check_in_time,
                status=decision.status,
                modality=modality,
                late_threshold=threshold,
                proof=proof,
                client_timestamp=arrival.isoformat() if client_timestamp else None,
                location=self._enrich(geo),
                token_id=token_id,
                note=decision.note,
            )
        )
        logger.info(
            "User %s checked in via %s at %s (%s, threshold %s)",
            user_id, modality.value, check_in_time, decision.status.value, threshold,
        )
        return record

    def check_out(
        self,
        *,
        actor_id: int,
        actor_role: Role,
        attendance_id: int,
        client_timestamp=None,
        timezone: Optional[str] = None,
        proof: Optional[str] = None,
        geo: Optional[GeoSnapshot] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        record = self._require_record(attendance_id)
        self._require_owner_or_admin(record, actor_id=actor_id, actor_role=actor_role)
        transition(state_of(record), AttendanceAction.CHECK_OUT)

        leaving = self._moment(client_timestamp, timezone, now)
        changed = self._attendance.complete_checkout(
            attendance_id=record.attendance_id,
            check_out_time=format_hhmm(leaving),
            checkout_timestamp=leaving.isoformat() if client_timestamp else None,
            checkout_proof=proof,
            location=self._enrich(geo),
        )
        if not changed:
            # Lost a race with another check-out of the same row.
            transition(state_of(self._require_record(attendance_id)), AttendanceAction.CHECK_OUT)
            raise ConflictError("Anda sudah absen pulang hari ini.")

        logger.info("Attendance %s checked out at %s", record.attendance_id, format_hhmm(leaving))
        return self._require_record(attendance_id)

    def check_out_today(
        self,
        *,
        user_id: int,
        role: Role,
        client_timestamp=None,
        timezone: Optional[str] = None,
        proof: Optional[str] = None,
        geo: Optional[GeoSnapshot] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        if not proof:
            raise ValidationError("Foto wajib diambil untuk absensi pulang.")
        record = self._attendance.get_for_user_and_date(int(user_id), self.today(now=now))
        if not record:
            raise NotFoundError("Anda belum absen masuk hari ini. Silakan absen masuk terlebih dahulu.")
        return self.check_out(
            actor_id=user_id,
            actor_role=role,
            attendance_id=record.attendance_id,
            client_timestamp=client_timestamp,
            timezone=timezone,
            proof=proof,
            geo=geo,
            now=now,
        )

    # -------- Admin operations --------
    def admin_override(
        self,
        *,
        current_role: Role,
        attendance_id: int,
        status: str,
        jam_masuk: Optional[str] = None,
        jam_keluar: Optional[str] = None,
    ) -> AttendanceRecord:
        if not current_role.is_admin:
            raise AuthorizationError("Akses ditolak. Hanya admin.")

        new_status = require_override_status(status)
        if jam_masuk:
            require_hhmm(jam_masuk, "jam masuk")
        if jam_keluar:
            require_hhmm(jam_keluar, "jam keluar")

        record = self._require_record(attendance_id)
        check_in_time = jam_masuk or record.check_in_time
        if jam_keluar is None:
            check_out_time = record.check_out_time
        else:
            check_out_time = jam_keluar or None

        self._attendance.admin_update_record(
            attendance_id=record.attendance_id,
            status=new_status,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
        )
        logger.info("Attendance %s overridden to %s", record.attendance_id, new_status.value)
        return self._require_record(attendance_id)

    def declare_holiday(
        self,
        *,
        current_role: Role,
        admin_id: int,
        holiday_date: date,
        description: Optional[str] = None,
    ) -> HolidayResult:
        if not current_role.is_admin:
            raise AuthorizationError("Akses ditolak. Hanya admin.")

        interns = self._users.list_by_role(Role.USER, active_only=True)
        result = self._holidays.declare(
            holiday_date=holiday_date,
            user_ids=[u.user_id for u in interns],
            created_by=int(admin_id),
            description=(description or "").strip() or None,
        )
        logger.info(
            "Holiday %s declared: %d created, %d updated of %d",
            holiday_date, result.created, result.updated, result.total,
        )
        return result

    def cancel_holiday(self, *, current_role: Role, holiday_date: date) -> int:
        if not current_role.is_admin:
            raise AuthorizationError("Akses ditolak. Hanya admin.")

        deleted = self._holidays.cancel(holiday_date=holiday_date)
        logger.info("Holiday %s cancelled, %d rows removed", holiday_date, deleted)
        return deleted

    # -------- Queries --------
    def history(
        self,
        *,
        actor_id: int,
        actor_role: Role,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        user_filter = None if actor_role.is_admin else int(actor_id)
        return self._attendance.list_recent(user_id=user_filter, start=start, end=end, limit=int(limit))

    def today_records(self, *, current_role: Role, now: datetime | None = None) -> Sequence[AttendanceRecord]:
        if not current_role.is_admin:
            raise AuthorizationError("Akses ditolak. Hanya admin.")
        return self._attendance.list_for_date(self.today(now=now))

    def get_photo(self, *, actor_id: int, actor_role: Role, attendance_id: int, checkout: bool = False) -> dict:
        record = self._require_record(attendance_id)
        self._require_owner_or_admin(record, actor_id=actor_id, actor_role=actor_role)

        foto = record.checkout_proof if checkout else record.proof
        if not foto:
            raise NotFoundError("Foto pulang tidak tersedia." if checkout else "Foto absensi tidak tersedia.")
        stamp = record.checkout_timestamp if checkout else record.client_timestamp
        return {"foto": foto, "fotoTimestamp": stamp or ""}
