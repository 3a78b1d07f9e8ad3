from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.geocoding import ReverseGeocoder
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.photos import PhotoStore
from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_GEOCODER_TIMEOUT,
    DEFAULT_LATE_THRESHOLD,
    DEFAULT_MAX_PHOTO_BYTES,
    DEFAULT_ORG_TIMEZONE,
)
from .database.connection import DBConfig, DatabaseConnection
from .performance.calculator.standard_calculator import StandardScoreCalculator
from .performance.mysql_performance_repository import MySQLPerformanceRepository
from .performance.service import PerformanceService
from .qrcodes.mysql_qr_repository import MySQLQRTokenRepository
from .qrcodes.service import QRTokenService
from .settings.mysql_settings_repository import MySQLLateThresholdRepository
from .settings.service import LateThresholdService
from .users.mysql_user_repository import MySQLUserRepository
from .workdays.mysql_holiday_repository import MySQLHolidayRepository
from .workdays.service import WorkingDayService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    attendance_repo: MySQLAttendanceRepository
    holidays_repo: MySQLHolidayRepository
    thresholds_repo: MySQLLateThresholdRepository
    qr_repo: MySQLQRTokenRepository
    performance_repo: MySQLPerformanceRepository

    photo_store: PhotoStore
    threshold_service: LateThresholdService
    working_day_service: WorkingDayService
    attendance_service: AttendanceService
    qr_service: QRTokenService
    performance_service: PerformanceService


def build_container(*, db_config: dict, options: Optional[Mapping[str, Any]] = None) -> Container:
    options = options or {}
    org_timezone = str(options.get("ORG_TIMEZONE") or DEFAULT_ORG_TIMEZONE)

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    thresholds_repo = MySQLLateThresholdRepository(conn)
    qr_repo = MySQLQRTokenRepository(conn)
    performance_repo = MySQLPerformanceRepository(conn)

    geocoder_url = str(options.get("GEOCODER_URL") or "")
    geocoder = None
    if geocoder_url:
        geocoder = ReverseGeocoder(
            geocoder_url,
            timeout=float(options.get("GEOCODER_TIMEOUT") or DEFAULT_GEOCODER_TIMEOUT),
        )

    photo_store = PhotoStore(
        str(options.get("UPLOAD_FOLDER") or "uploads"),
        max_bytes=int(options.get("MAX_PHOTO_BYTES") or DEFAULT_MAX_PHOTO_BYTES),
    )
    threshold_service = LateThresholdService(
        thresholds_repo,
        default=str(options.get("DEFAULT_LATE_THRESHOLD") or DEFAULT_LATE_THRESHOLD),
    )
    working_day_service = WorkingDayService(holidays_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        threshold_service,
        holidays_repo,
        strategy_factory=AttendanceStrategyFactory(),
        geocoder=geocoder,
        org_timezone=org_timezone,
    )
    qr_service = QRTokenService(qr_repo, attendance_service, users_repo, org_timezone=org_timezone)
    performance_service = PerformanceService(
        performance_repo,
        attendance_repo,
        users_repo,
        working_day_service,
        calculator=StandardScoreCalculator(options.get("ATTENDANCE_POINTS")),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        thresholds_repo=thresholds_repo,
        qr_repo=qr_repo,
        performance_repo=performance_repo,
        photo_store=photo_store,
        threshold_service=threshold_service,
        working_day_service=working_day_service,
        attendance_service=attendance_service,
        qr_service=qr_service,
        performance_service=performance_service,
    )
