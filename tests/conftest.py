from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.intern_attendance.intern_attendance.attendance.model import AttendanceRecord, NewCheckIn
from src.intern_attendance.intern_attendance.attendance.service import AttendanceService
from src.intern_attendance.intern_attendance.core.enums import AttendanceStatus, EvaluationStatus, Role
from src.intern_attendance.intern_attendance.core.exceptions import ConflictError
from src.intern_attendance.intern_attendance.performance.model import EvaluationDraft, PerformanceEvaluation
from src.intern_attendance.intern_attendance.performance.service import PerformanceService
from src.intern_attendance.intern_attendance.qrcodes.model import QRToken, QRTokenSummary
from src.intern_attendance.intern_attendance.qrcodes.service import QRTokenService
from src.intern_attendance.intern_attendance.settings.model import LateThresholdSetting
from src.intern_attendance.intern_attendance.settings.service import LateThresholdService
from src.intern_attendance.intern_attendance.users.model import User
from src.intern_attendance.intern_attendance.workdays.model import HolidayResult
from src.intern_attendance.intern_attendance.workdays.service import WorkingDayService


class InMemoryUsers:
    def __init__(self, users):
        self.users_by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def list_by_role(self, role: Role, *, active_only: bool = True):
        return [u for u in self.users_by_id.values() if u.role == role and (u.is_active or not active_only)]

    def names_by_id(self, user_ids):
        return {uid: self.users_by_id[uid].full_name for uid in user_ids if uid in self.users_by_id}


class InMemoryAttendance:
    """Mimics the UNIQUE (user_id, work_date) key and the conditional check-out UPDATE."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def _key_taken(self, user_id: int, work_date: date) -> bool:
        return any(r.user_id == user_id and r.work_date == work_date for r in self._by_id.values())

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(attendance_id)

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._by_id.values():
            if r.user_id == user_id and r.work_date == work_date:
                return r
        return None

    def create_checkin(self, new: NewCheckIn) -> AttendanceRecord:
        with self._lock:
            if self._key_taken(new.user_id, new.work_date):
                raise ConflictError("Anda sudah absen hari ini.")
            self._id += 1
            rec = AttendanceRecord(
                attendance_id=self._id,
                user_id=new.user_id,
                work_date=new.work_date,
                check_in_time=new.check_in_time,
                check_out_time=None,
                status=new.status,
                modality=new.modality,
                token_id=new.token_id,
                late_threshold=new.late_threshold,
                proof=new.proof,
                client_timestamp=new.client_timestamp,
                location_in=new.location,
                note=new.note,
            )
            self._by_id[rec.attendance_id] = rec
            return rec

    def put(self, **fields) -> AttendanceRecord:
        """Seed a row directly, as an import or the holiday declaration would."""
        with self._lock:
            self._id += 1
            fields.setdefault("check_out_time", None)
            rec = AttendanceRecord(attendance_id=self._id, **fields)
            self._by_id[rec.attendance_id] = rec
            return rec

    def upsert_holiday_row(self, user_id: int, holiday_date: date, note: Optional[str]) -> bool:
        existing = self.get_for_user_and_date(user_id, holiday_date)
        if existing:
            self._by_id[existing.attendance_id] = replace(
                existing, status=AttendanceStatus.HARI_LIBUR, check_in_time=None, note=note
            )
            return False
        self.put(user_id=user_id, work_date=holiday_date, check_in_time=None,
                 status=AttendanceStatus.HARI_LIBUR, note=note)
        return True

    def delete_holiday_rows(self, holiday_date: date) -> int:
        doomed = [
            r.attendance_id
            for r in self._by_id.values()
            if r.work_date == holiday_date and r.status == AttendanceStatus.HARI_LIBUR
        ]
        for attendance_id in doomed:
            del self._by_id[attendance_id]
        return len(doomed)

    def complete_checkout(self, *, attendance_id, check_out_time, checkout_timestamp=None,
                          checkout_proof=None, location=None) -> bool:
        with self._lock:
            rec = self._by_id.get(attendance_id)
            if rec is None or not rec.check_in_time or rec.check_out_time:
                return False
            self._by_id[attendance_id] = replace(
                rec,
                check_out_time=check_out_time,
                checkout_timestamp=checkout_timestamp,
                checkout_proof=checkout_proof,
                location_out=location,
            )
            return True

    def admin_update_record(self, *, attendance_id, status, check_in_time, check_out_time) -> bool:
        rec = self._by_id.get(attendance_id)
        if rec is None:
            return False
        self._by_id[attendance_id] = replace(
            rec, status=status, check_in_time=check_in_time, check_out_time=check_out_time
        )
        return True

    def list_for_user_between(self, user_id: int, start: date, end: date):
        rows = [r for r in self._by_id.values() if r.user_id == user_id and start <= r.work_date <= end]
        return sorted(rows, key=lambda r: r.work_date)

    def list_recent(self, *, user_id=None, start=None, end=None, limit=50):
        rows = [
            r
            for r in self._by_id.values()
            if (user_id is None or r.user_id == user_id)
            and (start is None or r.work_date >= start)
            and (end is None or r.work_date <= end)
        ]
        rows.sort(key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        return rows[:limit]

    def list_for_date(self, work_date: date):
        return [r for r in self._by_id.values() if r.work_date == work_date]

    def all(self):
        return list(self._by_id.values())


class InMemoryHolidays:
    def __init__(self, attendance: InMemoryAttendance):
        self._attendance = attendance
        self.dates: set[date] = set()

    def list_dates_between(self, start: date, end: date):
        legacy = {r.work_date for r in self._attendance.all() if r.status == AttendanceStatus.HARI_LIBUR}
        return sorted(d for d in self.dates | legacy if start <= d <= end)

    def declare(self, *, holiday_date, user_ids, created_by, description=None) -> HolidayResult:
        self.dates.add(holiday_date)
        created = updated = 0
        for user_id in user_ids:
            if self._attendance.upsert_holiday_row(user_id, holiday_date, description):
                created += 1
            else:
                updated += 1
        return HolidayResult(created=created, updated=updated, total=len(user_ids))

    def cancel(self, *, holiday_date) -> int:
        self.dates.discard(holiday_date)
        return self._attendance.delete_holiday_rows(holiday_date)


class InMemoryThresholds:
    def __init__(self):
        self.versions: list[LateThresholdSetting] = []

    def get_latest(self) -> Optional[LateThresholdSetting]:
        return self.versions[-1] if self.versions else None

    def append(self, *, threshold, reason, changed_by) -> LateThresholdSetting:
        setting = LateThresholdSetting(
            version=len(self.versions) + 1, threshold=threshold, reason=reason, changed_by=changed_by
        )
        self.versions.append(setting)
        return setting


class InMemoryQRTokens:
    def __init__(self):
        self._lock = threading.Lock()
        self.tokens: dict[int, QRToken] = {}
        self._id = 0

    def replace_active_for_date(self, *, token_date, value, created_by) -> QRToken:
        with self._lock:
            for t in list(self.tokens.values()):
                if t.token_date == token_date and t.active:
                    self.tokens[t.token_id] = replace(t, active=False)
            self._id += 1
            token = QRToken(
                token_id=self._id,
                token_date=token_date,
                value=value,
                active=True,
                created_by=created_by,
                created_at=datetime(2025, 1, 1),
            )
            self.tokens[token.token_id] = token
            return token

    def find_by_value(self, value):
        for t in self.tokens.values():
            if t.value == value:
                return t
        return None

    def get_active_for_date(self, token_date):
        for t in self.tokens.values():
            if t.token_date == token_date and t.active:
                return t
        return None

    def add_scan(self, *, token_id, user_id) -> bool:
        token = self.tokens[token_id]
        if user_id in token.scanned_by:
            return False
        self.tokens[token_id] = replace(token, scanned_by=token.scanned_by | {user_id})
        return True

    def list_since(self, since, *, limit):
        rows = [t for t in self.tokens.values() if t.token_date >= since]
        rows.sort(key=lambda t: (t.token_date, t.token_id), reverse=True)
        return [
            QRTokenSummary(
                token_id=t.token_id,
                token_date=t.token_date,
                scanned_count=len(t.scanned_by),
                active=t.active,
                created_at=t.created_at,
            )
            for t in rows[:limit]
        ]


class InMemoryEvaluations:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.rows: dict[int, PerformanceEvaluation] = {}
        self._id = 0

    def _named(self, e: PerformanceEvaluation) -> PerformanceEvaluation:
        user = self._users.get_by_id(e.user_id)
        return replace(e, user_name=user.full_name if user else None)

    def get_by_id(self, evaluation_id):
        e = self.rows.get(evaluation_id)
        return self._named(e) if e else None

    def save_unless_final(self, draft: EvaluationDraft) -> PerformanceEvaluation:
        for e in self.rows.values():
            if (e.user_id, e.month, e.year) == (draft.user_id, draft.month, draft.year):
                if e.is_final:
                    raise ConflictError("Penilaian sudah difinalisasi dan tidak bisa diubah.")
                evaluation_id = e.evaluation_id
                break
        else:
            self._id += 1
            evaluation_id = self._id

        self.rows[evaluation_id] = PerformanceEvaluation(
            evaluation_id=evaluation_id,
            user_id=draft.user_id,
            month=draft.month,
            year=draft.year,
            absen=draft.absen,
            kuantitas=draft.kuantitas,
            kualitas=draft.kualitas,
            laporan=draft.laporan,
            hasil=draft.hasil,
            status=draft.status,
        )
        return self.get_by_id(evaluation_id)

    def list_for_period(self, month, year, *, status=None):
        return [
            self._named(e)
            for e in self.rows.values()
            if e.month == month and e.year == year and (status is None or e.status == status)
        ]

    def set_status(self, evaluation_id, status) -> bool:
        if evaluation_id not in self.rows:
            return False
        self.rows[evaluation_id] = replace(self.rows[evaluation_id], status=status)
        return True

    def delete_draft(self, evaluation_id) -> bool:
        e = self.rows.get(evaluation_id)
        if e is None or e.is_final:
            return False
        del self.rows[evaluation_id]
        return True

    def reset_finals_for_period(self, month, year) -> int:
        count = 0
        for e in list(self.rows.values()):
            if e.month == month and e.year == year and e.is_final:
                self.rows[e.evaluation_id] = replace(e, status=EvaluationStatus.DRAFT)
                count += 1
        return count


@pytest.fixture
def users():
    return InMemoryUsers(
        [
            User(user_id=1, full_name="Ani", username="ani", role=Role.USER),
            User(user_id=2, full_name="Budi", username="budi", role=Role.USER),
            User(user_id=3, full_name="Citra", username="citra", role=Role.USER, is_active=False),
            User(user_id=9, full_name="Admin", username="admin", role=Role.ADMIN),
            User(user_id=10, full_name="Super", username="super", role=Role.SUPERADMIN),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def holidays_repo(attendance_repo):
    return InMemoryHolidays(attendance_repo)


@pytest.fixture
def thresholds_repo():
    return InMemoryThresholds()


@pytest.fixture
def threshold_service(thresholds_repo):
    return LateThresholdService(thresholds_repo, default="08:00")


@pytest.fixture
def attendance_service(attendance_repo, users, threshold_service, holidays_repo):
    return AttendanceService(attendance_repo, users, threshold_service, holidays_repo, org_timezone="Asia/Jakarta")


@pytest.fixture
def qr_repo():
    return InMemoryQRTokens()


@pytest.fixture
def qr_service(qr_repo, attendance_service, users):
    return QRTokenService(qr_repo, attendance_service, users, org_timezone="Asia/Jakarta")


@pytest.fixture
def evaluations_repo(users):
    return InMemoryEvaluations(users)


@pytest.fixture
def performance_service(evaluations_repo, attendance_repo, users, holidays_repo):
    return PerformanceService(evaluations_repo, attendance_repo, users, WorkingDayService(holidays_repo))
