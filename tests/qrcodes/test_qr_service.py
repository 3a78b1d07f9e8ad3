from __future__ import annotations

import json
from dataclasses import replace
from datetime import date, datetime

import pytest

from src.intern_attendance.intern_attendance.core.enums import AttendanceStatus, CheckInModality, Role
from src.intern_attendance.intern_attendance.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidTokenError,
    TokenExpiredError,
)

NOW = datetime(2025, 1, 6, 7, 45)
TOMORROW = datetime(2025, 1, 7, 7, 45)


def test_only_one_active_token_after_repeated_generate(qr_service, qr_repo):
    tokens = [qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW) for _ in range(3)]

    active = [t for t in qr_repo.tokens.values() if t.active and t.token_date == NOW.date()]
    assert len(active) == 1
    assert active[0].token_id == tokens[-1].token_id
    assert len(tokens[-1].value) == 32


def test_generate_requires_admin(qr_service):
    with pytest.raises(AuthorizationError):
        qr_service.generate(current_role=Role.USER, admin_id=1, now=NOW)


def test_scan_payload_round_trips_through_validate(qr_service):
    token = qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW)
    payload = json.loads(qr_service.scan_payload(token))

    assert payload == {"type": "absensi", "token": token.value, "date": "2025-01-06"}
    assert qr_service.validate(qr_service.scan_payload(token), now=NOW).token_id == token.token_id


def test_scan_checks_in_with_qr_modality(qr_service, qr_repo):
    token = qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW)

    rec = qr_service.scan(token.value, user_id=1, now=NOW)

    assert rec.modality == CheckInModality.QR
    assert rec.token_id == token.token_id
    assert rec.status == AttendanceStatus.HADIR
    assert qr_repo.tokens[token.token_id].scanned_by == frozenset({1})


def test_rescan_same_day_conflicts_and_keeps_scanned_set(qr_service, qr_repo):
    token = qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW)
    qr_service.scan(token.value, user_id=1, now=NOW)

    with pytest.raises(ConflictError):
        qr_service.scan(token.value, user_id=1, now=NOW)
    assert qr_repo.tokens[token.token_id].scanned_by == frozenset({1})


def test_unknown_token_is_invalid_without_side_effects(qr_service, attendance_repo):
    with pytest.raises(InvalidTokenError):
        qr_service.scan("f" * 32, user_id=1, now=NOW)
    assert attendance_repo.all() == []


def test_superseded_token_is_invalid(qr_service, attendance_repo):
    old = qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW)
    qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW)

    with pytest.raises(InvalidTokenError) as exc:
        qr_service.scan(old.value, user_id=1, now=NOW)
    assert not isinstance(exc.value, TokenExpiredError)
    assert attendance_repo.all() == []


def test_yesterdays_token_is_expired(qr_service, qr_repo, attendance_repo):
    token = qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW)

    with pytest.raises(TokenExpiredError):
        qr_service.scan(token.value, user_id=1, now=TOMORROW)
    assert attendance_repo.all() == []
    assert qr_repo.tokens[token.token_id].scanned_by == frozenset()


def test_foreign_json_payload_is_invalid(qr_service):
    with pytest.raises(InvalidTokenError):
        qr_service.validate(json.dumps({"type": "menu", "token": "x"}), now=NOW)


def test_today_lists_scanned_user_names(qr_service):
    token = qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW)
    qr_service.scan(token.value, user_id=2, now=NOW)

    data = qr_service.today(current_role=Role.ADMIN, now=NOW)

    assert data["id"] == token.token_id
    assert data["scannedUsers"] == [{"userId": 2, "nama": "Budi"}]


def test_today_without_token_is_none(qr_service):
    assert qr_service.today(current_role=Role.ADMIN, now=NOW) is None


def test_history_is_recent_first_and_bounded(qr_service, qr_repo):
    qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=datetime(2024, 12, 20, 7, 0))
    qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=datetime(2025, 1, 3, 7, 0))
    latest = qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW)
    qr_service.scan(latest.value, user_id=1, now=NOW)

    history = qr_service.history(current_role=Role.ADMIN, limit_days=7, now=NOW)

    assert [h.token_date for h in history] == [date(2025, 1, 6), date(2025, 1, 3)]
    assert history[0].scanned_count == 1


def test_render_png_produces_png_bytes(qr_service):
    token = qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW)

    png = qr_service.render_png(token)

    assert png.startswith(b"\x89PNG")


def test_inactive_flag_alone_makes_token_invalid(qr_service, qr_repo):
    token = qr_service.generate(current_role=Role.ADMIN, admin_id=9, now=NOW)
    qr_repo.tokens[token.token_id] = replace(token, active=False)

    with pytest.raises(InvalidTokenError):
        qr_service.validate(token.value, now=NOW)
