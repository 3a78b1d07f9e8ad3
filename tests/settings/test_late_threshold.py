from datetime import datetime

import pytest

from src.intern_attendance.intern_attendance.core.enums import CheckInModality, Role
from src.intern_attendance.intern_attendance.core.exceptions import AuthorizationError, ValidationError


def test_default_threshold_until_first_change(threshold_service):
    current = threshold_service.get_current()

    assert current.threshold == "08:00"
    assert current.version == 0


def test_set_threshold_appends_version(threshold_service, thresholds_repo):
    threshold_service.set_threshold(current_role=Role.ADMIN, threshold="08:15", changed_by=9, reason="Banjir")
    threshold_service.set_threshold(current_role=Role.SUPERADMIN, threshold="08:30", changed_by=10)

    current = threshold_service.get_current()
    assert current.threshold == "08:30"
    assert current.version == 2
    assert [v.threshold for v in thresholds_repo.versions] == ["08:15", "08:30"]
    assert thresholds_repo.versions[0].reason == "Banjir"


@pytest.mark.parametrize("value", ["8:15", "08.15", "", "pagi", "24:00", "12:60", "25:99"])
def test_set_threshold_rejects_malformed_value(threshold_service, thresholds_repo, value):
    with pytest.raises(ValidationError):
        threshold_service.set_threshold(current_role=Role.ADMIN, threshold=value, changed_by=9)
    assert thresholds_repo.versions == []


def test_set_threshold_requires_admin(threshold_service):
    with pytest.raises(AuthorizationError):
        threshold_service.set_threshold(current_role=Role.USER, threshold="09:00", changed_by=1)


def test_out_of_range_threshold_never_blocks_checkin(threshold_service, attendance_service):
    with pytest.raises(ValidationError):
        threshold_service.set_threshold(current_role=Role.ADMIN, threshold="25:99", changed_by=9)

    rec = attendance_service.check_in(1, modality=CheckInModality.PHOTO, proof="/uploads/a.jpg", now=datetime(2025, 1, 6, 7, 30))

    assert rec.late_threshold == "08:00"
