import pytest

from src.intern_attendance.intern_attendance.attendance.lateness import is_late
from src.intern_attendance.intern_attendance.core.exceptions import ValidationError


def test_before_threshold_is_not_late():
    assert is_late("07:59", "08:00") is False


def test_exactly_on_threshold_is_not_late():
    assert is_late("08:00", "08:00") is False


def test_after_threshold_is_late():
    assert is_late("08:01", "08:00") is True


def test_dot_separator_parses_like_colon():
    assert is_late("08.15", "08:10") is True
    assert is_late("08.15", "08:15") is False


def test_garbage_time_rejected():
    with pytest.raises(ValidationError):
        is_late("late", "08:00")
