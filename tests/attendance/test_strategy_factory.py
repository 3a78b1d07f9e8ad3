from src.intern_attendance.intern_attendance.attendance.factory import AttendanceStrategyFactory
from src.intern_attendance.intern_attendance.attendance.strategies.late_strategy import LateStrategy
from src.intern_attendance.intern_attendance.attendance.strategies.on_time_strategy import OnTimeStrategy
from src.intern_attendance.intern_attendance.core.enums import AttendanceStatus


def test_factory_checkin_on_time_at_threshold():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(arrival="08:00", threshold="08:00")

    assert isinstance(strategy, OnTimeStrategy)
    assert strategy.decide_checkin(arrival_minutes=480, threshold_minutes=480).status == AttendanceStatus.HADIR


def test_factory_checkin_late_after_threshold():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(arrival="08:06", threshold="08:00")

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide_checkin(arrival_minutes=486, threshold_minutes=480)
    assert decision.status == AttendanceStatus.TELAT
    assert decision.note == "Terlambat 6 menit"
