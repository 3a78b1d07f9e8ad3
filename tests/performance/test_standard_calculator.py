from src.intern_attendance.intern_attendance.core.enums import AttendanceStatus
from src.intern_attendance.intern_attendance.performance.calculator.standard_calculator import StandardScoreCalculator


def test_eighteen_points_over_22_days():
    calc = StandardScoreCalculator()

    assert calc.absen(total_points=18, total_working_days=22) == 28.64


def test_absen_is_clamped_and_zero_without_working_days():
    calc = StandardScoreCalculator()

    assert calc.absen(total_points=30, total_working_days=22) == 35.0
    assert calc.absen(total_points=5, total_working_days=0) == 0.0


def test_default_point_table():
    calc = StandardScoreCalculator()

    assert calc.points_for(AttendanceStatus.HADIR) == 1.0
    assert calc.points_for(AttendanceStatus.TELAT) == 0.75
    assert calc.points_for(AttendanceStatus.IZIN) == 0.5
    assert calc.points_for(AttendanceStatus.SAKIT) == 0.5
    assert calc.points_for(AttendanceStatus.ALPHA) == 0.0
    assert calc.points_for(AttendanceStatus.HARI_LIBUR) == 0.0


def test_point_table_can_be_overridden():
    calc = StandardScoreCalculator({"Telat": 0.5})

    assert calc.points_for(AttendanceStatus.TELAT) == 0.5
    assert calc.points_for(AttendanceStatus.HADIR) == 1.0


def test_hasil_adds_laporan_bonus():
    calc = StandardScoreCalculator()

    assert calc.hasil(absen=28.64, kuantitas=25, kualitas=27.5, laporan=True) == 86.14
    assert calc.hasil(absen=35, kuantitas=30, kualitas=30, laporan=True) == 100.0
    assert calc.hasil(absen=0, kuantitas=0, kualitas=0, laporan=False) == 0.0
