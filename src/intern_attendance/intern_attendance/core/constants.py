"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_THRESHOLD = "08:00"
DEFAULT_ORG_TIMEZONE = "Asia/Jakarta"
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_QR_HISTORY_DAYS = 7
DEFAULT_GEOCODER_TIMEOUT = 3.0
DEFAULT_MAX_PHOTO_BYTES = 5 * 1024 * 1024

# Bobot komponen penilaian (total 100)
ABSEN_MAX = 35.0
KUANTITAS_MAX = 30.0
KUALITAS_MAX = 30.0
LAPORAN_POINTS = 5.0

DEFAULT_ATTENDANCE_POINTS = {
    "Hadir": 1.0,
    "Telat": 0.75,
    "Izin": 0.5,
    "Sakit": 0.5,
    "Alpha": 0.0,
}
