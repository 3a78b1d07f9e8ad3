import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "intern_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

ORG_TIMEZONE = "Asia/Jakarta"
DEFAULT_LATE_THRESHOLD = "08:00"
ATTENDANCE_POINTS = {}

GEOCODER_URL = ""
GEOCODER_TIMEOUT = 1.0

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "/tmp/intern-attendance-uploads")
MAX_PHOTO_BYTES = 1024 * 1024
QR_HISTORY_DAYS = 7
