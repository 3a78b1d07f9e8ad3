import json
import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "intern_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

ORG_TIMEZONE = os.getenv("ORG_TIMEZONE", "Asia/Jakarta")
DEFAULT_LATE_THRESHOLD = os.getenv("DEFAULT_LATE_THRESHOLD", "08:00")
ATTENDANCE_POINTS = json.loads(os.getenv("ATTENDANCE_POINTS", "{}"))

GEOCODER_URL = os.getenv("GEOCODER_URL", "")
GEOCODER_TIMEOUT = float(os.getenv("GEOCODER_TIMEOUT", "3"))

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "/var/lib/intern-attendance/uploads")
MAX_PHOTO_BYTES = int(os.getenv("MAX_PHOTO_BYTES", str(5 * 1024 * 1024)))
QR_HISTORY_DAYS = int(os.getenv("QR_HISTORY_DAYS", "7"))
