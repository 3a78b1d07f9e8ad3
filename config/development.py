import json
import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "intern_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

ORG_TIMEZONE = os.getenv("ORG_TIMEZONE", "Asia/Jakarta")
# Used until an admin saves a threshold for the first time
DEFAULT_LATE_THRESHOLD = os.getenv("DEFAULT_LATE_THRESHOLD", "08:00")
# Poin per status untuk perhitungan absen, contoh: '{"Telat": 0.8}'
ATTENDANCE_POINTS = json.loads(os.getenv("ATTENDANCE_POINTS", "{}"))

# Empty string disables reverse geocoding
GEOCODER_URL = os.getenv("GEOCODER_URL", "https://nominatim.openstreetmap.org/reverse")
GEOCODER_TIMEOUT = float(os.getenv("GEOCODER_TIMEOUT", "3"))

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
MAX_PHOTO_BYTES = int(os.getenv("MAX_PHOTO_BYTES", str(5 * 1024 * 1024)))
QR_HISTORY_DAYS = int(os.getenv("QR_HISTORY_DAYS", "7"))
