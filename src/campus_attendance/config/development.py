import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
}

# Institution anchor and geofence
INSTITUTION_LATITUDE = float(os.getenv("INSTITUTION_LATITUDE", "14.5995"))
INSTITUTION_LONGITUDE = float(os.getenv("INSTITUTION_LONGITUDE", "120.9842"))
GEOFENCE_RADIUS_KM = float(os.getenv("GEOFENCE_RADIUS_KM", "0.1"))

# Check-ins after this time-of-day are late
EXPECTED_ARRIVAL = os.getenv("EXPECTED_ARRIVAL", "08:11")

LOCATION_TIMEOUT_SECONDS = float(os.getenv("LOCATION_TIMEOUT_SECONDS", "5"))
CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))
CAMERA_BACKEND = os.getenv("CAMERA_BACKEND", "client")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
