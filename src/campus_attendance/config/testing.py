import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance_test"),
}

INSTITUTION_LATITUDE = 14.5995
INSTITUTION_LONGITUDE = 120.9842
GEOFENCE_RADIUS_KM = 0.1

EXPECTED_ARRIVAL = "08:11"

LOCATION_TIMEOUT_SECONDS = 1.0
CAMERA_INDEX = 0
CAMERA_BACKEND = "client"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
