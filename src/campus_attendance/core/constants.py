"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code. Runtime
values (anchor, radius, expected arrival) come from settings; these are only
the fallbacks.
"""

EARTH_RADIUS_KM = 6371.0

DEFAULT_INSTITUTION_LATITUDE = 14.5995
DEFAULT_INSTITUTION_LONGITUDE = 120.9842
DEFAULT_GEOFENCE_RADIUS_KM = 0.1
DEFAULT_EXPECTED_ARRIVAL = "08:11"
DEFAULT_LOCATION_TIMEOUT_SECONDS = 5.0
DEFAULT_CAMERA_INDEX = 0
DEFAULT_CAMERA_BACKEND = "client"

MISSING_TIME_PLACEHOLDER = "---------"
UNASSIGNED_DEPARTMENT = "Unassigned"
DEFAULT_EMPLOYMENT_TYPE = "Regular"
