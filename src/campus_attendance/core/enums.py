from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status persisted with each daily record."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half-day"
    LEAVE = "leave"


class EventKind(str, Enum):
    """The two capture events a staff member can record in a day."""

    CHECK_IN = "checkIn"
    CHECK_OUT = "checkOut"


class CaptureState(str, Enum):
    IDLE = "idle"
    LOCATION_CHECK = "location_check"
    CAMERA_OPEN = "camera_open"
    CAPTURED = "captured"
