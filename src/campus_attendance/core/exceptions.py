from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""


class LocationUnavailable(DomainError):
    """No location fix could be acquired within the timeout."""


class OutsideGeofence(DomainError):
    """A fix was acquired but lies outside the institution radius."""

    def __init__(self, distance_km: float, radius_km: float):
        self.distance_km = float(distance_km)
        self.radius_km = float(radius_km)
        super().__init__(
            "You must be within the institution premises to record attendance. "
            f"You are {self.distance_km * 1000:.0f} meters away."
        )


class CameraUnavailable(DomainError):
    """The image capture device is missing or access was denied."""


class DuplicateEvent(DomainError):
    """The event was already recorded for that employee and day."""


class OutOfOrderEvent(DomainError):
    """A check-out was submitted before any check-in for the day."""


class StoreFailure(DomainError):
    """Persistence failed; the caller may retry with the same payload."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
