from __future__ import annotations

from flask import jsonify

from ..core.exceptions import (
    CameraUnavailable,
    DomainError,
    DuplicateEvent,
    LocationUnavailable,
    NotFoundError,
    OutOfOrderEvent,
    OutsideGeofence,
    StoreFailure,
    ValidationError,
)

_STATUS_CODES = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (LocationUnavailable, 422),
    (OutsideGeofence, 403),
    (CameraUnavailable, 422),
    (DuplicateEvent, 409),
    (OutOfOrderEvent, 409),
    (StoreFailure, 503),
)


def status_code_for(error: DomainError) -> int:
    for exc_type, code in _STATUS_CODES:
        if isinstance(error, exc_type):
            return code
    return 400


def error_response(error: DomainError, **extra):
    body = {"success": False, "error": type(error).__name__, "message": str(error)}
    if isinstance(error, OutsideGeofence):
        body["distanceMeters"] = round(error.distance_km * 1000)
    body.update(extra)
    return jsonify(body), status_code_for(error)
