from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Optional, Protocol

from ..common.validators import require_float
from ..core.exceptions import LocationUnavailable, ValidationError
from .model import GeoCoordinate

logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    """Source of the device position (browser geolocation, GPS, ...)."""

    def current_location(self) -> GeoCoordinate:
        raise NotImplementedError


class FixedLocationProvider(LocationProvider):
    """Position reported by the client alongside the request."""

    def __init__(self, latitude, longitude):
        self._latitude = latitude
        self._longitude = longitude

    def current_location(self) -> GeoCoordinate:
        if self._latitude is None or self._longitude is None:
            raise LocationUnavailable("Unable to get your location. Please enable location services.")
        try:
            lat = require_float(self._latitude, "latitude")
            lng = require_float(self._longitude, "longitude")
        except ValidationError as e:
            raise LocationUnavailable(str(e))
        if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
            raise LocationUnavailable("Reported location is out of range")
        return GeoCoordinate(latitude=lat, longitude=lng)


_pool: Optional[ThreadPoolExecutor] = None


def _executor() -> ThreadPoolExecutor:
    global _pool
    if _pool is None:
        _pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="location")
    return _pool


def acquire_location(provider: LocationProvider, *, timeout_seconds: float) -> GeoCoordinate:
    """Ask the provider for a fix, giving up after `timeout_seconds`.

    Any provider failure (permission denied, no fix) and the timeout both
    surface as LocationUnavailable.
    """

    future = _executor().submit(provider.current_location)
    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeout:
        future.cancel()
        logger.info("location fix timed out after %.1fs", timeout_seconds)
        raise LocationUnavailable("Timed out while acquiring your location.")
    except LocationUnavailable:
        raise
    except Exception as e:
        logger.info("location provider failed: %s", e)
        raise LocationUnavailable("Unable to get your location. Please enable location services.") from e
