from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeoCoordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class PresenceCheck:
    """Outcome of a geofence check; distance is reported either way."""

    allowed: bool
    distance_km: float
