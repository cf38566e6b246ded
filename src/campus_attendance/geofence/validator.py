from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

from ..core.constants import EARTH_RADIUS_KM
from .model import GeoCoordinate, PresenceCheck


def haversine_km(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Great-circle distance between two coordinates, in kilometres."""
    phi1, phi2 = radians(a.latitude), radians(b.latitude)
    d_phi = radians(b.latitude - a.latitude)
    d_lambda = radians(b.longitude - a.longitude)

    h = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def verify_presence(anchor: GeoCoordinate, device_location: GeoCoordinate, radius_km: float) -> PresenceCheck:
    distance_km = haversine_km(anchor, device_location)
    return PresenceCheck(allowed=distance_km <= radius_km, distance_km=distance_km)
