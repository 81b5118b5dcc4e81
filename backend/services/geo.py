"""Geofence validation for check-in attempts."""

import math
from dataclasses import dataclass
from typing import Optional

from config import GEOFENCE_TOLERANCE_M
from services.errors import INVALID_COORDINATES, LOCATION_INACTIVE, OUT_OF_RANGE

EARTH_RADIUS_M = 6371000


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Calculate the great-circle distance between two points in meters."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_valid_coordinate(latitude, longitude) -> bool:
    """True for finite numbers inside the WGS84 latitude/longitude ranges."""
    for value in (latitude, longitude):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value):
            return False
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


@dataclass(frozen=True)
class GeoResult:
    admitted: bool
    reason: Optional[str] = None
    distance_m: Optional[float] = None


def validate_position(latitude, longitude, location) -> GeoResult:
    """Decide whether a claimed position lies inside a location's geofence.

    ``location`` needs ``latitude``, ``longitude``, ``radius_m`` and
    ``is_active``. A position exactly on the boundary is admitted.
    """
    if not location.is_active:
        return GeoResult(admitted=False, reason=LOCATION_INACTIVE)

    if not is_valid_coordinate(latitude, longitude):
        return GeoResult(admitted=False, reason=INVALID_COORDINATES)

    distance = haversine_distance(latitude, longitude, location.latitude, location.longitude)
    if distance > location.radius_m + GEOFENCE_TOLERANCE_M:
        return GeoResult(admitted=False, reason=OUT_OF_RANGE, distance_m=distance)

    return GeoResult(admitted=True, distance_m=distance)
