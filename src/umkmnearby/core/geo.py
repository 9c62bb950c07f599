from __future__ import annotations

import math
from math import asin, cos, radians, sin, sqrt
from typing import Protocol

"""
Geospatial helpers.

A tiny geometry layer so discovery code can do distance calculations
without pulling in heavier GIS dependencies.
"""

EARTH_RADIUS_KM = 6371.0


class InvalidCoordinateError(ValueError):
    """Raised when a distance is requested for a non-finite latitude/longitude."""


class HasLatLon(Protocol):
    latitude: float
    longitude: float


def is_finite_coordinate(point: HasLatLon | None) -> bool:
    """True when `point` exists and both of its components are finite numbers."""
    if point is None:
        return False
    try:
        return math.isfinite(float(point.latitude)) and math.isfinite(float(point.longitude))
    except (TypeError, ValueError, AttributeError):
        return False


def haversine_km(a: HasLatLon, b: HasLatLon) -> float:
    """Compute great-circle distance in kilometers between two points.

    Ranges are not validated, but both points must be finite: callers pre-filter with
    `is_finite_coordinate`.

    Raises:
        InvalidCoordinateError: If either point has a non-finite latitude or longitude.
    """
    if not is_finite_coordinate(a) or not is_finite_coordinate(b):
        raise InvalidCoordinateError("haversine_km requires finite latitude/longitude on both points")

    lat1 = radians(a.latitude)
    lon1 = radians(a.longitude)
    lat2 = radians(b.latitude)
    lon2 = radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h slightly above 1 for antipodal points.
    return 2 * EARTH_RADIUS_KM * asin(sqrt(min(1.0, h)))
