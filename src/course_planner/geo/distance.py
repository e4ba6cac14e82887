"""Great-circle distance on a spherical Earth (haversine)."""

from __future__ import annotations

import math
from collections.abc import Sequence

from course_planner.geo.models import GeoPoint

EARTH_RADIUS_M = 6_371_000.0  # mean Earth radius


def haversine_m(p1: GeoPoint, p2: GeoPoint) -> float:
    """Return the great-circle distance between *p1* and *p2* in metres.

    ``a`` is clamped to ``[0, 1]`` so rounding on identical or antipodal
    points can never push ``sqrt`` into a domain error or NaN.
    """
    phi1 = math.radians(p1.latitude)
    phi2 = math.radians(p2.latitude)
    d_phi = math.radians(p2.latitude - p1.latitude)
    d_lambda = math.radians(p2.longitude - p1.longitude)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    a = min(1.0, max(0.0, a))

    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def total_distance_km(path: Sequence[GeoPoint]) -> float:
    """Return the length of *path* in kilometres.

    Returns 0.0 for paths with fewer than two points.
    """
    if len(path) < 2:
        return 0.0

    total_m = sum(haversine_m(path[i], path[i + 1]) for i in range(len(path) - 1))
    return total_m / 1000.0
