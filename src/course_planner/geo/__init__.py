"""Geographic primitives and geodesic distance."""

from course_planner.geo.distance import EARTH_RADIUS_M, haversine_m, total_distance_km
from course_planner.geo.models import GeoPoint

__all__ = ["EARTH_RADIUS_M", "GeoPoint", "haversine_m", "total_distance_km"]
