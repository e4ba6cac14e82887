"""Leg resolution against an external routing service."""

from course_planner.routing.client import OSRMClient, RoutingClient, RoutingError
from course_planner.routing.models import LegRequest, LegResult, LegStatus, TravelMode
from course_planner.routing.resolver import LegCompletion, LegResolver

__all__ = [
    "LegCompletion",
    "LegRequest",
    "LegResolver",
    "LegResult",
    "LegStatus",
    "OSRMClient",
    "RoutingClient",
    "RoutingError",
    "TravelMode",
]
