"""Routing data models shared by the controller and routing clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from course_planner.geo.models import GeoPoint


class TravelMode(str, Enum):
    """Which routing profile a leg is resolved with."""

    WALKING = "walking"
    CYCLING = "cycling"

    @property
    def color(self) -> str:
        """Polyline colour hint for map front-ends (cosmetic only)."""
        return "#ffb545" if self is TravelMode.CYCLING else "#00c46a"


class LegStatus(str, Enum):
    OK = "OK"
    NOT_OK = "NOT_OK"


@dataclass(frozen=True)
class LegRequest:
    """One click-to-click leg awaiting resolution.

    ``generation`` is the store generation at issue time; a completion whose
    stamp no longer matches the store is stale and must be discarded.
    """

    origin: GeoPoint
    destination: GeoPoint
    mode: TravelMode
    generation: int
    seq: int
    """Issue order, for logging and tests."""


@dataclass(frozen=True)
class LegResult:
    """Outcome of a routing lookup."""

    status: LegStatus
    polyline: tuple[GeoPoint, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls, polyline) -> LegResult:
        return cls(status=LegStatus.OK, polyline=tuple(polyline))

    @classmethod
    def not_ok(cls) -> LegResult:
        return cls(status=LegStatus.NOT_OK)

    @property
    def is_usable(self) -> bool:
        """True when the result carries a polyline that can be appended as-is."""
        return self.status is LegStatus.OK and len(self.polyline) > 0
