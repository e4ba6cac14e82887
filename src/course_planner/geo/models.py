"""Geographic data models."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    """A WGS-84 coordinate pair.

    Immutable and hashable.  Equality is exact coordinate equality.

    Raises:
        ValueError: If either coordinate is non-finite or out of range.
    """

    latitude: float
    """Latitude in degrees [-90.0, 90.0]."""

    longitude: float
    """Longitude in degrees [-180.0, 180.0]."""

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(
                f"Coordinates must be finite, got ({self.latitude!r}, {self.longitude!r})"
            )
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range [-90, 90]: {self.latitude!r}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range [-180, 180]: {self.longitude!r}")

    @classmethod
    def from_dict(cls, d: dict) -> GeoPoint:
        """Create a :class:`GeoPoint` from a ``{"lat": .., "lng": ..}`` dict."""
        return cls(latitude=float(d["lat"]), longitude=float(d["lng"]))

    def to_dict(self) -> dict:
        """Return the ``{"lat": .., "lng": ..}`` form used by map front-ends."""
        return {"lat": self.latitude, "lng": self.longitude}
