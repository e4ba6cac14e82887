"""OSRM routing client: resolves a leg into a road-following polyline.

Talks to an OSRM ``/route`` endpoint over HTTP and normalizes the response
into a :class:`~course_planner.routing.models.LegResult`.  Any transport,
decoding or service error is reported as ``NOT_OK`` so callers can apply
their fallback policy without handling exceptions.
"""

from __future__ import annotations

import logging
from typing import Protocol

import requests

from course_planner.errors import CoursePlannerError
from course_planner.geo.models import GeoPoint
from course_planner.routing.models import LegResult, TravelMode

_logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://routing.openstreetmap.de"

# OSRM profile per travel mode.  routing.openstreetmap.de serves each profile
# under its own path prefix (``/routed-foot``, ``/routed-bike``).
_PROFILES: dict[TravelMode, str] = {
    TravelMode.WALKING: "foot",
    TravelMode.CYCLING: "bike",
}


class RoutingError(CoursePlannerError):
    """Raised by :meth:`OSRMClient.route` when OSRM returns no usable route."""


class RoutingClient(Protocol):
    """Anything that can resolve a leg between two points."""

    def resolve_leg(
        self, origin: GeoPoint, destination: GeoPoint, mode: TravelMode
    ) -> LegResult: ...


class OSRMClient:
    """OSRM ``/route`` adapter.

    Args:
        base_url: Server root, e.g. ``https://routing.openstreetmap.de``.
        timeout: Seconds to wait for a response before giving up.
        per_profile_prefix: When True, requests go to
            ``{base_url}/routed-{profile}/route/v1/{profile}/...`` (the layout
            used by routing.openstreetmap.de).  Set False for a plain OSRM
            server that hosts the profile at ``{base_url}/route/v1/{profile}``.
        session: Optional :class:`requests.Session`, injected for testing.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        per_profile_prefix: bool = True,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("OSRM base URL must not be empty")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.per_profile_prefix = per_profile_prefix
        self._session = session or requests.Session()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_url(self, origin: GeoPoint, destination: GeoPoint, mode: TravelMode) -> str:
        """Return the ``/route`` URL for one leg (OSRM wants ``lon,lat``)."""
        profile = _PROFILES[mode]
        coords = ";".join(
            f"{p.longitude},{p.latitude}" for p in (origin, destination)
        )
        root = f"{self.base_url}/routed-{profile}" if self.per_profile_prefix else self.base_url
        return f"{root}/route/v1/{profile}/{coords}"

    def route(
        self, origin: GeoPoint, destination: GeoPoint, mode: TravelMode
    ) -> tuple[GeoPoint, ...]:
        """Return the full-resolution polyline from *origin* to *destination*.

        Raises:
            RoutingError: On HTTP failure, an undecodable body, or an OSRM
                response whose ``code`` is not ``"Ok"``.
        """
        url = self.build_url(origin, destination, mode)
        try:
            response = self._session.get(
                url,
                params={"overview": "full", "geometries": "geojson"},
                timeout=self.timeout,
            )
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise RoutingError(f"OSRM request failed: {exc}") from exc

        if not isinstance(data, dict) or data.get("code") != "Ok":
            message = data.get("message", "unknown error") if isinstance(data, dict) else data
            raise RoutingError(f"OSRM error: {message}")

        try:
            coordinates = data["routes"][0]["geometry"]["coordinates"]
            return tuple(GeoPoint(latitude=lat, longitude=lon) for lon, lat in coordinates)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise RoutingError(f"Malformed OSRM route geometry: {exc}") from exc

    def resolve_leg(
        self, origin: GeoPoint, destination: GeoPoint, mode: TravelMode
    ) -> LegResult:
        """Resolve one leg; returns ``NOT_OK`` instead of raising."""
        try:
            polyline = self.route(origin, destination, mode)
        except RoutingError as exc:
            _logger.warning("Leg resolution failed (%s): %s", mode.value, exc)
            return LegResult.not_ok()
        _logger.debug("Resolved %s leg with %d points", mode.value, len(polyline))
        return LegResult.ok(polyline)
