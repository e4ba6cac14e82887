"""CourseSession: wires the controller, routing worker and codec together.

This is the adapter layer that owns event wiring.  Every public method takes
the session lock, first applies any routing completions that have already
arrived, then performs its action, so the segment store is only mutated by
one thread at a time.
"""

from __future__ import annotations

import datetime
import logging
import threading
import time

from course_planner.config import Settings
from course_planner.course.controller import CourseSnapshot, RouteController
from course_planner.course.progress import (
    CourseProgress,
    evaluate_progress,
    export_filename,
    format_distance_summary,
)
from course_planner.geo.models import GeoPoint
from course_planner.gpx.codec import decode, encode
from course_planner.routing.client import OSRMClient, RoutingClient
from course_planner.routing.models import LegRequest, TravelMode
from course_planner.routing.resolver import LegResolver

_logger = logging.getLogger(__name__)


class CourseSession:
    """One interactive course under construction.

    Parameters
    ----------
    routing_client:
        Routing collaborator.  Defaults to an :class:`OSRMClient` built from
        *settings*; inject a fake in tests.
    settings:
        Configuration; read from the environment when omitted.
    """

    def __init__(
        self,
        routing_client: RoutingClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or Settings.from_env()
        if routing_client is None:
            routing_client = OSRMClient(
                base_url=settings.osrm_url,
                timeout=settings.routing_timeout,
                per_profile_prefix=settings.osrm_per_profile_prefix,
            )
        self._controller = RouteController(
            mode=settings.default_mode, serialize=settings.serialize_legs
        )
        self._resolver = LegResolver(routing_client)
        self._resolver.start()
        self._lock = threading.RLock()
        self._target_km: float | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Stop the routing worker."""
        self._resolver.stop()

    def pump(self) -> int:
        """Apply every routing completion that has arrived; return how many."""
        with self._lock:
            applied = 0
            while True:
                completion = self._resolver.get_completion(timeout=0.0)
                if completion is None:
                    return applied
                self._apply(completion.request, completion.result)
                applied += 1

    def wait_idle(self, timeout: float = 5.0) -> bool:
        """Block until no leg is pending; return False on timeout."""
        deadline = time.monotonic() + timeout
        with self._lock:
            self.pump()
            while self._controller.pending_legs > 0:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                completion = self._resolver.get_completion(timeout=remaining)
                if completion is not None:
                    self._apply(completion.request, completion.result)
            return True

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def click(self, point: GeoPoint) -> CourseSnapshot:
        with self._lock:
            self.pump()
            self._dispatch(self._controller.click(point))
            return self._controller.snapshot()

    def undo(self) -> CourseSnapshot:
        with self._lock:
            self.pump()
            self._controller.undo()
            return self._controller.snapshot()

    def reset(self) -> CourseSnapshot:
        with self._lock:
            self._controller.reset()
            return self._controller.snapshot()

    def set_mode(self, mode: TravelMode) -> CourseSnapshot:
        with self._lock:
            self._controller.mode = mode
            return self.snapshot()

    def set_target(self, target_km: float | None) -> CourseProgress:
        with self._lock:
            self._target_km = target_km if target_km and target_km > 0 else None
            return self.progress()

    def import_gpx(self, text: str) -> CourseSnapshot:
        """Replace the course with the track in *text*.

        Raises:
            TrackImportError: If the document cannot be used; the current
                course is left unchanged.
        """
        points = decode(text)
        with self._lock:
            self._controller.load_track(points)
            return self._controller.snapshot()

    def export_gpx(self, now: datetime.datetime | None = None) -> tuple[str, str]:
        """Return ``(filename, gpx_text)`` for the current course.

        Raises:
            ExportPreconditionError: If the course has fewer than two points.
        """
        with self._lock:
            self.pump()
            when = now or datetime.datetime.now(datetime.timezone.utc)
            text = encode(self._controller.store.path, when)
            return export_filename(self._controller.distance_km), text

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def controller(self) -> RouteController:
        return self._controller

    @property
    def target_km(self) -> float | None:
        return self._target_km

    def snapshot(self) -> CourseSnapshot:
        with self._lock:
            self.pump()
            return self._controller.snapshot()

    def progress(self) -> CourseProgress:
        with self._lock:
            self.pump()
            return evaluate_progress(self._controller.distance_km, self._target_km)

    def summary(self) -> str:
        return format_distance_summary(self.progress())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _apply(self, request: LegRequest, result) -> None:
        self._dispatch(self._controller.complete(request, result))

    def _dispatch(self, request: LegRequest | None) -> None:
        if request is not None:
            _logger.debug("Dispatching leg #%d (%s)", request.seq, request.mode.value)
            self._resolver.submit(request)
