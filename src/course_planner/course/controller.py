"""RouteController: turns map clicks into resolved legs of a course.

State machine over a :class:`~course_planner.course.store.SegmentStore`:

* **Empty**: a click sets the start point, no routing request is made.
* **Anchored**: a click produces a :class:`LegRequest` that the caller hands
  to a routing collaborator; the outcome comes back through :meth:`complete`.

A failed lookup, or one that returns an empty polyline, is replaced by a
straight line between the two clicks so the course always follows the user.

Ordering policy:

* ``serialize=True`` (default): at most one leg is in flight.  Further clicks
  are queued and dispatched one at a time, each starting from the path tail
  at dispatch time, so consecutive segments always join.
* ``serialize=False``: every click is dispatched at once, starting from the
  previous click.  Completions append in the order they arrive, which may
  differ from click order.

Undo, reset and import bump the store generation.  Any completion stamped
with an older generation is discarded.
"""

from __future__ import annotations

import itertools
import logging
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from course_planner.course.store import SegmentStore
from course_planner.geo.distance import total_distance_km
from course_planner.geo.models import GeoPoint
from course_planner.routing.models import LegRequest, LegResult, TravelMode

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseSnapshot:
    """Everything a map/info display needs after a change."""

    start: GeoPoint | None
    path: tuple[GeoPoint, ...]
    distance_km: float
    segment_count: int
    pending_legs: int
    mode: TravelMode

    @property
    def color(self) -> str:
        return self.mode.color


class RouteController:
    """Drives a :class:`SegmentStore` from user interaction.

    Parameters
    ----------
    store:
        Store to drive; a fresh one is created when omitted.
    mode:
        Initial travel mode.
    serialize:
        Keep at most one leg in flight (see module docstring).
    """

    def __init__(
        self,
        store: SegmentStore | None = None,
        mode: TravelMode = TravelMode.WALKING,
        serialize: bool = True,
    ) -> None:
        self._store = store if store is not None else SegmentStore()
        self._mode = mode
        self._serialize = serialize
        self._seq = itertools.count(1)
        self._listeners: list[Callable[[CourseSnapshot], None]] = []

        # serialize=True
        self._in_flight: LegRequest | None = None
        self._queued: deque[GeoPoint] = deque()

        # serialize=False
        self._anchor: GeoPoint | None = self._store.tail
        self._outstanding: set[int] = set()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def store(self) -> SegmentStore:
        return self._store

    @property
    def serialize(self) -> bool:
        return self._serialize

    @property
    def mode(self) -> TravelMode:
        return self._mode

    @mode.setter
    def mode(self, value: TravelMode) -> None:
        self._mode = TravelMode(value)
        self._notify()

    @property
    def pending_legs(self) -> int:
        """Legs clicked but not yet appended."""
        if self._serialize:
            return (1 if self._in_flight is not None else 0) + len(self._queued)
        return len(self._outstanding)

    @property
    def distance_km(self) -> float:
        return total_distance_km(self._store.path)

    def snapshot(self) -> CourseSnapshot:
        return CourseSnapshot(
            start=self._store.start,
            path=self._store.path,
            distance_km=self.distance_km,
            segment_count=len(self._store.segments),
            pending_legs=self.pending_legs,
            mode=self._mode,
        )

    def register_listener(self, callback: Callable[[CourseSnapshot], None]) -> None:
        """Call *callback* with a fresh snapshot after every change."""
        self._listeners.append(callback)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def click(self, point: GeoPoint) -> LegRequest | None:
        """Handle a map click.

        Returns the :class:`LegRequest` to dispatch now, or None when the
        click set the start point or was queued behind an in-flight leg.
        """
        if self._store.is_empty:
            self._store.set_start(point)
            self._anchor = point
            _logger.info("Course started at (%.6f, %.6f)", point.latitude, point.longitude)
            self._notify()
            return None

        if self._serialize:
            if self._in_flight is not None:
                self._queued.append(point)
                self._notify()
                return None
            request = self._issue(self._store.tail, point)
            self._in_flight = request
        else:
            request = self._issue(self._anchor, point)
            self._anchor = point
            self._outstanding.add(request.seq)

        self._notify()
        return request

    def complete(self, request: LegRequest, result: LegResult) -> LegRequest | None:
        """Apply the outcome of *request*.

        Returns the next queued :class:`LegRequest` to dispatch (serialized
        mode only), otherwise None.
        """
        self._outstanding.discard(request.seq)
        if self._in_flight is not None and self._in_flight.seq == request.seq:
            self._in_flight = None

        if request.generation != self._store.generation:
            _logger.debug(
                "Discarding stale leg #%d (generation %d, store at %d)",
                request.seq,
                request.generation,
                self._store.generation,
            )
            return None

        if result.is_usable:
            coords: Sequence[GeoPoint] = result.polyline
        else:
            _logger.warning(
                "Leg #%d unresolved (%s); using straight line", request.seq, result.status.value
            )
            coords = (request.origin, request.destination)

        self._store.append_segment(coords)

        next_request = self._dispatch_queued()
        self._notify()
        return next_request

    def undo(self) -> None:
        """Remove the last leg (or the start point if no legs remain)."""
        self._store.undo()
        self._drop_pending()
        self._anchor = self._store.tail
        self._notify()

    def reset(self) -> None:
        """Clear the whole course."""
        self._store.reset()
        self._drop_pending()
        self._anchor = None
        self._notify()

    def load_track(self, coords: Sequence[GeoPoint]) -> None:
        """Replace the course with an imported track (one undoable leg).

        Raises:
            InvalidStateError: If *coords* has fewer than two points; the
                course is left unchanged.
        """
        self._store.replace_all(coords)
        self._drop_pending()
        self._anchor = self._store.tail
        _logger.info("Loaded track with %d points", len(coords))
        self._notify()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _issue(self, origin: GeoPoint | None, destination: GeoPoint) -> LegRequest:
        assert origin is not None  # store is anchored
        return LegRequest(
            origin=origin,
            destination=destination,
            mode=self._mode,
            generation=self._store.generation,
            seq=next(self._seq),
        )

    def _dispatch_queued(self) -> LegRequest | None:
        if not self._serialize or self._in_flight is not None or not self._queued:
            return None
        request = self._issue(self._store.tail, self._queued.popleft())
        self._in_flight = request
        return request

    def _drop_pending(self) -> None:
        self._in_flight = None
        self._queued.clear()
        self._outstanding.clear()

    def _notify(self) -> None:
        snap = self.snapshot()
        for cb in self._listeners:
            cb(snap)
