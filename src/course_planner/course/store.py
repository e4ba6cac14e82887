"""SegmentStore: the single source of truth for a course under construction.

The store holds the fixed start point and the ordered list of resolved legs.
Every mutation recomposes the flat path eagerly, so :attr:`SegmentStore.path`
is always consistent with the segments.

``generation`` is bumped by every operation that removes or replaces legs
(undo, reset, import).  Callers stamp asynchronous work with the generation
at issue time and compare on completion to detect stale results.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from course_planner.course.compositor import compose_path
from course_planner.errors import CoursePlannerError
from course_planner.geo.models import GeoPoint

_logger = logging.getLogger(__name__)

Segment = tuple[GeoPoint, ...]


class InvalidStateError(CoursePlannerError):
    """Raised when an operation is attempted in the wrong store state."""


class SegmentStore:
    """Ordered legs of a course plus its start point."""

    def __init__(self) -> None:
        self._start: GeoPoint | None = None
        self._segments: list[Segment] = []
        self._path: tuple[GeoPoint, ...] = ()
        self._generation = 0

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def start(self) -> GeoPoint | None:
        return self._start

    @property
    def segments(self) -> tuple[Segment, ...]:
        return tuple(self._segments)

    @property
    def path(self) -> tuple[GeoPoint, ...]:
        """The composed path, rebuilt after every mutation."""
        return self._path

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_empty(self) -> bool:
        return self._start is None

    @property
    def tail(self) -> GeoPoint | None:
        """Last point of the composed path (``None`` on an empty store)."""
        return self._path[-1] if self._path else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_start(self, point: GeoPoint) -> None:
        """Set the start point of a new course.

        Raises:
            InvalidStateError: If a start point is already set.
        """
        if self._start is not None:
            raise InvalidStateError("Start point already set; reset the course first")
        self._start = point
        self._segments = []
        self._recompose()

    def append_segment(self, coords: Sequence[GeoPoint]) -> None:
        """Append one resolved leg.

        Raises:
            InvalidStateError: If no start point is set.
            ValueError: If *coords* is empty.
        """
        if self._start is None:
            raise InvalidStateError("Cannot append a segment before the start point is set")
        if not coords:
            raise ValueError("A segment needs at least one point")
        self._segments.append(tuple(coords))
        self._recompose()

    def undo(self) -> None:
        """Remove the last leg; with only a start point left, reset the course."""
        if self._start is None:
            return
        if not self._segments:
            self.reset()
            return
        self._segments.pop()
        self._generation += 1
        self._recompose()

    def reset(self) -> None:
        """Clear the start point and every leg."""
        self._start = None
        self._segments = []
        self._generation += 1
        self._recompose()

    def replace_all(self, coords: Sequence[GeoPoint]) -> None:
        """Replace the whole course with *coords* as a single undoable leg.

        Raises:
            InvalidStateError: If *coords* has fewer than two points.
        """
        if len(coords) < 2:
            raise InvalidStateError(
                f"Imported course needs at least 2 points, got {len(coords)}"
            )
        self._start = coords[0]
        self._segments = [tuple(coords)]
        self._generation += 1
        self._recompose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _recompose(self) -> None:
        self._path = compose_path(self._start, self._segments)
        _logger.debug(
            "Recomposed path: %d segments, %d points, generation %d",
            len(self._segments),
            len(self._path),
            self._generation,
        )
