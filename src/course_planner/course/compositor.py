"""Path compositor: flattens the segment list into one continuous path."""

from __future__ import annotations

from collections.abc import Sequence

from course_planner.geo.models import GeoPoint


def compose_path(
    start: GeoPoint | None, segments: Sequence[Sequence[GeoPoint]]
) -> tuple[GeoPoint, ...]:
    """Return the course as a single deduplicated point sequence.

    The result is *start* followed by every segment's points except the first,
    which is the join point shared with the previous leg.  Without a start the
    path is empty regardless of *segments*.

    Invariant: ``len(result) == 1 + sum(len(s) - 1 for s in segments)``.
    """
    if start is None:
        return ()

    path: list[GeoPoint] = [start]
    for seg in segments:
        path.extend(seg[1:])
    return tuple(path)
