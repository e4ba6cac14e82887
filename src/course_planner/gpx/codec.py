"""GPX track codec: composed path <-> GPX 1.1 track document.

Export writes one track with one segment; every point carries elevation 0 and
the same export timestamp (this is a course, not a GPS log).  Import flattens
every track point of every track and segment into a single path and rejects
the whole document if any coordinate is missing, non-numeric or out of range.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Sequence

import gpxpy
import gpxpy.gpx

from course_planner.errors import CoursePlannerError
from course_planner.geo.models import GeoPoint

_logger = logging.getLogger(__name__)

CREATOR = "RunningCoursePlanner"
TRACK_NAME = "Running Course"
MIN_POINTS = 2


class ExportPreconditionError(CoursePlannerError):
    """Raised when a course has too few points to export."""


class TrackImportError(CoursePlannerError):
    """Base class for GPX import failures."""


class ImportMalformedError(TrackImportError):
    """Raised when the document is not a valid GPX track document."""


class ImportInsufficientPointsError(TrackImportError):
    """Raised when the document holds fewer than two track points."""


def _parse_timestamp(timestamp: datetime.datetime | str) -> datetime.datetime:
    if isinstance(timestamp, datetime.datetime):
        return timestamp
    text = timestamp.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(text)


def encode(path: Sequence[GeoPoint], timestamp: datetime.datetime | str) -> str:
    """Serialize *path* as a GPX 1.1 document.

    Args:
        path: Composed course path.
        timestamp: Export time, a :class:`datetime.datetime` or ISO-8601 text.

    Raises:
        ExportPreconditionError: If *path* has fewer than two points.
        ValueError: If *timestamp* is not valid ISO-8601.
    """
    if len(path) < MIN_POINTS:
        raise ExportPreconditionError(
            f"Nothing to export: a course needs at least {MIN_POINTS} points, got {len(path)}"
        )

    when = _parse_timestamp(timestamp)

    gpx = gpxpy.gpx.GPX()
    gpx.creator = CREATOR
    gpx.time = when

    track = gpxpy.gpx.GPXTrack(name=TRACK_NAME)
    gpx.tracks.append(track)
    segment = gpxpy.gpx.GPXTrackSegment()
    track.segments.append(segment)

    for p in path:
        segment.points.append(
            gpxpy.gpx.GPXTrackPoint(
                latitude=p.latitude, longitude=p.longitude, elevation=0, time=when
            )
        )

    _logger.info("Encoded GPX track with %d points", len(path))
    return gpx.to_xml(version="1.1")


def decode(text: str) -> list[GeoPoint]:
    """Parse every track point in a GPX document into a flat path.

    Raises:
        ImportMalformedError: If *text* is not well-formed GPX, or any track
            point has an invalid coordinate.
        ImportInsufficientPointsError: If fewer than two track points exist.
    """
    try:
        gpx = gpxpy.parse(text)
    except (gpxpy.gpx.GPXException, ValueError) as exc:
        raise ImportMalformedError(f"Malformed GPX document: {exc}") from exc

    raw = [
        (pt.latitude, pt.longitude)
        for track in gpx.tracks
        for segment in track.segments
        for pt in segment.points
    ]

    if len(raw) < MIN_POINTS:
        raise ImportInsufficientPointsError(
            f"No usable GPX track: need at least {MIN_POINTS} track points, found {len(raw)}"
        )

    points: list[GeoPoint] = []
    for i, (lat, lon) in enumerate(raw):
        try:
            points.append(GeoPoint(latitude=float(lat), longitude=float(lon)))
        except (TypeError, ValueError) as exc:
            raise ImportMalformedError(f"Invalid coordinate at track point {i}: {exc}") from exc

    _logger.info("Decoded GPX track with %d points", len(points))
    return points
