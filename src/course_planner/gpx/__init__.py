"""GPX export and import of composed course paths."""

from course_planner.gpx.codec import (
    ExportPreconditionError,
    ImportInsufficientPointsError,
    ImportMalformedError,
    TrackImportError,
    decode,
    encode,
)

__all__ = [
    "ExportPreconditionError",
    "ImportInsufficientPointsError",
    "ImportMalformedError",
    "TrackImportError",
    "decode",
    "encode",
]
