"""Course construction: segment store, path compositor, controller."""

from course_planner.course.compositor import compose_path
from course_planner.course.controller import CourseSnapshot, RouteController
from course_planner.course.progress import (
    TOLERANCE_KM,
    CourseProgress,
    evaluate_progress,
    export_filename,
    format_distance_summary,
)
from course_planner.course.store import InvalidStateError, Segment, SegmentStore

__all__ = [
    "TOLERANCE_KM",
    "CourseProgress",
    "CourseSnapshot",
    "InvalidStateError",
    "RouteController",
    "Segment",
    "SegmentStore",
    "compose_path",
    "evaluate_progress",
    "export_filename",
    "format_distance_summary",
]
