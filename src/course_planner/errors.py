"""Exception hierarchy shared by all course_planner modules."""


class CoursePlannerError(Exception):
    """Base class for every error raised by course_planner."""
