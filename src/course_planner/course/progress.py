"""Course distance vs. target: presentation helpers for info displays."""

from __future__ import annotations

from dataclasses import dataclass

TOLERANCE_KM = 0.2


@dataclass(frozen=True)
class CourseProgress:
    """Current distance compared with an optional target."""

    current_km: float
    target_km: float | None = None
    diff_km: float | None = None
    """``current_km - target_km``; None without a target."""

    within_tolerance: bool = False
    """True when ``|diff_km| <= TOLERANCE_KM``."""


def evaluate_progress(
    current_km: float, target_km: float | None, tolerance_km: float = TOLERANCE_KM
) -> CourseProgress:
    """Compare *current_km* with *target_km*.

    A missing or non-positive target means "no target".
    """
    if not target_km or target_km <= 0:
        return CourseProgress(current_km=current_km)

    diff = current_km - target_km
    # 5.20 - 5.00 must count as 0.20.
    within = round(abs(diff), 6) <= tolerance_km
    return CourseProgress(
        current_km=current_km,
        target_km=target_km,
        diff_km=diff,
        within_tolerance=within,
    )


def format_distance_summary(progress: CourseProgress) -> str:
    """Return the multi-line distance summary shown on request."""
    lines = [f"Current course distance: {progress.current_km:.2f} km"]
    if progress.target_km is not None and progress.diff_km is not None:
        lines.append(f"Target distance: {progress.target_km:.2f} km")
        lines.append(f"Difference: {progress.diff_km:.2f} km")
    return "\n".join(lines)


def export_filename(distance_km: float) -> str:
    """File name offered for a GPX download, tagged with the distance."""
    return f"running-course-{distance_km:.2f}km.gpx"
