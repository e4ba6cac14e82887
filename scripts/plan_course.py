"""Build a running course from waypoints, or summarise a GPX course.

Usage:
  python scripts/plan_course.py build 35.945,126.682 35.950,126.690 \\
      --mode cycling --target-km 5 --output course.gpx
  python scripts/plan_course.py build 35.945,126.682 35.950,126.690 --straight
  python scripts/plan_course.py inspect course.gpx --target-km 5

Routing uses COURSE_PLANNER_OSRM_URL (see .env); legs that cannot be routed
fall back to straight lines.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from course_planner.config import Settings  # noqa: E402
from course_planner.course.controller import RouteController  # noqa: E402
from course_planner.course.progress import (  # noqa: E402
    evaluate_progress,
    export_filename,
    format_distance_summary,
)
from course_planner.geo.distance import total_distance_km  # noqa: E402
from course_planner.geo.models import GeoPoint  # noqa: E402
from course_planner.gpx.codec import TrackImportError, decode, encode  # noqa: E402
from course_planner.routing.client import OSRMClient  # noqa: E402
from course_planner.routing.models import LegResult, TravelMode  # noqa: E402


def _parse_waypoint(text: str) -> GeoPoint:
    try:
        lat, lon = (float(v) for v in text.split(","))
        return GeoPoint(latitude=lat, longitude=lon)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid waypoint {text!r}: {exc}") from exc


def _build(args: argparse.Namespace, settings: Settings) -> int:
    client = OSRMClient(
        base_url=settings.osrm_url,
        timeout=settings.routing_timeout,
        per_profile_prefix=settings.osrm_per_profile_prefix,
    )
    controller = RouteController(mode=TravelMode(args.mode), serialize=True)

    for i, point in enumerate(args.waypoints, 1):
        request = controller.click(point)
        while request is not None:
            if args.straight:
                result = LegResult.not_ok()
            else:
                result = client.resolve_leg(request.origin, request.destination, request.mode)
            print(f"  leg {request.seq}: {len(result.polyline) or 2} points ({result.status.value})")
            request = controller.complete(request, result)
        print(f"{i}/{len(args.waypoints)}  {controller.distance_km:.2f} km")

    progress = evaluate_progress(controller.distance_km, args.target_km)
    print()
    print(format_distance_summary(progress))

    path = controller.store.path
    if len(path) < 2:
        print("  [!] Need at least two waypoints to export a course.", file=sys.stderr)
        return 1

    output = Path(args.output) if args.output else Path(export_filename(controller.distance_km))
    output.write_text(encode(path, datetime.now(timezone.utc)), encoding="utf-8")
    print(f"\n[OK] wrote {output}")
    return 0


def _inspect(args: argparse.Namespace) -> int:
    try:
        points = decode(Path(args.gpx).read_text(encoding="utf-8"))
    except (OSError, TrackImportError) as exc:
        print(f"  [!] {exc}", file=sys.stderr)
        return 1

    progress = evaluate_progress(total_distance_km(points), args.target_km)
    print(f"Track points : {len(points)}")
    print(format_distance_summary(progress))
    if progress.target_km is not None:
        print("Within tolerance" if progress.within_tolerance else "Outside tolerance")
    return 0


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Plan a running/cycling course")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Route waypoints and write a GPX file")
    build.add_argument("waypoints", nargs="+", type=_parse_waypoint, help="lat,lon pairs")
    build.add_argument("--mode", choices=[m.value for m in TravelMode], default=None)
    build.add_argument("--target-km", type=float, default=None, help="Target distance")
    build.add_argument("--straight", action="store_true", help="Skip routing")
    build.add_argument("--output", default=None, help="Output GPX path")

    inspect = sub.add_parser("inspect", help="Summarise an existing GPX course")
    inspect.add_argument("gpx", help="GPX file to read")
    inspect.add_argument("--target-km", type=float, default=None, help="Target distance")

    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = Settings.from_env()
    if args.command == "build":
        if args.mode is None:
            args.mode = settings.default_mode.value
        return _build(args, settings)
    return _inspect(args)


if __name__ == "__main__":
    sys.exit(main())
