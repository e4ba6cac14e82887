"""FastAPI adapter for the course planner.

A map front-end posts clicks and reads back the composed course; routing
happens in the background, so clients poll ``GET /api/course`` until
``pending_legs`` drops to zero.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Response

from course_planner.course.controller import CourseSnapshot
from course_planner.course.progress import evaluate_progress
from course_planner.course.store import InvalidStateError
from course_planner.geo.models import GeoPoint
from course_planner.gpx.codec import ExportPreconditionError, TrackImportError
from course_planner.web.schemas import (
    CourseResponse,
    HealthResponse,
    ImportRequest,
    ModeRequest,
    PointModel,
    SummaryResponse,
    TargetRequest,
)
from course_planner.web.service import CourseSession

load_dotenv()  # loads .env from project root; must run before env vars are consumed

VERSION = "0.1.0"

_session: CourseSession | None = None


def get_session() -> CourseSession:
    """Return the process-wide course session, creating it on first use."""
    global _session
    if _session is None:
        _session = CourseSession()
    return _session


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield
    if _session is not None:
        _session.close()


app = FastAPI(title="Running Course Planner", version=VERSION, lifespan=_lifespan)


def _course_response(snap: CourseSnapshot, session: CourseSession) -> CourseResponse:
    progress = evaluate_progress(snap.distance_km, session.target_km)
    return CourseResponse(
        start=PointModel(**snap.start.to_dict()) if snap.start else None,
        path=[PointModel(**p.to_dict()) for p in snap.path],
        distance_km=snap.distance_km,
        segment_count=snap.segment_count,
        pending_legs=snap.pending_legs,
        mode=snap.mode,
        color=snap.color,
        target_km=progress.target_km,
        diff_km=progress.diff_km,
        within_tolerance=progress.within_tolerance,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.get("/api/course", response_model=CourseResponse)
def get_course(session: CourseSession = Depends(get_session)) -> CourseResponse:
    return _course_response(session.snapshot(), session)


@app.post("/api/course/click", response_model=CourseResponse)
def click(point: PointModel, session: CourseSession = Depends(get_session)) -> CourseResponse:
    """Add a waypoint: the first click sets the start, later ones add a leg."""
    try:
        snap = session.click(GeoPoint(latitude=point.lat, longitude=point.lng))
    except InvalidStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _course_response(snap, session)


@app.post("/api/course/undo", response_model=CourseResponse)
def undo(session: CourseSession = Depends(get_session)) -> CourseResponse:
    return _course_response(session.undo(), session)


@app.post("/api/course/reset", response_model=CourseResponse)
def reset(session: CourseSession = Depends(get_session)) -> CourseResponse:
    return _course_response(session.reset(), session)


@app.put("/api/course/mode", response_model=CourseResponse)
def set_mode(req: ModeRequest, session: CourseSession = Depends(get_session)) -> CourseResponse:
    return _course_response(session.set_mode(req.mode), session)


@app.put("/api/course/target", response_model=CourseResponse)
def set_target(
    req: TargetRequest, session: CourseSession = Depends(get_session)
) -> CourseResponse:
    session.set_target(req.target_km)
    return _course_response(session.snapshot(), session)


@app.get("/api/course/summary", response_model=SummaryResponse)
def summary(session: CourseSession = Depends(get_session)) -> SummaryResponse:
    return SummaryResponse(message=session.summary())


@app.get("/api/course/export")
def export(session: CourseSession = Depends(get_session)) -> Response:
    """Download the course as a GPX file named after its distance."""
    try:
        filename, text = session.export_gpx()
    except ExportPreconditionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return Response(
        content=text.encode("utf-8"),
        media_type="application/gpx+xml",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/api/course/import", response_model=CourseResponse)
def import_track(
    req: ImportRequest, session: CourseSession = Depends(get_session)
) -> CourseResponse:
    """Replace the course with a GPX track; the course is unchanged on failure."""
    try:
        snap = session.import_gpx(req.gpx)
    except TrackImportError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _course_response(snap, session)
