"""Pydantic request/response schemas for the course HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from course_planner.routing.models import TravelMode


class PointModel(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)


class HealthResponse(BaseModel):
    status: str
    version: str


class TargetRequest(BaseModel):
    target_km: float | None = Field(default=None, gt=0.0)


class ModeRequest(BaseModel):
    mode: TravelMode


class ImportRequest(BaseModel):
    gpx: str


class CourseResponse(BaseModel):
    start: PointModel | None
    path: list[PointModel]
    distance_km: float
    segment_count: int
    pending_legs: int
    mode: TravelMode
    color: str
    target_km: float | None = None
    diff_km: float | None = None
    within_tolerance: bool = False


class SummaryResponse(BaseModel):
    message: str
