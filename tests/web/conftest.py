"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from course_planner.config import Settings
from course_planner.geo.models import GeoPoint
from course_planner.routing.models import LegResult, TravelMode
from course_planner.web.app import app, get_session
from course_planner.web.service import CourseSession


class FakeRouter:
    """Routing collaborator that returns a three-point polyline, or fails."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[GeoPoint, GeoPoint, TravelMode]] = []

    def resolve_leg(self, origin: GeoPoint, destination: GeoPoint, mode: TravelMode) -> LegResult:
        self.calls.append((origin, destination, mode))
        if self.fail:
            return LegResult.not_ok()
        mid = GeoPoint(
            (origin.latitude + destination.latitude) / 2,
            (origin.longitude + destination.longitude) / 2,
        )
        return LegResult.ok([origin, mid, destination])


@pytest.fixture
def router():
    return FakeRouter()


@pytest.fixture
def session(router):
    s = CourseSession(routing_client=router, settings=Settings())
    yield s
    s.close()


@pytest.fixture
def client(session):
    """FastAPI test client bound to a session with a fake router."""
    app.dependency_overrides[get_session] = lambda: session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
