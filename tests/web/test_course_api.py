"""HTTP API for building, exporting and importing a course."""

from __future__ import annotations

import pytest

S = {"lat": 35.0, "lng": 126.0}
A = {"lat": 35.0, "lng": 126.01}


def _build_course(client, session) -> dict:
    client.post("/api/course/click", json=S)
    client.post("/api/course/click", json=A)
    assert session.wait_idle(timeout=2.0)
    return client.get("/api/course").json()


def test_empty_course(client):
    data = client.get("/api/course").json()
    assert data["start"] is None
    assert data["path"] == []
    assert data["distance_km"] == 0.0
    assert data["mode"] == "walking"
    assert data["color"] == "#00c46a"


def test_first_click_sets_start(client):
    resp = client.post("/api/course/click", json=S)
    assert resp.status_code == 200
    data = resp.json()
    assert data["start"] == S
    assert data["path"] == [S]


def test_second_click_is_pending_then_resolved(client, session):
    data = _build_course(client, session)
    assert data["pending_legs"] == 0
    assert data["segment_count"] == 1
    assert data["path"][0] == S
    assert data["path"][-1] == A
    assert data["distance_km"] == pytest.approx(0.911, abs=0.01)


def test_click_out_of_range_returns_422(client):
    resp = client.post("/api/course/click", json={"lat": 91.0, "lng": 0.0})
    assert resp.status_code == 422


def test_undo_then_reset(client, session):
    _build_course(client, session)
    data = client.post("/api/course/undo").json()
    assert data["path"] == [S]
    data = client.post("/api/course/reset").json()
    assert data["start"] is None


def test_mode_changes_color(client):
    data = client.put("/api/course/mode", json={"mode": "cycling"}).json()
    assert data["mode"] == "cycling"
    assert data["color"] == "#ffb545"


def test_invalid_mode_returns_422(client):
    assert client.put("/api/course/mode", json={"mode": "driving"}).status_code == 422


def test_target_reports_diff(client, session):
    _build_course(client, session)
    data = client.put("/api/course/target", json={"target_km": 1.0}).json()
    assert data["target_km"] == 1.0
    assert data["diff_km"] == pytest.approx(-0.089, abs=0.01)
    assert data["within_tolerance"] is True


def test_non_positive_target_returns_422(client):
    assert client.put("/api/course/target", json={"target_km": 0}).status_code == 422


def test_summary(client, session):
    _build_course(client, session)
    message = client.get("/api/course/summary").json()["message"]
    assert message.startswith("Current course distance: 0.91 km")


def test_export_without_course_returns_422(client):
    assert client.get("/api/course/export").status_code == 422


def test_export_download(client, session):
    _build_course(client, session)
    resp = client.get("/api/course/export")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/gpx+xml")
    assert 'filename="running-course-0.91km.gpx"' in resp.headers["content-disposition"]
    assert resp.text.count("<trkpt") == 3


def test_import_round_trip(client, session):
    _build_course(client, session)
    exported = client.get("/api/course/export").text
    client.post("/api/course/reset")

    data = client.post("/api/course/import", json={"gpx": exported}).json()
    assert data["segment_count"] == 1
    assert len(data["path"]) == 3
    assert data["distance_km"] == pytest.approx(0.911, abs=0.01)


def test_import_single_point_returns_422(client):
    gpx = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
        '<trk><trkseg><trkpt lat="1.0" lon="1.0"></trkpt></trkseg></trk></gpx>'
    )
    resp = client.post("/api/course/import", json={"gpx": gpx})
    assert resp.status_code == 422
    assert "at least 2" in resp.json()["detail"]


def test_import_garbage_returns_422_and_keeps_course(client, session):
    before = _build_course(client, session)
    resp = client.post("/api/course/import", json={"gpx": "definitely not xml"})
    assert resp.status_code == 422
    assert client.get("/api/course").json()["path"] == before["path"]
