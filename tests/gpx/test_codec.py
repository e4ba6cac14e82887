"""Tests for GPX export/import."""

from __future__ import annotations

import datetime

import pytest

from course_planner.geo.models import GeoPoint
from course_planner.gpx.codec import (
    CREATOR,
    TRACK_NAME,
    ExportPreconditionError,
    ImportInsufficientPointsError,
    ImportMalformedError,
    TrackImportError,
    decode,
    encode,
)

PATH = [
    GeoPoint(35.945, 126.682),
    GeoPoint(35.9461234567, 126.6839876543),
    GeoPoint(35.95, 126.69),
]
TIMESTAMP = "2026-10-19T09:30:00Z"


def _gpx(body: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">\n'
        f"{body}\n</gpx>\n"
    )


def _assert_same_path(actual: list[GeoPoint], expected: list[GeoPoint]) -> None:
    assert len(actual) == len(expected)
    for a, e in zip(actual, expected):
        assert a.latitude == pytest.approx(e.latitude, abs=1e-9)
        assert a.longitude == pytest.approx(e.longitude, abs=1e-9)


# ---------------------------------------------------------------------------
# encode
# ---------------------------------------------------------------------------


class TestEncode:
    @pytest.mark.parametrize("path", [[], [GeoPoint(35.0, 126.0)]])
    def test_too_short_fails(self, path):
        with pytest.raises(ExportPreconditionError):
            encode(path, TIMESTAMP)

    def test_document_structure(self):
        text = encode(PATH, TIMESTAMP)
        assert text.startswith("<?xml")
        assert 'version="1.1"' in text
        assert f'creator="{CREATOR}"' in text
        assert f"<name>{TRACK_NAME}</name>" in text
        assert text.count("<trk>") == 1
        assert text.count("<trkseg>") == 1
        assert text.count("<trkpt") == len(PATH)
        assert text.count("<ele>0") == len(PATH)

    def test_same_timestamp_on_every_point(self):
        text = encode(PATH, TIMESTAMP)
        # metadata time plus one per point
        assert text.count("2026-10-19T09:30:00") == len(PATH) + 1

    def test_accepts_datetime(self):
        when = datetime.datetime(2026, 10, 19, 9, 30, tzinfo=datetime.timezone.utc)
        text = encode(PATH, when)
        assert "2026-10-19T09:30:00" in text

    def test_invalid_timestamp_raises_value_error(self):
        with pytest.raises(ValueError):
            encode(PATH, "yesterday")


# ---------------------------------------------------------------------------
# decode
# ---------------------------------------------------------------------------


class TestDecode:
    def test_round_trip(self):
        _assert_same_path(decode(encode(PATH, TIMESTAMP)), PATH)

    def test_round_trip_two_points(self):
        path = PATH[:2]
        _assert_same_path(decode(encode(path, TIMESTAMP)), path)

    def test_flattens_segments_and_tracks(self):
        text = _gpx(
            "<trk><trkseg>"
            '<trkpt lat="35.0" lon="126.0"></trkpt>'
            '<trkpt lat="35.1" lon="126.1"></trkpt>'
            "</trkseg><trkseg>"
            '<trkpt lat="35.2" lon="126.2"></trkpt>'
            "</trkseg></trk>"
            "<trk><trkseg>"
            '<trkpt lat="35.3" lon="126.3"></trkpt>'
            "</trkseg></trk>"
        )
        points = decode(text)
        assert [p.latitude for p in points] == [35.0, 35.1, 35.2, 35.3]
        assert [p.longitude for p in points] == [126.0, 126.1, 126.2, 126.3]

    def test_ignores_waypoints_and_routes(self):
        text = _gpx(
            '<wpt lat="1.0" lon="1.0"></wpt>'
            '<rte><rtept lat="2.0" lon="2.0"></rtept><rtept lat="3.0" lon="3.0"></rtept></rte>'
            '<trk><trkseg><trkpt lat="35.0" lon="126.0"></trkpt></trkseg></trk>'
        )
        with pytest.raises(ImportInsufficientPointsError):
            decode(text)

    def test_single_point_is_insufficient(self):
        text = _gpx('<trk><trkseg><trkpt lat="35.0" lon="126.0"></trkpt></trkseg></trk>')
        with pytest.raises(ImportInsufficientPointsError):
            decode(text)

    def test_no_tracks_is_insufficient(self):
        with pytest.raises(ImportInsufficientPointsError):
            decode(_gpx(""))

    @pytest.mark.parametrize("text", ["this is not xml", "", "<gpx><trk>"])
    def test_non_xml_is_malformed(self, text):
        with pytest.raises(ImportMalformedError):
            decode(text)

    @pytest.mark.parametrize(
        "bad",
        [
            '<trkpt lat="abc" lon="126.1"></trkpt>',
            '<trkpt lat="NaN" lon="126.1"></trkpt>',
            '<trkpt lat="95.0" lon="126.1"></trkpt>',
            '<trkpt lat="35.1"></trkpt>',
        ],
    )
    def test_invalid_coordinate_rejects_whole_import(self, bad):
        text = _gpx(
            "<trk><trkseg>"
            '<trkpt lat="35.0" lon="126.0"></trkpt>'
            f"{bad}"
            '<trkpt lat="35.2" lon="126.2"></trkpt>'
            "</trkseg></trk>"
        )
        with pytest.raises(ImportMalformedError):
            decode(text)

    def test_import_errors_share_a_base_class(self):
        assert issubclass(ImportMalformedError, TrackImportError)
        assert issubclass(ImportInsufficientPointsError, TrackImportError)
