"""Tests for GPX to GeoJSON import in hikingmap.services.gpx_import.

Covers:
    - Single track to LineString with [lon, lat] positions,
    - Several tracks merged into one MultiLineString in document order,
    - Byte-order mark handling,
    - The distinct failure kinds, all reported as GpxParseError,
    - Loss of properties on a GeoJSON to GPX to GeoJSON round trip.
"""

from __future__ import annotations

from typing import Any

import gpxpy
import pytest

from hikingmap.services import errors, gpx_export, gpx_import

Point = tuple[float, float]


def _gpx(*tracks: list[list[Point]], waypoints: list[Point] = ()) -> bytes:
    """Build a GPX 1.1 document; tracks hold segments of (lat, lon) points."""
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">',
    ]
    for lat, lon in waypoints:
        parts.append(f'<wpt lat="{lat}" lon="{lon}"><name>peak</name></wpt>')
    for index, segments in enumerate(tracks):
        parts.append(f"<trk><name>track {index}</name>")
        for segment in segments:
            parts.append("<trkseg>")
            parts.extend(
                f'<trkpt lat="{lat}" lon="{lon}"><ele>100</ele></trkpt>'
                for lat, lon in segment
            )
            parts.append("</trkseg>")
        parts.append("</trk>")
    parts.append("</gpx>")
    return "\n".join(parts).encode("utf-8")


def _only_geometry(collection: dict[str, Any]) -> dict[str, Any]:
    assert collection["type"] == "FeatureCollection"
    (feature,) = collection["features"]
    assert feature["properties"] == {}
    return feature["geometry"]


def test_single_track_becomes_line_string() -> None:
    data = _gpx([[(25.0, 121.5), (25.1, 121.6), (25.2, 121.7)]])
    geometry = _only_geometry(gpx_import.gpx_to_geojson(data))
    assert geometry == {
        "type": "LineString",
        "coordinates": [[121.5, 25.0], [121.6, 25.1], [121.7, 25.2]],
    }


def test_two_tracks_become_multi_line_string_in_document_order() -> None:
    first = [(24.0, 121.0), (24.1, 121.1)]
    second = [(23.0, 120.0), (23.1, 120.1), (23.2, 120.2)]
    geometry = _only_geometry(gpx_import.gpx_to_geojson(_gpx([first], [second])))
    assert geometry["type"] == "MultiLineString"
    assert [len(line) for line in geometry["coordinates"]] == [2, 3]
    assert geometry["coordinates"][0][0] == [121.0, 24.0]
    assert geometry["coordinates"][1][0] == [120.0, 23.0]


def test_byte_order_mark_is_stripped() -> None:
    data = "﻿".encode() + _gpx([[(25.0, 121.5), (25.1, 121.6)]])
    geometry = _only_geometry(gpx_import.gpx_to_geojson(data))
    assert geometry["type"] == "LineString"


def test_waypoints_are_ignored() -> None:
    data = _gpx([[(25.0, 121.5), (25.1, 121.6)]], waypoints=[(24.0, 121.0)])
    geometry = _only_geometry(gpx_import.gpx_to_geojson(data))
    assert geometry["type"] == "LineString"


def test_no_tracks_is_an_error() -> None:
    with pytest.raises(errors.NoTrackGeometryError) as exc_info:
        gpx_import.gpx_to_geojson(_gpx(waypoints=[(24.0, 121.0)]))
    assert isinstance(exc_info.value, errors.GpxParseError)
    assert exc_info.value.message == errors.GpxParseError.message


def test_single_point_segment_is_not_a_track() -> None:
    with pytest.raises(errors.NoTrackGeometryError):
        gpx_import.gpx_to_geojson(_gpx([[(25.0, 121.5)]]))


def test_malformed_xml_is_an_error() -> None:
    with pytest.raises(errors.MalformedGpxError) as exc_info:
        gpx_import.gpx_to_geojson(b"<gpx><trk>")
    assert isinstance(exc_info.value, errors.GpxParseError)
    assert exc_info.value.__cause__ is not None


def test_non_utf8_bytes_are_an_error() -> None:
    with pytest.raises(errors.MalformedGpxError):
        gpx_import.gpx_to_geojson(b"\xff\xfe\x00<")


def test_unexpected_structure_is_an_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        gpx_import,
        "gpx_to_features",
        lambda gpx: {"type": "Feature", "features": []},
    )
    with pytest.raises(errors.UnexpectedGpxStructureError):
        gpx_import.gpx_to_geojson(_gpx([[(25.0, 121.5), (25.1, 121.6)]]))


def test_gpx_to_features_groups_tracks_routes_and_waypoints() -> None:
    data = _gpx(
        [[(25.0, 121.5), (25.1, 121.6)], [(25.2, 121.7), (25.3, 121.8)]],
        waypoints=[(24.0, 121.0)],
    )
    collection = gpx_import.gpx_to_features(gpxpy.parse(data.decode()))
    types = [feature["geometry"]["type"] for feature in collection["features"]]
    assert types == ["MultiLineString", "Point"]
    assert collection["features"][0]["properties"] == {
        "_gpxType": "trk",
        "name": "track 0",
    }


def test_multi_segment_track_alone_has_no_line_string() -> None:
    """Only LineString features are merged; a split track is MultiLineString."""
    data = _gpx([[(25.0, 121.5), (25.1, 121.6)], [(25.2, 121.7), (25.3, 121.8)]])
    with pytest.raises(errors.NoTrackGeometryError):
        gpx_import.gpx_to_geojson(data)


def test_round_trip_drops_properties() -> None:
    original = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"name": "Jade", "time": "2024-03-05"},
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[121.5, 25.0], [121.6, 25.1]],
                },
            },
        ],
    }
    gpx_text = gpx_export.geojson_to_gpx(original)
    result = gpx_import.gpx_to_geojson(gpx_text.encode("utf-8"))
    (feature,) = result["features"]
    assert feature["geometry"] == original["features"][0]["geometry"]
    assert feature["properties"] == {}
    assert feature["properties"] != original["features"][0]["properties"]
