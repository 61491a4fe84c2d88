"""GPX to GeoJSON import.

Uploaded GPX files are reduced to a single trail: every LineString found
in the document is merged into one feature. A document with one usable
track comes back as a LineString feature; several come back as one
MultiLineString feature whose lines keep document order. Properties are
not carried over, so a GeoJSON to GPX to GeoJSON round trip loses them.

Example:
    >>> from hikingmap.services.gpx_import import gpx_to_geojson
    >>> with open("trail.gpx", "rb") as f:
    ...     collection = gpx_to_geojson(f.read())
    >>> collection["features"][0]["geometry"]["type"]
    'LineString'
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import gpxpy
import gpxpy.gpx
from loguru import logger

from hikingmap.services import errors

if TYPE_CHECKING:
    from collections.abc import Iterable

BOM = "﻿"

Position = list[float]


def _positions(points: Iterable[Any]) -> list[Position]:
    return [[point.longitude, point.latitude] for point in points]


def _feature(
    geometry: dict[str, Any],
    properties: dict[str, Any],
) -> dict[str, Any]:
    return {"type": "Feature", "properties": properties, "geometry": geometry}


def _properties(kind: str, name: str | None) -> dict[str, Any]:
    properties: dict[str, Any] = {"_gpxType": kind}
    if name:
        properties["name"] = name
    return properties


def gpx_to_features(gpx: gpxpy.gpx.GPX) -> dict[str, Any]:
    """Extract the geometries of a parsed GPX document as GeoJSON.

    Tracks become LineString features when they have one usable segment and
    MultiLineString features when they have several. Routes become
    LineString features and waypoints Point features. Segments and routes
    with fewer than two points are not usable and are left out.

    Args:
        gpx: Document parsed by gpxpy.

    Returns:
        GeoJSON FeatureCollection with tracks first, then routes, then
        waypoints, each group in document order.
    """
    features = []

    for track in gpx.tracks:
        lines = [
            _positions(segment.points)
            for segment in track.segments
            if len(segment.points) >= 2
        ]
        if not lines:
            continue
        if len(lines) == 1:
            geometry = {"type": "LineString", "coordinates": lines[0]}
        else:
            geometry = {"type": "MultiLineString", "coordinates": lines}
        features.append(_feature(geometry, _properties("trk", track.name)))

    for route in gpx.routes:
        if len(route.points) < 2:
            continue
        geometry = {"type": "LineString", "coordinates": _positions(route.points)}
        features.append(_feature(geometry, _properties("rte", route.name)))

    for waypoint in gpx.waypoints:
        geometry = {
            "type": "Point",
            "coordinates": [waypoint.longitude, waypoint.latitude],
        }
        features.append(_feature(geometry, _properties("wpt", waypoint.name)))

    return {"type": "FeatureCollection", "features": features}


def _logged(error: errors.GpxParseError) -> errors.GpxParseError:
    logger.error(f"GPX conversion failed ({error.code}): {error.detail}")
    return error


def _parse(data: bytes) -> gpxpy.gpx.GPX:
    try:
        text = data.decode("utf-8").removeprefix(BOM)
        return gpxpy.parse(text)
    except (UnicodeDecodeError, gpxpy.gpx.GPXException, ValueError) as err:
        raise _logged(errors.MalformedGpxError(str(err))) from err


def gpx_to_geojson(data: bytes) -> dict[str, Any]:
    """Convert GPX file contents into a single-feature collection.

    Args:
        data: Raw GPX bytes, optionally starting with a UTF-8 BOM.

    Returns:
        FeatureCollection holding exactly one feature with empty
        properties and a LineString or MultiLineString geometry.

    Raises:
        MalformedGpxError: If the bytes are not parseable GPX XML.
        UnexpectedGpxStructureError: If extraction did not yield a
            FeatureCollection.
        NoTrackGeometryError: If the document holds no LineString.
    """
    collection = gpx_to_features(_parse(data))

    if collection.get("type") != "FeatureCollection":
        raise _logged(
            errors.UnexpectedGpxStructureError(
                f"expected FeatureCollection, got {collection.get('type')!r}"
            )
        )

    lines = [
        feature["geometry"]
        for feature in collection.get("features", [])
        if feature["geometry"]["type"] == "LineString"
        and isinstance(feature["geometry"].get("coordinates"), list)
    ]
    if not lines:
        raise _logged(errors.NoTrackGeometryError("no LineString in GPX"))

    if len(lines) == 1:
        geometry = lines[0]
    else:
        geometry = {
            "type": "MultiLineString",
            "coordinates": [line["coordinates"] for line in lines],
        }

    return {"type": "FeatureCollection", "features": [_feature(geometry, {})]}
