"""GeoJSON to GPX 1.1 export.

Every feature becomes a ``<trk>``. The feature's ``name`` property is the
track name and all other properties are written as child elements of the
track's ``<extensions>``. GeoJSON stores positions as ``[lon, lat]`` while
GPX puts them in ``lat``/``lon`` attributes, so the order is swapped here.

Features whose geometry is neither LineString nor MultiLineString still
produce a named track, just without segments; a warning is logged for each.
Positions that are not numeric ``[lon, lat]`` pairs are rejected.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Any

import gpxpy.gpx
from loguru import logger

from hikingmap.services import errors
from hikingmap.utils import formatting

if TYPE_CHECKING:
    from collections.abc import Mapping

CREATOR = "HikingMap"
UNNAMED = "Unnamed"


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _point(position: Any) -> gpxpy.gpx.GPXTrackPoint:
    if (
        not isinstance(position, list | tuple)
        or len(position) < 2
        or not (_is_number(position[0]) and _is_number(position[1]))
    ):
        raise errors.InvalidFeatureCollectionError(
            f"position must be [lon, lat], got {position!r}"
        )
    lon, lat = position[0], position[1]
    return gpxpy.gpx.GPXTrackPoint(latitude=lat, longitude=lon)


def _segment(line: Any) -> gpxpy.gpx.GPXTrackSegment:
    if not isinstance(line, list | tuple):
        raise errors.InvalidFeatureCollectionError(
            f"line must be a list of positions, got {line!r}"
        )
    segment = gpxpy.gpx.GPXTrackSegment()
    segment.points.extend(_point(position) for position in line)
    return segment


def _extensions(properties: Mapping[str, Any]) -> list[ET.Element]:
    elements = []
    for key, value in properties.items():
        if key == "name":
            continue
        element = ET.Element(formatting.xml_element_name(key))
        if key == "time":
            moment = formatting.parse_time(value)
            if moment is None:
                logger.warning(f"Writing unparseable time value as text: {value!r}")
                element.text = formatting.stringify(value)
            else:
                element.text = formatting.format_slash_date(moment)
        else:
            element.text = formatting.stringify(value)
        elements.append(element)
    return elements


def _track(feature: Mapping[str, Any]) -> gpxpy.gpx.GPXTrack:
    properties = feature.get("properties") or {}
    name = formatting.stringify(properties.get("name")) or UNNAMED
    track = gpxpy.gpx.GPXTrack(name=name)
    track.extensions.extend(_extensions(properties))

    geometry = feature.get("geometry") or {}
    geometry_type = geometry.get("type")
    coordinates = geometry.get("coordinates")
    if geometry_type == "LineString":
        track.segments.append(_segment(coordinates))
    elif geometry_type == "MultiLineString":
        if not isinstance(coordinates, list | tuple):
            raise errors.InvalidFeatureCollectionError(
                f"MultiLineString coordinates must be a list, got {coordinates!r}"
            )
        track.segments.extend(_segment(line) for line in coordinates)
    else:
        logger.warning(
            f"Track {track.name!r} has unsupported geometry {geometry_type!r}, "
            "written without segments"
        )
    return track


def geojson_to_gpx(feature_collection: Mapping[str, Any]) -> str:
    """Convert a feature collection into a pretty-printed GPX 1.1 document.

    Args:
        feature_collection: GeoJSON FeatureCollection mapping with
            LineString or MultiLineString features.

    Returns:
        GPX XML text with one ``<trk>`` per feature.

    Raises:
        InvalidFeatureCollectionError: If ``features`` is not a list of
            feature objects, or a line holds something other than
            numeric ``[lon, lat]`` positions.

    Example:
        >>> xml = geojson_to_gpx({
        ...     "type": "FeatureCollection",
        ...     "features": [{
        ...         "type": "Feature",
        ...         "properties": {"name": "Ridge", "time": "2024-03-05"},
        ...         "geometry": {
        ...             "type": "LineString",
        ...             "coordinates": [[121.5, 25.0], [121.6, 25.1]],
        ...         },
        ...     }],
        ... })
        >>> '<trkpt lat="25.0" lon="121.5">' in xml
        True
    """
    features = feature_collection.get("features")
    if not isinstance(features, list):
        raise errors.InvalidFeatureCollectionError("features must be a list")

    gpx = gpxpy.gpx.GPX()
    gpx.creator = CREATOR
    for feature in features:
        if not isinstance(feature, dict):
            raise errors.InvalidFeatureCollectionError("feature must be an object")
        gpx.tracks.append(_track(feature))
    return gpx.to_xml(version="1.1", prettyprint=True)
