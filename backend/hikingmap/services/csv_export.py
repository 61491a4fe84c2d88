"""GeoJSON to CSV export.

Each feature becomes one CSV row built from its properties only; geometry
is not written. The header is the union of property keys in the order they
are first seen, so features missing a key get an empty cell rather than a
shifted row. The output starts with a UTF-8 byte-order mark so that
spreadsheet applications pick the right encoding for CJK text.

Example:
    >>> from hikingmap.services.csv_export import geojson_to_csv
    >>> geojson_to_csv({
    ...     "type": "FeatureCollection",
    ...     "features": [{
    ...         "type": "Feature",
    ...         "geometry": {"type": "LineString", "coordinates": []},
    ...         "properties": {"name": "Jade", "time": "2024-03-05"},
    ...     }],
    ... })
    '\\ufeffname,time\\r\\nJade,2024年3月5日\\r\\n'
"""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING, Any

from loguru import logger

from hikingmap.services import errors
from hikingmap.utils import formatting

if TYPE_CHECKING:
    from collections.abc import Mapping

BOM = "﻿"


def _row(properties: Mapping[str, Any] | None) -> dict[str, str]:
    row = {key: formatting.stringify(value) for key, value in (properties or {}).items()}
    raw_time = (properties or {}).get("time")
    if raw_time:
        moment = formatting.parse_time(raw_time)
        if moment is None:
            logger.warning(f"Leaving unparseable time value as-is: {raw_time!r}")
        else:
            row["time"] = formatting.format_cjk_date(moment)
    return row


def geojson_to_csv(feature_collection: Mapping[str, Any]) -> str:
    """Convert a feature collection's properties into CSV text.

    Args:
        feature_collection: GeoJSON FeatureCollection mapping.

    Returns:
        BOM-prefixed CSV text with a header row and one row per feature.

    Raises:
        InvalidFeatureCollectionError: If ``features`` is not a list of
            feature objects.
    """
    features = feature_collection.get("features")
    if not isinstance(features, list):
        raise errors.InvalidFeatureCollectionError("features must be a list")

    rows: list[dict[str, str]] = []
    for feature in features:
        if not isinstance(feature, dict):
            raise errors.InvalidFeatureCollectionError("feature must be an object")
        rows.append(_row(feature.get("properties")))

    if not rows:
        return BOM

    fieldnames: dict[str, None] = {}
    for row in rows:
        fieldnames.update(dict.fromkeys(row))

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(fieldnames), restval="")
    writer.writeheader()
    writer.writerows(rows)
    return BOM + buffer.getvalue()
