"""Zipped Shapefile to GeoJSON import.

The archive may hold one or several shapefiles. Each ``.shp`` member is
read together with its ``.shx``, ``.dbf``, ``.prj`` and ``.cpg`` siblings
(matched by path, case-insensitively) and turned into a FeatureCollection
tagged with ``fileName``, the member path without extension.

Attribute tables are decoded with the code page named in ``.cpg`` and
default to UTF-8. When a ``.prj`` is present, geometries are reprojected
to WGS84 longitude/latitude so the result is valid GeoJSON.

Example:
    >>> from hikingmap.services.shapefile_import import shapefile_to_geojson
    >>> with open("trails.zip", "rb") as f:
    ...     result = shapefile_to_geojson(f.read())
    >>> result["fileName"]
    'trails'
"""

from __future__ import annotations

import codecs
import datetime
import io
import pathlib
import struct
import zipfile
from typing import TYPE_CHECKING, Any

import pyproj
import pyproj.exceptions
import shapefile
from loguru import logger

from hikingmap.services import errors

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_ENCODING = "utf-8"
WGS84 = pyproj.CRS.from_epsg(4326)


def _encoding(cpg: bytes | None) -> str:
    """Resolve the code page named by a ``.cpg`` file.

    Bare numbers ("950", "1252") are Windows code pages. Unknown names fall
    back to UTF-8.
    """
    if not cpg:
        return DEFAULT_ENCODING
    name = cpg.decode("ascii", errors="ignore").strip()
    if name.isdigit():
        name = f"cp{name}"
    try:
        return codecs.lookup(name).name
    except LookupError:
        logger.warning(f"Unknown .cpg code page {name!r}, using {DEFAULT_ENCODING}")
        return DEFAULT_ENCODING


def _transformer(prj: bytes | None) -> pyproj.Transformer | None:
    if not prj:
        return None
    crs = pyproj.CRS.from_user_input(prj.decode("utf-8", errors="replace"))
    if crs.equals(WGS84, ignore_axis_order=True):
        return None
    return pyproj.Transformer.from_crs(crs, WGS84, always_xy=True)


def _positions(
    coordinates: Sequence[Any],
    transformer: pyproj.Transformer | None,
) -> list[Any]:
    """Copy nested coordinate tuples into lists, reprojecting each position."""
    if coordinates and isinstance(coordinates[0], int | float):
        if transformer is None:
            return list(coordinates)
        x, y = transformer.transform(coordinates[0], coordinates[1])
        return [x, y, *coordinates[2:]]
    return [_positions(part, transformer) for part in coordinates]


def _json_value(value: Any) -> Any:
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode(DEFAULT_ENCODING, errors="replace")
    return value


def _geometry(
    shape: shapefile.Shape,
    transformer: pyproj.Transformer | None,
) -> dict[str, Any] | None:
    if shape.shapeType == shapefile.NULL:
        return None
    geometry = dict(shape.__geo_interface__)
    geometry["coordinates"] = _positions(geometry["coordinates"], transformer)
    return geometry


def _read_collection(
    name: str,
    members: dict[str, bytes],
) -> dict[str, Any]:
    transformer = _transformer(members.get(".prj"))
    sources = {
        suffix[1:]: io.BytesIO(members[suffix])
        for suffix in (".shp", ".shx", ".dbf")
        if suffix in members
    }
    reader = shapefile.Reader(
        encoding=_encoding(members.get(".cpg")),
        encodingErrors="replace",
        **sources,
    )
    with reader:
        if "dbf" not in sources:
            pairs = ((shape, {}) for shape in reader.iterShapes())
        else:
            pairs = (
                (item.shape, item.record.as_dict())
                for item in reader.iterShapeRecords()
            )
        features = [
            {
                "type": "Feature",
                "properties": {k: _json_value(v) for k, v in properties.items()},
                "geometry": _geometry(shape, transformer),
            }
            for shape, properties in pairs
        ]

    return {"type": "FeatureCollection", "features": features, "fileName": name}


def _group_members(archive: zipfile.ZipFile) -> dict[str, dict[str, bytes]]:
    """Group archive members by path stem, keyed by lower-case suffix."""
    groups: dict[str, dict[str, bytes]] = {}
    stems: dict[str, str] = {}
    for info in archive.infolist():
        if info.is_dir() or info.filename.startswith("__MACOSX/"):
            continue
        path = pathlib.PurePosixPath(info.filename)
        stem = str(path.with_suffix(""))
        key = stem.lower()
        stems.setdefault(key, stem)
        groups.setdefault(key, {})[path.suffix.lower()] = archive.read(info)
    return {stems[key]: group for key, group in groups.items() if ".shp" in group}


def shapefile_to_geojson(data: bytes) -> dict[str, Any] | list[dict[str, Any]]:
    """Decode a zipped Shapefile into GeoJSON.

    Args:
        data: Bytes of a zip archive holding one or more shapefiles.

    Returns:
        A FeatureCollection when the archive holds one shapefile, otherwise
        a list of FeatureCollections in archive order.

    Raises:
        InvalidArchiveError: If the bytes are not a zip archive.
        MissingShapefileError: If the archive holds no ``.shp`` member.
        ShapefileParseError: If a shapefile or its projection cannot be
            decoded.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            groups = _group_members(archive)
    except zipfile.BadZipFile as err:
        logger.error(f"Shapefile conversion failed: {err}")
        raise errors.InvalidArchiveError(str(err)) from err

    if not groups:
        logger.error("Shapefile conversion failed: no .shp member in archive")
        raise errors.MissingShapefileError("no .shp member in archive")

    collections = []
    for name, members in groups.items():
        try:
            collections.append(_read_collection(name, members))
        except (
            shapefile.ShapefileException,
            pyproj.exceptions.CRSError,
            pyproj.exceptions.ProjError,
            struct.error,
            ValueError,
        ) as err:
            logger.error(f"Shapefile conversion failed for {name!r}: {err}")
            raise errors.ShapefileParseError(str(err)) from err

    if len(collections) == 1:
        return collections[0]
    return collections
