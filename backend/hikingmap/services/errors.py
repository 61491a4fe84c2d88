"""Exceptions raised by the trail format converters.

Every converter failure derives from ConversionError, which carries a short
machine-readable ``code`` and a human-readable ``message`` that is safe to
show to API clients. The technical cause is kept on ``__cause__`` and in
the log, never in ``message``.

Example:
    Handle any GPX failure while still telling the kinds apart:
        >>> from hikingmap.services import errors, gpx_import
        >>> try:
        ...     gpx_import.gpx_to_geojson(b"<not-gpx")
        ... except errors.NoTrackGeometryError:
        ...     ...  # valid GPX without tracks
        ... except errors.GpxParseError as e:
        ...     print(e.code, e.message)
"""

from __future__ import annotations


class ConversionError(ValueError):
    """Base class for converter failures reported to the client."""

    code = "conversion_error"
    message = "檔案轉換失敗"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail


class InvalidFeatureCollectionError(ConversionError):
    code = "invalid_feature_collection"
    message = "GeoJSON 格式錯誤，需為 FeatureCollection"


class GpxParseError(ConversionError):
    """Any failure while turning GPX bytes into GeoJSON."""

    code = "gpx_parse_error"
    message = "GPX 檔案解析錯誤，請確認格式正確"


class MalformedGpxError(GpxParseError):
    code = "malformed_gpx"


class UnexpectedGpxStructureError(GpxParseError):
    code = "unexpected_gpx_structure"


class NoTrackGeometryError(GpxParseError):
    code = "no_track_geometry"


class ShapefileParseError(ConversionError):
    """Any failure while decoding a zipped Shapefile."""

    code = "shapefile_parse_error"
    message = "Shapefile 檔案解析錯誤，請確認格式正確"


class InvalidArchiveError(ShapefileParseError):
    code = "invalid_archive"


class MissingShapefileError(ShapefileParseError):
    code = "missing_shapefile"
