"""Trail file-format conversion endpoints.

GeoJSON bodies are converted to downloadable CSV or GPX files, and
uploaded GPX or zipped Shapefile files are converted to GeoJSON. Failed
conversions answer 400 with a message suitable for end users and a
``code`` naming the kind of failure; oversized uploads answer 413.

Example:
    Export a trail as GPX:
        >>> response = client.post("/trails/geojson-to-gpx", json=collection)
        >>> response.headers["content-type"]
        'application/gpx+xml'

    Import a GPX track:
        >>> response = client.post(
        ...     "/trails/gpx-to-geojson",
        ...     files={"file": ("trail.gpx", open("trail.gpx", "rb"))},
        ... )
        >>> response.json()["features"][0]["geometry"]["type"]
        'LineString'
"""

from __future__ import annotations

from typing import Any

import fastapi

from hikingmap.api import dependencies, schemas
from hikingmap.core import config
from hikingmap.services import (
    csv_export,
    errors,
    gpx_export,
    gpx_import,
    shapefile_import,
)

router = fastapi.APIRouter(prefix="/trails", tags=["trails"])


def _read_upload(file: fastapi.UploadFile, max_size: int) -> bytes:
    """Read an uploaded file into memory with size validation.

    Args:
        file: FastAPI UploadFile object containing the file data.
        max_size: Maximum allowed file size in bytes.

    Returns:
        The file contents.

    Raises:
        HTTPException: If the file exceeds the maximum size limit.
    """
    chunks = []
    size = 0
    for chunk in iter(lambda: file.file.read(1024 * 1024), b""):
        size += len(chunk)
        if size > max_size:
            raise fastapi.HTTPException(
                status_code=413,
                detail="Upload too large",
            )

        chunks.append(chunk)

    return b"".join(chunks)


def _conversion_error(err: errors.ConversionError) -> fastapi.HTTPException:
    return fastapi.HTTPException(
        status_code=400,
        detail={"message": err.message, "code": err.code},
    )


def _attachment(content: str, media_type: str, filename: str) -> fastapi.Response:
    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"',
        "Cache-Control": "no-store",
    }
    return fastapi.Response(
        content=content.encode("utf-8"),
        media_type=media_type,
        headers=headers,
    )


@router.post("/geojson-to-csv")
async def geojson_to_csv(
    collection: schemas.FeatureCollectionModel,
) -> fastapi.Response:
    """Download the features' properties as a CSV file.

    Args:
        collection: GeoJSON FeatureCollection body.

    Returns:
        ``trails.csv`` attachment, UTF-8 with byte-order mark.
    """
    try:
        text = csv_export.geojson_to_csv(collection.model_dump())
    except errors.ConversionError as err:
        raise _conversion_error(err) from err

    return _attachment(text, "text/csv; charset=utf-8", "trails.csv")


@router.post("/geojson-to-gpx")
async def geojson_to_gpx(
    collection: schemas.FeatureCollectionModel,
) -> fastapi.Response:
    """Download the features as GPX 1.1 tracks.

    Args:
        collection: GeoJSON FeatureCollection body.

    Returns:
        ``trails.gpx`` attachment.
    """
    try:
        text = gpx_export.geojson_to_gpx(collection.model_dump())
    except errors.ConversionError as err:
        raise _conversion_error(err) from err

    return _attachment(text, "application/gpx+xml", "trails.gpx")


@router.post("/gpx-to-geojson")
async def gpx_to_geojson(
    file: fastapi.UploadFile,
    settings: config.Settings = fastapi.Depends(dependencies.get_settings),  # noqa: B008
) -> dict[str, Any]:
    """Merge the tracks of an uploaded GPX file into one GeoJSON feature.

    Args:
        file: Uploaded GPX file from multipart form data.
        settings: Application settings (injected via FastAPI Depends).

    Returns:
        FeatureCollection with a single LineString or MultiLineString
        feature.

    Raises:
        HTTPException: 413 if the upload is too large, 400 if the file is
            not GPX or holds no track.
    """
    data = _read_upload(file, settings.max_upload_size_bytes)
    try:
        return gpx_import.gpx_to_geojson(data)
    except errors.ConversionError as err:
        raise _conversion_error(err) from err


@router.post("/shp-to-geojson")
async def shp_to_geojson(
    file: fastapi.UploadFile,
    settings: config.Settings = fastapi.Depends(dependencies.get_settings),  # noqa: B008
) -> dict[str, Any] | list[dict[str, Any]]:
    """Decode an uploaded zipped Shapefile into GeoJSON.

    Args:
        file: Uploaded zip archive from multipart form data.
        settings: Application settings (injected via FastAPI Depends).

    Returns:
        A FeatureCollection, or a list of them when the archive holds
        several shapefiles.

    Raises:
        HTTPException: 413 if the upload is too large, 400 if the archive
            cannot be decoded.
    """
    data = _read_upload(file, settings.max_upload_size_bytes)
    try:
        return shapefile_import.shapefile_to_geojson(data)
    except errors.ConversionError as err:
        raise _conversion_error(err) from err
