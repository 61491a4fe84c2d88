"""Request bodies accepted by the API.

GeoJSON bodies are validated only as far as the converters rely on them:
a FeatureCollection whose features carry an optional geometry and an
optional property mapping. Geometry types other than LineString and
MultiLineString pass validation; the converters decide what to do with
them.
"""

from __future__ import annotations

from typing import Any, Literal

import pydantic


class ValueBody(pydantic.BaseModel):
    """JSON body ``{"value": "..."}`` used by the cookie and session demos."""

    value: str = pydantic.Field(examples=["hello-cookie"])


class GeometryModel(pydantic.BaseModel):
    type: str
    coordinates: list[Any]


class FeatureModel(pydantic.BaseModel):
    type: Literal["Feature"] = "Feature"
    geometry: GeometryModel | None = None
    properties: dict[str, Any] | None = None


class FeatureCollectionModel(pydantic.BaseModel):
    """GeoJSON FeatureCollection of trail features.

    Example:
        >>> FeatureCollectionModel.model_validate({
        ...     "type": "FeatureCollection",
        ...     "features": [{
        ...         "type": "Feature",
        ...         "properties": {"name": "Jade"},
        ...         "geometry": {
        ...             "type": "LineString",
        ...             "coordinates": [[120.9, 23.4], [120.95, 23.47]],
        ...         },
        ...     }],
        ... })
    """

    type: Literal["FeatureCollection"]
    features: list[FeatureModel]
