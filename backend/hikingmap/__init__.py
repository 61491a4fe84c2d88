"""Hiking Map backend package.

This package contains a small FastAPI service shared by several front-end
projects. It has two independent parts:

- Cookie and session demonstration endpoints showing how credentials travel
  between a cross-site front end and the API
- Trail file conversion: GeoJSON to CSV and GPX for download, and uploaded
  GPX or zipped Shapefile files to GeoJSON

Converters live in ``hikingmap.services`` as pure functions; the HTTP layer
in ``hikingmap.api`` only validates input and maps conversion errors to
client responses.
"""
