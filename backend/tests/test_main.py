"""Tests for the FastAPI main application factory and health checks.

This module validates that:
    - The FastAPI app is correctly instantiated via main.create_app,
    - OpenAPI metadata (title, version) matches the project contract,
    - Cookie, session and trail routers are registered,
    - Swagger UI is served from /api-docs,
    - CORS allows credentialed requests from configured origins only.

See Also:
    - backend/hikingmap/main.py for the application factory.
"""

from __future__ import annotations

from fastapi import testclient

from hikingmap import main
from hikingmap.core import config


def test_create_app() -> None:
    """Test that create_app returns a configured FastAPI instance."""
    settings = config.Settings()
    app = main.create_app(settings)
    assert app.title == "Hiking Map API"
    assert app.version == "1.0.0"
    assert app.state.settings is settings


def test_health_endpoint() -> None:
    """Test the health check endpoint returns ok status."""
    client = testclient.TestClient(main.create_app(config.Settings()))
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_swagger_docs_served() -> None:
    client = testclient.TestClient(main.create_app(config.Settings()))
    assert client.get("/api-docs").status_code == 200


def test_app_includes_routers() -> None:
    """Test that all API routers are included in the app."""
    app = main.create_app(config.Settings())
    routes = app.openapi()["paths"]
    for path in (
        "/health",
        "/cookie/setCookie",
        "/cookie/seeCookie",
        "/cookie/useCookie",
        "/cookie/dropCookie",
        "/session/setSession",
        "/session/seeSession",
        "/session/useSession",
        "/session/dropSession",
        "/trails/geojson-to-csv",
        "/trails/geojson-to-gpx",
        "/trails/gpx-to-geojson",
        "/trails/shp-to-geojson",
    ):
        assert path in routes


def test_cors_allows_credentials_for_configured_origin() -> None:
    settings = config.Settings(allow_origins=["http://localhost:5173"])
    client = testclient.TestClient(main.create_app(settings))
    response = client.options(
        "/cookie/seeCookie",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == (
        "http://localhost:5173"
    )
    assert response.headers["access-control-allow-credentials"] == "true"


def test_cors_rejects_unknown_origin() -> None:
    settings = config.Settings(allow_origins=["http://localhost:5173"])
    client = testclient.TestClient(main.create_app(settings))
    response = client.options(
        "/cookie/seeCookie",
        headers={
            "Origin": "https://evil.example",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert "access-control-allow-origin" not in response.headers
