"""FastAPI application entrypoint and configuration.

This module provides the main FastAPI application factory that sets up
logging, CORS and session middleware, includes the cookie, session and
trail conversion routers, and exposes a health check endpoint. Swagger UI
is served at ``/api-docs``.

Example:
    The application can be run with uvicorn:
        $ uvicorn hikingmap.main:app --reload

    Or through the bundled entry point, which honours HOST and PORT:
        $ hikingmap

    Or imported and used programmatically:
        >>> from hikingmap.main import create_app
        >>> app = create_app(Settings(cookie_same_site="lax", cookie_secure=False))
"""

from __future__ import annotations

import fastapi
import uvicorn
from fastapi.middleware import cors
from loguru import logger
from starlette.middleware import sessions as session_middleware

from hikingmap.api import cookies, sessions, trails
from hikingmap.core import config, log


def create_app(settings: config.Settings | None = None) -> fastapi.FastAPI:
    """Create and configure the FastAPI application.

    The settings are read once here and stored on ``app.state`` for the
    request handlers. CORS allows credentialed requests from the configured
    origins so that the demo cookie and the session cookie reach the API
    from the front end.

    Args:
        settings: Configuration to use; defaults to ``config.get_settings()``.

    Returns:
        Configured FastAPI application instance ready for ASGI server.
    """
    settings = settings or config.get_settings()
    log.configure_logging(settings.log_level)

    app = fastapi.FastAPI(
        title="Hiking Map API",
        description="Cookie and session demos plus trail file conversion.",
        version="1.0.0",
        docs_url="/api-docs",
    )
    app.state.settings = settings

    app.include_router(cookies.router)
    app.include_router(sessions.router)
    app.include_router(trails.router)

    app.add_middleware(
        session_middleware.SessionMiddleware,  # type: ignore[arg-type]
        secret_key=settings.session_secret_key,
        max_age=settings.session_max_age_seconds,
        same_site=settings.cookie_same_site,
        https_only=settings.cookie_secure,
    )
    app.add_middleware(
        cors.CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:  # type: ignore[misc]
        """Health check endpoint for monitoring and load balancers.

        Returns:
            Dictionary with status "ok" if the service is running.
        """
        return {"status": "ok"}

    return app


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    settings = config.get_settings()
    logger.info(f"Swagger docs: http://localhost:{settings.port}/api-docs")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


app = create_app()
