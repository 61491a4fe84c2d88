"""Application settings and configuration management.

This module provides Pydantic-based settings management that loads
configuration from environment variables or a .env file. Settings include
the listen address, CORS origins, session signing key, the attributes of the
demo cookie, upload size limits and the log level.

Example:
    Settings can be accessed via the cached get_settings() function:
        >>> from hikingmap.core.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.port)

    Environment variables can override defaults:
        >>> PORT=8080
        >>> ALLOW_ORIGINS='["http://localhost:5173"]'
        >>> COOKIE_SAME_SITE=lax
        >>> COOKIE_SECURE=false
"""

import functools
from typing import Literal, Self

import pydantic
import pydantic_settings

SameSite = Literal["lax", "strict", "none"]

DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "https://hiking-map.vercel.app",
    "https://hiking-map-git-main-charliewuuus-projects.vercel.app",
]


class Settings(pydantic_settings.BaseSettings):
    """Runtime configuration pulled from environment variables or defaults.

    The settings object is read once at startup and handed to
    ``create_app``; request handlers receive it from ``app.state``.

    Attributes:
        host: Interface uvicorn binds to.
        port: Port uvicorn listens on.
        allow_origins: Origins allowed to make credentialed CORS requests.
        session_secret_key: Key used to sign the session cookie.
        session_max_age_seconds: Lifetime of the session cookie.
        cookie_max_age_seconds: Lifetime of the demo ``test_cookie``.
        cookie_same_site: SameSite attribute of the demo cookie.
        cookie_secure: Secure attribute of the demo cookie.
        max_upload_size_bytes: Maximum accepted size of an uploaded file.
        log_level: Minimum level written by the loguru stderr sink.

    Example:
        Relax the cookie policy for plain-http local development:
            >>> settings = Settings(cookie_same_site="lax", cookie_secure=False)
    """

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    allow_origins: list[str] = DEFAULT_ORIGINS
    session_secret_key: str = "change-me"
    session_max_age_seconds: int = 24 * 60 * 60
    cookie_max_age_seconds: int = 10
    cookie_same_site: SameSite = "none"
    cookie_secure: bool = True
    max_upload_size_bytes: int = 50 * 1024 * 1024
    log_level: str = "INFO"

    model_config = pydantic_settings.SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @pydantic.model_validator(mode="after")
    def _check_cookie_policy(self) -> Self:
        """Reject SameSite=None cookies that are not marked Secure.

        Browsers drop such cookies, so the combination is never useful.

        Raises:
            ValueError: If ``cookie_same_site`` is "none" and
                ``cookie_secure`` is False.
        """
        if self.cookie_same_site == "none" and not self.cookie_secure:
            raise ValueError("cookie_same_site='none' requires cookie_secure")
        return self


@functools.lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance.

    Settings are loaded from environment variables or .env file and cached
    for the lifetime of the application. Subsequent calls return the same
    cached instance.

    Returns:
        Settings instance with all configuration values populated.
    """
    return Settings()
