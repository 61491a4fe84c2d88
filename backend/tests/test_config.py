"""Tests for application configuration and settings.

This module contains unit tests for the Settings Pydantic model in
hikingmap.core.config. It checks default values, the cookie policy
validation and get_settings caching.
"""

from __future__ import annotations

import pydantic
import pytest

from hikingmap.core import config


def test_settings_defaults() -> None:
    """Test that Settings has expected default values."""
    settings = config.Settings()
    assert settings.port == 3000
    assert settings.cookie_max_age_seconds == 10
    assert settings.cookie_same_site == "none"
    assert settings.cookie_secure is True
    assert "http://localhost:5173" in settings.allow_origins
    assert "https://hiking-map.vercel.app" in settings.allow_origins


def test_settings_custom_values() -> None:
    """Test Settings with custom values."""
    settings = config.Settings(
        port=8080,
        allow_origins=["http://localhost:3000"],
        cookie_same_site="lax",
        cookie_secure=False,
        max_upload_size_bytes=1024,
    )
    assert settings.port == 8080
    assert settings.allow_origins == ["http://localhost:3000"]
    assert settings.cookie_same_site == "lax"
    assert settings.max_upload_size_bytes == 1024


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "4000")
    monkeypatch.setenv("COOKIE_SAME_SITE", "strict")
    settings = config.Settings()
    assert settings.port == 4000
    assert settings.cookie_same_site == "strict"


def test_same_site_none_requires_secure() -> None:
    """SameSite=None cookies without Secure are rejected."""
    with pytest.raises(pydantic.ValidationError):
        config.Settings(cookie_same_site="none", cookie_secure=False)


def test_get_settings_cached() -> None:
    """Test that get_settings returns cached instance."""
    config.get_settings.cache_clear()
    settings1 = config.get_settings()
    settings2 = config.get_settings()
    assert settings1 is settings2
    config.get_settings.cache_clear()
