"""FastAPI dependencies shared by the routers."""

import fastapi

from hikingmap.core import config


def get_settings(request: fastapi.Request) -> config.Settings:
    """Return the settings the running application was created with.

    Args:
        request: Incoming request (injected by FastAPI).

    Returns:
        The Settings instance stored on ``app.state`` by ``create_app``.
    """
    return request.app.state.settings
