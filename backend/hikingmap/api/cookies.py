"""Cookie demonstration endpoints.

These endpoints show a browser cookie travelling between a cross-site
front end and the API: one sets ``test_cookie``, two read it back and one
expires it. Cookie attributes (SameSite, Secure, lifetime) come from
settings so that local plain-http development can relax them.

Example:
    >>> client.post("/cookie/setCookie", json={"value": "hello-cookie"})
    >>> client.get("/cookie/useCookie").json()["status"]
    '已驗證'
"""

from __future__ import annotations

import json
from typing import Any

import fastapi

from hikingmap.api import dependencies, schemas
from hikingmap.core import config

COOKIE_NAME = "test_cookie"

router = fastapi.APIRouter(prefix="/cookie", tags=["cookie"])


@router.post("/setCookie")
async def set_cookie(
    body: schemas.ValueBody,
    response: fastapi.Response,
    settings: config.Settings = fastapi.Depends(dependencies.get_settings),  # noqa: B008
) -> dict[str, str]:
    """Store the submitted value in ``test_cookie``.

    Args:
        body: JSON body holding the cookie value.
        response: Response the cookie header is attached to.
        settings: Application settings (injected via FastAPI Depends).

    Returns:
        Confirmation message and the stored value.
    """
    response.set_cookie(
        COOKIE_NAME,
        body.value,
        max_age=settings.cookie_max_age_seconds,
        path="/",
        samesite=settings.cookie_same_site,
        secure=settings.cookie_secure,
        httponly=True,
    )
    return {"message": "Cookie 已設定", "cookie": body.value}


@router.get("/seeCookie")
async def see_cookie(
    test_cookie: str | None = fastapi.Cookie(default=None),
) -> dict[str, str]:
    """Echo the current cookie value, ``null`` when it is not set."""
    return {"message": f"Cookie 是這個：{json.dumps(test_cookie, ensure_ascii=False)}"}


@router.get("/useCookie")
async def use_cookie(
    test_cookie: str | None = fastapi.Cookie(default=None),
) -> dict[str, Any]:
    """Report whether the cookie is present, as a backend check would."""
    if test_cookie:
        return {
            "message": f'Cookie "{COOKIE_NAME}" 已被成功使用！',
            "value": test_cookie,
            "status": "已驗證",
        }
    return {
        "message": f'找不到 Cookie "{COOKIE_NAME}"，請確認是否已設定。',
        "status": "未驗證",
    }


@router.post("/dropCookie")
async def drop_cookie(
    response: fastapi.Response,
    settings: config.Settings = fastapi.Depends(dependencies.get_settings),  # noqa: B008
) -> dict[str, str]:
    """Expire ``test_cookie``. Succeeds whether or not it was set."""
    response.delete_cookie(
        COOKIE_NAME,
        path="/",
        samesite=settings.cookie_same_site,
        secure=settings.cookie_secure,
        httponly=True,
    )
    return {"message": "Cookie 已刪除"}
