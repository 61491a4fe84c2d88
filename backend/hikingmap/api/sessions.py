"""Session demonstration endpoints.

The session itself is managed by Starlette's SessionMiddleware, installed
in ``create_app``; these handlers only read and write the ``test_data``
key of ``request.session``.
"""

from __future__ import annotations

from typing import Any

import fastapi

from hikingmap.api import schemas

SESSION_KEY = "test_data"

router = fastapi.APIRouter(prefix="/session", tags=["session"])


@router.post("/setSession")
async def set_session(
    body: schemas.ValueBody,
    request: fastapi.Request,
) -> dict[str, str]:
    request.session[SESSION_KEY] = body.value
    return {"message": "Session 已設定", "value": body.value}


@router.get("/seeSession")
async def see_session(request: fastapi.Request) -> dict[str, Any]:
    return {
        "message": "目前的 Session 資料",
        "sessionData": request.session.get(SESSION_KEY),
    }


@router.get("/useSession")
async def use_session(request: fastapi.Request) -> dict[str, str]:
    data = request.session.get(SESSION_KEY)
    if data:
        return {"message": "Session 有效", "value": data}
    return {"message": "Session 不存在或已過期"}


@router.post("/dropSession")
async def drop_session(request: fastapi.Request) -> dict[str, str]:
    """Clear the session. Succeeds whether or not anything was stored."""
    request.session.clear()
    return {"message": "Session 已清除"}
