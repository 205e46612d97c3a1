# tgverify/routes.py
import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from tgverify.errors import ErrorKind, LookupFailure, classify
from tgverify.telegram.membership import get_member, resolve_username

logger = logging.getLogger("tgverify.routes")

router = APIRouter()

NOT_FOUND_BODY = {"exists": False}


@router.get("/", response_class=PlainTextResponse)
async def index():
    return "Telegram bot is running!"


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz():
    return "ok"


@router.get("/api/verify")
async def api_verify(
    request: Request,
    user_id: Optional[str] = Query(None, alias="userId"),
    username: Optional[str] = Query(None),
    group_id: Optional[str] = Query(None, alias="groupId"),
):
    """
    Look up one user's membership in a group.

    Example: GET /api/verify?userId=12345&groupId=-100987
    - userId wins over username when both are given
    - username lookups only reach users Telegram resolves directly or group admins
    - groupId defaults to the configured group
    Every failure collapses into 404 {"exists": false}; the cause is only logged.
    """
    settings = request.app.state.settings
    bot = request.app.state.bot
    group = group_id or settings.group_id

    if not user_id and not username:
        return JSONResponse({"error": "Provide userId or username"}, status_code=400)

    try:
        if user_id:
            try:
                uid = int(user_id)
            except ValueError:
                raise LookupFailure(f"userId {user_id!r} is not numeric", ErrorKind.NOT_FOUND)
            record = await get_member(bot, group, uid)
        else:
            record = await resolve_username(bot, group, username)
    except Exception as e:
        logger.warning(
            "api/verify failed userId=%s username=%s group=%s [%s]: %s",
            user_id, username, group, classify(e).value, e,
        )
        return JSONResponse(NOT_FOUND_BODY, status_code=404)

    return JSONResponse(record.to_json())
