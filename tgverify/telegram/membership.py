# tgverify/telegram/membership.py
"""
Group membership lookups against the Telegram Bot API.

Shared by the chat commands and the HTTP API. Every call goes straight to
Telegram; nothing is cached, so an admin list or a status is always as fresh
as the request that asked for it.
"""

import logging
from typing import List, Optional, Union

from telegram import Bot, ChatMember, User
from telegram.error import TelegramError

from tgverify.config import GroupId
from tgverify.errors import ErrorKind, LookupFailure, classify
from tgverify.models import MembershipRecord

log = logging.getLogger("membership")


def normalize_username(username: str) -> str:
    username = username.strip()
    if username.startswith("@"):
        username = username[1:]
    return username


async def get_member(bot: Bot, group_id: GroupId, user: Union[int, str]) -> MembershipRecord:
    """Fetch ``user`` (numeric id or ``@username``) in ``group_id``.

    Raises LookupFailure carrying the classified ErrorKind on any upstream error.
    """
    try:
        cm = await bot.get_chat_member(chat_id=group_id, user_id=user)
    except TelegramError as e:
        raise LookupFailure(f"get_chat_member({group_id}, {user}) failed: {e}", classify(e)) from e
    return MembershipRecord.from_chat_member(cm)


async def get_admins(bot: Bot, group_id: GroupId) -> List[ChatMember]:
    try:
        return list(await bot.get_chat_administrators(chat_id=group_id))
    except TelegramError as e:
        raise LookupFailure(f"get_chat_administrators({group_id}) failed: {e}", classify(e)) from e


async def is_group_admin(bot: Bot, chat_id: GroupId, user: Optional[User]) -> bool:
    """True if ``user`` is the creator or an administrator of ``chat_id`` right now."""
    if user is None:
        return False
    admins = await get_admins(bot, chat_id)
    return any(a.user.id == user.id for a in admins)


def find_admin_by_username(admins: List[ChatMember], username: str) -> Optional[ChatMember]:
    wanted = normalize_username(username).lower()
    for admin in admins:
        if admin.user.username and admin.user.username.lower() == wanted:
            return admin
    return None


async def resolve_username(bot: Bot, group_id: GroupId, username: str) -> MembershipRecord:
    """Resolve ``username`` to a membership record in ``group_id``.

    Telegram has no username lookup for ordinary users. The direct
    ``@username`` form is tried first, then the group's admin list is
    searched. A non-admin username that the direct call rejects ends in
    LookupFailure(NOT_FOUND).
    """
    name = normalize_username(username)
    if not name:
        raise LookupFailure("empty username", ErrorKind.NOT_FOUND)

    try:
        return await get_member(bot, group_id, f"@{name}")
    except LookupFailure as e:
        log.debug("direct lookup of @%s failed (%s), searching admins", name, e.kind.value)

    admin = find_admin_by_username(await get_admins(bot, group_id), name)
    if admin is None:
        raise LookupFailure(
            f"@{name} is not an administrator of {group_id}; "
            "usernames of regular members cannot be resolved",
            ErrorKind.NOT_FOUND,
        )
    return MembershipRecord.from_chat_member(admin)


__all__ = [
    "get_admins",
    "get_member",
    "is_group_admin",
    "normalize_username",
    "resolve_username",
]
