# tgverify/telegram/handlers.py
import functools
import logging
import time
from typing import Dict, Optional, Tuple

from telegram import Chat, Message, MessageEntity, Update, User
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)
from telegram.helpers import escape_markdown

from tgverify.config import Settings
from tgverify.errors import LookupFailure, classify
from tgverify.models import Identity
from tgverify.telegram.membership import get_member, is_group_admin

log = logging.getLogger(__name__)

TRY_AGAIN = "An error occurred. Please try again later."
VERIFY_FAILED = "An error occurred during verification. Please try again later."
STATUS_FAILED = "Error checking bot status. Please try again later."
NO_IDENTITY = "Could not verify your Telegram account."
ADMINS_ONLY = "Only group administrators can look up user IDs."
TAG_A_USER = "Please tag a real user (not me) to get their user ID."

HELP_TEXT = (
    "Available commands:\n"
    "/verify - check that you are a member of the {group_name} group\n"
    "/userid - show your Telegram user ID\n"
    "/groupid - show this chat's ID\n"
    "/status - show bot and group status\n"
    "\n"
    "Group admins can also mention me together with a user to get that user's ID."
)


def _settings(context: ContextTypes.DEFAULT_TYPE) -> Settings:
    return context.bot_data["settings"]


def timed(func):
    """Log how long a handler took, like the old request logging middleware."""

    @functools.wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE):
        start = time.monotonic()
        try:
            return await func(update, context)
        finally:
            log.debug("Response time: %sms (%s)", int((time.monotonic() - start) * 1000), func.__name__)

    return wrapper


@timed
async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.effective_message.reply_text(HELP_TEXT.format(group_name=_settings(context).group_name))


@timed
async def cmd_verify(update: Update, context: ContextTypes.DEFAULT_TYPE):
    settings = _settings(context)
    message = update.effective_message
    user = update.effective_user

    if user is None:
        await message.reply_text(NO_IDENTITY)
        return

    try:
        record = await get_member(context.bot, settings.group_id, user.id)
    except LookupFailure as e:
        log.warning("Verification error for %s [%s]: %s", user.id, e.kind.value, e)
        await message.reply_text(VERIFY_FAILED)
        return

    if not record.is_member:
        await message.reply_text(f"You need to be a member of the {settings.group_name} group to verify.")
        return

    # nothing is stored; the log line is the only record of a verification
    log.info("User %s (%s) verified as a member", user.id, user.username)
    await message.reply_text(
        f"Your Telegram account has been verified! You are a member of the {settings.group_name} group."
    )


@timed
async def cmd_status(update: Update, context: ContextTypes.DEFAULT_TYPE):
    settings = _settings(context)
    try:
        me = await context.bot.get_me()
        group = await context.bot.get_chat(chat_id=settings.group_id)
    except TelegramError as e:
        log.warning("Status check error [%s]: %s", classify(e).value, e)
        await update.effective_message.reply_text(STATUS_FAILED)
        return

    title = group.title if group.type in (Chat.GROUP, Chat.SUPERGROUP) else "N/A"
    await update.effective_message.reply_text(
        "Bot Status:\n"
        f"Name: {me.first_name}\n"
        f"Username: @{me.username}\n"
        f"Group: {title}\n"
        f"Group ID: {settings.group_id}\n"
        f"Environment: {settings.environment}"
    )


@timed
async def cmd_userid(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user = update.effective_user
    if user is None:
        await update.effective_message.reply_text("Could not retrieve your user ID.")
        return
    name = escape_markdown(Identity.from_user(user).display_name or "")
    await update.effective_message.reply_text(
        f"Your Telegram user ID is: `{user.id}`\nUsername: @{name}",
        parse_mode=ParseMode.MARKDOWN,
    )


@timed
async def cmd_groupid(update: Update, context: ContextTypes.DEFAULT_TYPE):
    chat = update.effective_chat
    if chat is None:
        await update.effective_message.reply_text("Could not retrieve the group ID.")
        return
    await update.effective_message.reply_text(
        f"This group's ID is: `{chat.id}`",
        parse_mode=ParseMode.MARKDOWN,
    )


def mentions_bot(entities: Dict[MessageEntity, str], bot_username: Optional[str]) -> bool:
    if not bot_username:
        return False
    wanted = "@" + bot_username.lower()
    return any(
        e.type == MessageEntity.MENTION and text.lower() == wanted
        for e, text in entities.items()
    )


def find_mentioned_user(
    entities: Dict[MessageEntity, str], bot_id: int, bot_username: Optional[str]
) -> Tuple[Optional[User], Optional[str]]:
    """Return the first user tagged in a message, other than the bot.

    The first item is a resolvable user (a text mention carrying the User).
    The second is a plain ``@username`` mention, which Telegram cannot turn
    into an id. At most one of them is set.
    """
    bot_mention = "@" + (bot_username or "").lower()
    plain = None
    for entity in sorted(entities, key=lambda e: e.offset):
        if entity.type == MessageEntity.TEXT_MENTION and entity.user and entity.user.id != bot_id:
            return entity.user, None
        if entity.type == MessageEntity.MENTION and plain is None:
            text = entities[entity]
            if text.lower() != bot_mention:
                plain = text
    return None, plain


def sent_as_chat(message: Message) -> bool:
    sender_chat = message.sender_chat
    return sender_chat is not None and sender_chat.id == message.chat_id


@timed
async def on_mention(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Group admins mention the bot along with a user to get that user's id."""
    message: Message = update.effective_message
    if message is None or not message.text:
        return

    entities = message.parse_entities([MessageEntity.MENTION, MessageEntity.TEXT_MENTION])
    if not mentions_bot(entities, context.bot.username):
        return

    try:
        # anonymous admins post as the group itself; their from_user is GroupAnonymousBot
        allowed = sent_as_chat(message) or await is_group_admin(
            context.bot, message.chat_id, update.effective_user
        )
    except LookupFailure as e:
        log.warning("Admin check failed in chat %s [%s]: %s", message.chat_id, e.kind.value, e)
        await message.reply_text(TRY_AGAIN)
        return

    if not allowed:
        await message.reply_text(ADMINS_ONLY)
        return

    user, plain = find_mentioned_user(entities, context.bot.id, context.bot.username)
    if user is not None:
        await message.reply_text(f"{user.full_name}'s Telegram user ID is: {user.id}")
    elif plain is not None:
        await message.reply_text(
            f"I can't look up the ID for {plain}: Telegram does not resolve plain @username "
            "mentions. Tag the user by picking them from the member list instead."
        )
    else:
        await message.reply_text(TAG_A_USER)


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE):
    log.error("Bot error: %s", context.error, exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        try:
            await update.effective_message.reply_text(TRY_AGAIN)
        except TelegramError:
            log.exception("could not deliver error reply")


def register_handlers(app: Application, settings: Settings) -> None:
    app.bot_data["settings"] = settings

    app.add_handler(CommandHandler(["start", "help"], cmd_start))
    app.add_handler(CommandHandler("verify", cmd_verify))
    app.add_handler(CommandHandler("status", cmd_status))
    app.add_handler(CommandHandler("userid", cmd_userid))
    app.add_handler(CommandHandler("groupid", cmd_groupid))
    app.add_handler(
        MessageHandler(
            filters.ChatType.GROUPS
            & filters.TEXT
            & ~filters.COMMAND
            & filters.Entity(MessageEntity.MENTION),
            on_mention,
        )
    )
    app.add_error_handler(on_error)
