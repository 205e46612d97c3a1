# tgverify/telegram/bot.py
# Async Telegram bot using python-telegram-bot v20+.
# Builds the Application; tgverify.server runs it next to the web app.

import logging

from telegram.ext import Application, ApplicationBuilder

from tgverify.config import Settings
from tgverify.telegram import handlers

logger = logging.getLogger(__name__)


def build_app(settings: Settings) -> Application:
    app = ApplicationBuilder().token(settings.bot_token).build()

    # Register handlers defined in tgverify.telegram.handlers
    handlers.register_handlers(app, settings)

    return app
