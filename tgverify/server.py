# tgverify/server.py
"""
Runs the Telegram bot (long polling) and the FastAPI web service on one
event loop.

The bot lives inside the web app's lifespan. uvicorn owns SIGINT/SIGTERM and
runs the lifespan shutdown before it exits (and, on recent releases,
re-raises the signal), so the updater and application are always stopped
first. The HTTP listener is not drained.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from telegram.ext import Application

from tgverify.config import Settings
from tgverify.main import create_app
from tgverify.telegram.bot import build_app

log = logging.getLogger("tgverify.server")


def bot_lifespan(application: Application, settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await application.initialize()
        await application.start()
        await application.updater.start_polling()
        log.info("Telegram bot is running as @%s", application.bot.username)
        log.info("Monitoring group: %s", settings.group_id)
        try:
            yield
        finally:
            log.info("Stopping Telegram bot")
            if application.updater.running:
                await application.updater.stop()
            await application.stop()
            await application.shutdown()

    return lifespan


async def serve(settings: Settings) -> None:
    application = build_app(settings)
    web = create_app(settings, application.bot, lifespan=bot_lifespan(application, settings))

    server = uvicorn.Server(
        uvicorn.Config(
            web,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
    )
    log.info("Telegram bot HTTP server running on port %s", settings.port)
    await server.serve()
