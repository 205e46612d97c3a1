# tgverify/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from telegram import Bot

from tgverify.config import Settings
from tgverify.routes import router


def create_app(settings: Settings, bot: Bot, lifespan=None) -> FastAPI:
    """Build the web app around an already-configured Bot.

    ``lifespan`` is where the server hooks the bot's start and stop.
    """
    app = FastAPI(title="Telegram Group Verifier", lifespan=lifespan)
    app.state.settings = settings
    app.state.bot = bot

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app
