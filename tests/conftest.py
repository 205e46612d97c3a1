from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import User

from tgverify.config import Settings

BOT_ID = 999
BOT_USERNAME = "VerifyBot"


@pytest.fixture
def settings():
    return Settings(bot_token="123:abc", group_id=-100123, environment="test")


@pytest.fixture
def bot():
    """A Bot stand-in whose API calls are AsyncMocks."""
    bot = MagicMock()
    bot.id = BOT_ID
    bot.username = BOT_USERNAME
    bot.get_chat_member = AsyncMock()
    bot.get_chat_administrators = AsyncMock(return_value=[])
    bot.get_me = AsyncMock()
    bot.get_chat = AsyncMock()
    return bot


@pytest.fixture
def make_user():
    def _make(user_id, username=None, first_name="Test"):
        return User(id=user_id, first_name=first_name, is_bot=False, username=username)

    return _make


@pytest.fixture
def chat_member():
    def _make(user, status):
        return SimpleNamespace(user=user, status=status)

    return _make
