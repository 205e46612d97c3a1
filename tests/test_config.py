"""Tests for environment-driven settings."""
import dataclasses

import pytest

from tgverify.config import DEFAULT_PORT, Settings
from tgverify.errors import ConfigError, ErrorKind


def test_from_env_requires_token_and_group():
    with pytest.raises(ConfigError) as excinfo:
        Settings.from_env({})
    assert "TELEGRAM_BOT_TOKEN" in str(excinfo.value)
    assert "GROUP_ID" in str(excinfo.value)
    assert excinfo.value.kind == ErrorKind.MISSING_CONFIG


def test_from_env_missing_group_only():
    with pytest.raises(ConfigError) as excinfo:
        Settings.from_env({"TELEGRAM_BOT_TOKEN": "123:abc"})
    assert "GROUP_ID" in str(excinfo.value)
    assert "TELEGRAM_BOT_TOKEN" not in str(excinfo.value)


def test_from_env_defaults():
    settings = Settings.from_env({"TELEGRAM_BOT_TOKEN": "123:abc", "GROUP_ID": "-100555"})
    assert settings.bot_token == "123:abc"
    assert settings.group_id == -100555
    assert settings.port == DEFAULT_PORT == 3000
    assert settings.environment == "development"
    assert settings.group_name == "Nillion"
    assert settings.log_level == "INFO"
    assert settings.cors_origins == ("*",)


def test_from_env_accepts_bot_token_alias():
    settings = Settings.from_env({"BOT_TOKEN": " 42:xyz ", "GROUP_ID": "@publicgroup"})
    assert settings.bot_token == "42:xyz"
    assert settings.group_id == "@publicgroup"


def test_from_env_optional_values():
    settings = Settings.from_env({
        "TELEGRAM_BOT_TOKEN": "123:abc",
        "GROUP_ID": "-1",
        "PORT": "8080",
        "ENVIRONMENT": "production",
        "GROUP_NAME": "Builders",
        "LOG_LEVEL": "debug",
        "CORS_ORIGINS": "https://a.example, https://b.example,",
    })
    assert settings.port == 8080
    assert settings.environment == "production"
    assert settings.group_name == "Builders"
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ("https://a.example", "https://b.example")


def test_from_env_rejects_bad_port():
    with pytest.raises(ConfigError):
        Settings.from_env({"TELEGRAM_BOT_TOKEN": "123:abc", "GROUP_ID": "-1", "PORT": "http"})


def test_settings_are_immutable(settings):
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.group_id = 1


def test_summary_hides_token(settings):
    summary = settings.summary()
    assert "123:abc" not in summary
    assert "TELEGRAM_BOT_TOKEN=set" in summary
