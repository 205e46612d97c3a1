# tgverify/config.py
"""
Central configuration.

Read once from the environment at process start and passed explicitly to the
bot handlers and the web app. Nothing else in the package calls os.getenv.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple, Union

from tgverify.errors import ConfigError

GroupId = Union[int, str]

DEFAULT_PORT = 3000
DEFAULT_ENVIRONMENT = "development"
DEFAULT_GROUP_NAME = "Nillion"


def _parse_group_id(raw: str) -> GroupId:
    # numeric ids ("-100123...") go upstream as ints, "@publicgroup" stays a str
    try:
        return int(raw)
    except ValueError:
        return raw


def _parse_origins(raw: str) -> Tuple[str, ...]:
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or ("*",)


@dataclass(frozen=True)
class Settings:
    bot_token: str
    group_id: GroupId
    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"
    environment: str = DEFAULT_ENVIRONMENT
    group_name: str = DEFAULT_GROUP_NAME
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``).

        Raises ConfigError naming every missing required variable.
        """
        env = os.environ if environ is None else environ

        bot_token = (env.get("TELEGRAM_BOT_TOKEN") or env.get("BOT_TOKEN") or "").strip()
        group_raw = env.get("GROUP_ID", "").strip()

        missing = []
        if not bot_token:
            missing.append("TELEGRAM_BOT_TOKEN")
        if not group_raw:
            missing.append("GROUP_ID")
        if missing:
            raise ConfigError("Missing required env vars: " + ", ".join(missing))

        port_raw = env.get("PORT", "").strip()
        try:
            port = int(port_raw) if port_raw else DEFAULT_PORT
        except ValueError:
            raise ConfigError(f"PORT must be an integer, got {port_raw!r}")

        return cls(
            bot_token=bot_token,
            group_id=_parse_group_id(group_raw),
            port=port,
            host=env.get("HOST", "0.0.0.0").strip() or "0.0.0.0",
            environment=env.get("ENVIRONMENT", "").strip() or DEFAULT_ENVIRONMENT,
            group_name=env.get("GROUP_NAME", "").strip() or DEFAULT_GROUP_NAME,
            log_level=env.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
            cors_origins=_parse_origins(env.get("CORS_ORIGINS", "")),
        )

    def summary(self) -> str:
        return (
            f"TELEGRAM_BOT_TOKEN={'set' if self.bot_token else 'MISSING'}, "
            f"GROUP_ID={self.group_id}, PORT={self.port}, "
            f"ENVIRONMENT={self.environment}, LOG_LEVEL={self.log_level}"
        )
