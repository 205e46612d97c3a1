# tgverify/__main__.py
import asyncio
import logging
import sys

from dotenv import load_dotenv

from tgverify.config import Settings
from tgverify.errors import ConfigError
from tgverify.server import serve

log = logging.getLogger("tgverify")


def main() -> None:
    load_dotenv()
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO)
        log.error("%s (set them in the environment or a .env file)", e)
        sys.exit(1)

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    # httpx logs every getUpdates poll at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    log.info("Config: %s", settings.summary())

    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        log.info("Bot stopped by user")


if __name__ == "__main__":
    main()
