import logging
import sys
from logging import StreamHandler

from guestlist.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are too chatty at DEBUG/INFO for a request log
QUIET_LOGGERS = ("httpx", "httpcore", "passlib", "aiosqlite", "asyncio")


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[StreamHandler(sys.stdout)],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if not settings.LOG_DB:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
