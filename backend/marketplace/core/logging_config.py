"""Root logger setup applied once at application start-up."""

import logging

from marketplace.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger with a single stream handler.

    Args:
        level: Log level name. Defaults to ``settings.LOG_LEVEL``.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        handlers=[handler],
        force=True,
    )
