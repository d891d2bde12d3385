from __future__ import annotations

import logging

from updoo.config import settings


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def get_log_level(value: str | None = None) -> int:
    """Resolve a level name such as ``"debug"`` to its logging constant, defaulting to INFO."""
    level = (value or settings.log_level or "INFO").upper()
    return getattr(logging, level, logging.INFO)


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the ``updoo`` logger with a single console handler.

    Calling it twice replaces the handler instead of duplicating output.
    """
    logger = logging.getLogger("updoo")
    logger.setLevel(get_log_level(level))
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Logging configured at level %s", logging.getLevelName(logger.level))
    return logger
