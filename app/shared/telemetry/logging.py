"""Logging configuration for the application."""

import logging
import sys

from app.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. SQL echo stays on SQLAlchemy's own logger.
    """
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Driver loggers stay at INFO or above.
    logging.getLogger("aiosqlite").setLevel(max(log_level, logging.INFO))
    logging.getLogger("httpcore").setLevel(max(log_level, logging.INFO))
