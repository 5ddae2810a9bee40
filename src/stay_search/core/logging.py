"""Logging setup for the command line entry points."""
from __future__ import annotations

import logging

from stay_search.config.settings import Settings

PACKAGE_LOGGER = "stay_search"
LOG_FILE_NAME = "stay_search.log"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(settings: Settings) -> logging.Logger:
    """Send package logs to stderr and ``<log_dir>/stay_search.log``.

    Safe to call more than once: handlers from an earlier call are replaced.
    """
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in (logging.StreamHandler(), logging.FileHandler(settings.log_dir / LOG_FILE_NAME)):
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    package_logger.setLevel(level)

    # httpx logs every request URL (query included) at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)
    return package_logger
