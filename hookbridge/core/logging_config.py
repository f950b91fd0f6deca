"""Logging configuration for applications embedding hookbridge."""

import logging

from hookbridge.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str | int | None = None) -> None:
    """
    Configure standard logging for hookbridge.

    Library modules only create module-level loggers; call this from the
    host application's entry point if it has no logging setup of its own.

    Args:
        level: Log level name or number. Defaults to settings.log_level.
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logging.basicConfig(level=level, format=LOG_FORMAT)

    # Suppress noisy third-party loggers
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("hookbridge").setLevel(level)
