"""Logging configuration."""

import logging
import sys
from typing import Optional

from papertrade.config.settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are chatty at INFO (SQL echo, gRPC channel setup, HTTP calls)
_QUIET_LOGGERS = ("sqlalchemy.engine", "google", "grpc", "urllib3", "httpx")


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure application logging from settings (``log_level``)."""
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("papertrade").setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
