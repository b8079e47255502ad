"""Logging setup, applied once at application start."""

import logging

from yield_ledger.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging() -> None:
    settings = get_settings()
    level = logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL
    logging.basicConfig(level=level, format=LOG_FORMAT)
