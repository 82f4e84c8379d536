"""Logging setup for the ledgerpost command line."""

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Configure the package logger with a single console handler.

    Calling this again replaces the handler instead of stacking a new one.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    package_logger = logging.getLogger("ledgerpost")
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
