"""
Logging helpers shared across the pedalpace package.

Every module grabs its own logger with ``app_logger(__name__)``. Handlers are
attached once per logger name so repeated imports don't duplicate output.
"""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LEVEL = "INFO"


def app_logger(name: str, log_file: Optional[str] = None) -> logging.Logger:
    """
    Return a configured logger.

    :param name: Logger name, usually ``__name__``.
    :param log_file: Optional file path; when set, records are also written there.
    :return: logging.Logger
    """
    logger = logging.getLogger(name)
    level = os.getenv("PEDALPACE_LOG_LEVEL", DEFAULT_LEVEL).upper()
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        logger.propagate = False

    return logger
