"""Logging configuration for the caption API."""

import logging
import sys

# Track if logging has been set up to prevent duplicate handlers
_logging_configured = False


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """
    Configure console logging on the root logger.

    Safe to call more than once; only the first call installs a handler.
    """
    global _logging_configured

    root_logger = logging.getLogger()
    if _logging_configured:
        return root_logger

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # requests/urllib3 are chatty at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _logging_configured = True
    return root_logger
