# app/core/logging_config.py
"""JSON logger setup shared by the application modules."""

import logging

from pythonjsonlogger.json import JsonFormatter

ROOT_LOGGER = "app"


def configure_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        JsonFormatter("%(levelname)s %(name)s %(message)s %(asctime)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger
