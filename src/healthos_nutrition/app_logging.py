"""Logging configuration helpers."""

import logging

LOGGER_NAME = "healthos_nutrition"


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the package logger and set its level.

    Calling this again only updates the level, so app factories and tests can
    call it freely.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
