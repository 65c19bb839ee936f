"""Logging configuration helpers."""

import logging

_FORMAT = "%(levelname)s: %(name)s: %(message)s"
HANDLER_NAME = "fitdata-stream"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Attach a single stream handler to the ``fitdata`` logger.

    Safe to call repeatedly: later calls only change the level.
    """
    logger = logging.getLogger("fitdata")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if any(handler.get_name() == HANDLER_NAME for handler in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
