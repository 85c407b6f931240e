"""Logging setup for applications embedding hanzi_reader."""

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Attach a single stream handler to the ``hanzi_reader`` logger.

    Repeated calls only update the level.
    """
    logger = logging.getLogger("hanzi_reader")
    logger.setLevel(level)
    if not any(getattr(h, "_hanzi_reader", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._hanzi_reader = True
        logger.addHandler(handler)
    return logger
