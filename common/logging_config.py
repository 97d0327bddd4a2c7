## common/logging_config.py`

import logging
import os

LOGGER_NAME = "natural-language-commander"


def configure_logging(level=None):
    """Attach a stream handler to the commander logger. Safe to call repeatedly."""
    if level is None:
        level = os.getenv("NLC_LOGLEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setLevel(level)
        fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        ch.setFormatter(fmt)
        logger.addHandler(ch)
    else:
        for h in logger.handlers:
            h.setLevel(level)
    return logger
