"""Logger factory shared by every photosweep module."""

import logging
import os

LOG_LEVEL_ENV = "PHOTOSWEEP_LOG_LEVEL"

# Producers and the deletion worker log from different threads.
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"

# Request outcomes only ever surface in the log, so they are shown by default
# alongside CLI progress; everything else stays at WARNING.
_VERBOSE_SUFFIXES = (".cli", ".deletion.events")


def default_level(name: str) -> int:
    return logging.INFO if name.endswith(_VERBOSE_SUFFIXES) else logging.WARNING


def resolve_level(name: str) -> int:
    """Level from PHOTOSWEEP_LOG_LEVEL, falling back to the module default on unknown names."""
    configured = os.getenv(LOG_LEVEL_ENV, "").strip()
    if configured:
        level = logging.getLevelName(configured.upper())
        if isinstance(level, int):
            return level
    return default_level(name)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolve_level(name))
    return logger
