"""
utils/logger.py
---------------
Logging setup for paycycle.
Repositories and services take a module logger via `get_logger(__name__)`;
the level comes from LOG_LEVEL in .env.
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_initialized = False


def _init_logging() -> None:
    """Attach the stdout handler to the root logger on first use."""
    global _initialized
    if _initialized:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root = logging.getLogger()
    # Unknown level names fall back to INFO.
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root.addHandler(handler)
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Module logger, e.g. `services.occurrence_service`; configures logging on first call."""
    _init_logging()
    return logging.getLogger(name)
