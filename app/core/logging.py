"""Structured logging configuration.

Configures the root logger with a structured format including timestamp,
level, and module name.  The log level is controlled by ``settings.LOG_LEVEL``.
"""

import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# HTTP client internals used by supabase-py; their DEBUG/INFO output is one
# line per PostgREST request.
_NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "uvicorn.access")


def setup_logging(level: str | None = None) -> None:
    """Install a single stdout handler on the root logger.

    ``level`` overrides ``settings.LOG_LEVEL``; unknown names fall back to
    INFO.  Calling this more than once replaces the handler instead of
    stacking duplicates.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
