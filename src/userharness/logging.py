"""Logging for the harness CLI and API server.

Harness events go through the ``userharness`` logger and follow the
verbosity chosen on the command line. Everything else stays at WARNING so
driver chatter does not bury them.
"""

import logging
import sys

from userharness.config import settings

HARNESS_LOGGER = "userharness"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level_name(level: str | None) -> str:
    return (level or settings.log_level).upper()


def get_uvicorn_log_config(level: str | None = None) -> dict:
    """Uvicorn log config sharing one format between server and harness events."""
    level = _level_name(level)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": "%(asctime)s %(levelprefix)s %(name)s: %(message)s",
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": '%(asctime)s %(levelprefix)s "%(request_line)s" %(status_code)s',
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            HARNESS_LOGGER: {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": level, "propagate": False},
            # Test API calls are the interesting traffic, keep them visible
            "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
        },
        "root": {"handlers": ["default"], "level": "WARNING"},
    }


def setup_logging(level: str | None = None) -> None:
    """Log harness events to stdout at ``level``, defaulting to ``LOG_LEVEL``."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stdout)
    logging.getLogger(HARNESS_LOGGER).setLevel(_level_name(level))
