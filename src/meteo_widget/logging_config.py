"""Centralized logging configuration."""

import logging.config

from meteo_widget.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Server and HTTP client loggers get the console handler directly
SERVER_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "httpx", "fastapi")


def build_logging_config(level: str = LOG_LEVEL) -> dict:
    """Describe the widget's logging setup as a ``dictConfig`` mapping.

    Args:
        level: Level name applied to the root and server loggers

    Returns:
        Configuration dictionary for :func:`logging.config.dictConfig`
    """
    console = {
        "class": "logging.StreamHandler",
        "formatter": "widget",
        "level": level,
    }
    return {
        "version": 1,
        # Module loggers are created at import time, before this runs
        "disable_existing_loggers": False,
        "formatters": {
            "widget": {"format": LOG_FORMAT, "datefmt": LOG_DATE_FORMAT},
        },
        "handlers": {
            "console": console,
            "server_console": dict(console),
        },
        "loggers": {
            name: {"handlers": ["server_console"], "level": level, "propagate": False}
            for name in SERVER_LOGGERS
        },
        "root": {"handlers": ["console"], "level": level},
    }


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Apply the widget's logging setup; safe to call more than once."""
    logging.config.dictConfig(build_logging_config(level))
