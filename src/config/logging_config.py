"""Logging configuration."""

import logging
import logging.config
from typing import Any


def build_logging_config(level: str = "INFO", log_file: str | None = None) -> dict[str, Any]:
    """
    Build a dictConfig mapping for the application.

    Args:
        level: Log level name for the application loggers
        log_file: Optional path of a log file to write alongside the console

    Returns:
        Dictionary accepted by logging.config.dictConfig
    """
    level = level.upper()
    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "level": level,
            "class": "rich.logging.RichHandler",
            "formatter": "console",
            "rich_tracebacks": True,
            "show_path": False,
        },
    }
    if log_file:
        handlers["file"] = {
            "level": level,
            "class": "logging.FileHandler",
            "filename": log_file,
            "formatter": "standard",
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            # RichHandler renders time and level itself
            "console": {"format": "%(name)s: %(message)s"},
        },
        "handlers": handlers,
        "loggers": {
            "src": {
                "handlers": list(handlers),
                "level": level,
                "propagate": False,
            },
            # boto is chatty at INFO
            "botocore": {"level": "WARNING"},
            "": {
                "handlers": list(handlers),
                "level": "WARNING",
            },
        },
    }


def configure_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Apply the application logging configuration."""
    logging.config.dictConfig(build_logging_config(level, log_file))
