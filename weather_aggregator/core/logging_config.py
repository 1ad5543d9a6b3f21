"""
Logging configuration for Weather Aggregator Service.
Supports both JSON and text logging formats.
"""

import logging
import logging.config
import sys
from typing import Dict, Any
from pythonjsonlogger import jsonlogger

from .config import settings

FORMATTERS: Dict[str, Dict[str, Any]] = {
    "json": {
        "()": jsonlogger.JsonFormatter,
        "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(funcName)s %(lineno)d",
        "datefmt": "%Y-%m-%d %H:%M:%S"
    },
    "text": {
        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S"
    }
}


def get_logging_config(log_format: str, log_level: str) -> Dict[str, Any]:
    """Build a dictConfig for the given format ('json' or 'text') and level."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {log_format: FORMATTERS[log_format]},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": log_format,
                "stream": sys.stdout
            }
        },
        "root": {"handlers": ["console"], "level": log_level}
    }


def setup_logging() -> None:
    """Setup structured logging for the application."""
    logging.config.dictConfig(get_logging_config(settings.log_format, settings.log_level))

    # Reduce noise from the HTTP client stack
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def create_logger(module_name: str) -> logging.Logger:
    """Create a logger for a specific module under the service namespace."""
    if module_name.startswith("weather_aggregator"):
        return logging.getLogger(module_name)
    return logging.getLogger(f"weather_aggregator.{module_name}")
