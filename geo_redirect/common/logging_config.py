"""Logging configuration for the GeoIP API."""

import json
import logging
import sys
from typing import Optional


LOGGER_NAME = "geoip_api"


class PayloadFormatter(logging.Formatter):
    """Text formatter that appends the structured ``payload`` extra as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        payload = getattr(record, "payload", None)
        if payload:
            message = f"{message} {json.dumps(payload, default=str, sort_keys=True)}"
        return message


class JsonFormatter(logging.Formatter):
    """One JSON object per line, payload keys merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload = getattr(record, "payload", None)
        if payload:
            entry.update(payload)
        if record.exc_info:
            entry["stack"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    enabled: bool = True,
) -> logging.Logger:
    """Setup logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        json_format: Whether to use JSON format
        enabled: When False the logger becomes a no-op sink

    Returns:
        Configured logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Remove existing handlers
    logger.handlers.clear()

    # Child loggers propagate here even when disabled, so swallow everything
    if not enabled:
        logger.addHandler(logging.NullHandler())
        logger.propagate = False
        return logger
    logger.propagate = True

    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = PayloadFormatter(
            "%(asctime)s [GEOIP-API] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
