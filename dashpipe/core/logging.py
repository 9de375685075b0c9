"""Structured logging configuration for dashpipe."""

import logging
import sys

from json_log_formatter import JSONFormatter


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
) -> None:
    """Configure logging for dashpipe.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; otherwise use normal format
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Package root logger; module loggers propagate here
    logger = logging.getLogger("dashpipe")
    logger.setLevel(log_level)
    logger.handlers.clear()

    # stdout carries command output (rows, schemas)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = StructuredFormatter()

    handler.setFormatter(formatter)
    logger.addHandler(handler)


class StructuredFormatter(logging.Formatter):
    """Structured formatter that adds context to log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with context."""
        context = getattr(record, "context", {})

        parts = [f"[{record.levelname}]"]

        if hasattr(record, "source_type"):
            parts.append(f"source={record.source_type}")

        if hasattr(record, "data_source_id"):
            parts.append(f"data_source={record.data_source_id}")

        for key, value in context.items():
            parts.append(f"{key}={value}")

        parts.append(record.getMessage())

        message = " ".join(parts)
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message
