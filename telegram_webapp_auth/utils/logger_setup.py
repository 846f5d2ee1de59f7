"""Loguru-based logger configuration utilities."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Mapping

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger


class PropagateHandler(logging.Handler):
    """Redirect :mod:`loguru` log records to the standard ``logging`` module."""

    def emit(self, record: logging.LogRecord) -> None:
        """Forward a Loguru record to ``logging``.

        Args:
            record: Log record produced by :mod:`loguru`.

        """
        logging.getLogger(record.name).handle(record)


def custom_format(record: Mapping[str, Any]) -> str:
    """Return formatted log message for loguru.

    Args:
        record: Loguru record dictionary.

    Returns:
        str: Formatted log line with module, line and bound context.

    """
    context = ""
    if record.get("extra"):
        context = " {extra}"
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{line}</cyan> <cyan>{function}</cyan> - "
        "<level>{message}</level>"
        f"{context}\n"
    )


def setup_logger(level: str | int = "INFO") -> Logger:
    """Configure a :mod:`loguru` logger that also propagates to ``logging``.

    Library modules only emit records; applications embedding the validators
    call this once at start-up to get coloured stderr output. Every record is
    also forwarded to the standard logging system so frameworks that only
    listen to ``logging`` (and pytest's ``caplog``) still see it.

    Args:
        level: Minimum level for the stderr sink.

    Returns:
        loguru.Logger: Configured logger instance.

    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=custom_format, colorize=True)  # type: ignore[arg-type]
    logger.add(PropagateHandler(), format="{message}")

    return logger


def get_logger(**context: Any) -> Logger:
    """Return the shared logger bound to ``context`` (e.g. ``flow``, ``user_id``)."""
    return logger.bind(**context)


__all__ = ["PropagateHandler", "custom_format", "setup_logger", "get_logger"]
