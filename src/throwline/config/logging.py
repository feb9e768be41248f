# topmark:header:start
#
#   project      : ThrowLine
#   file         : logging.py
#   file_relpath : src/throwline/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Custom ThrowLine logging with TRACE logging.

This module extends the standard logging module with ThrowLine-specific features,
including a custom TRACE level, a specialized logger class, and colored output formatting.

The bus logs its fan-out at TRACE and the raising operations log their decisions at
DEBUG, so a consumer can watch the whole throw flow by lowering the level.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Any, Final

from yachalk import chalk

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping

# Define TRACE_LEVEL as a module-level constant
TRACE_LEVEL: Final[int] = logging.DEBUG - 5

LOG_LEVEL_ENV_VAR: Final[str] = "THROWLINE_LOG_LEVEL"


class ThrowlineLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger adapter for ThrowLine with support for a TRACE log level below DEBUG.

    ThrowLine is imported by host applications that may have created (and
    configured) its module loggers before the import, so the TRACE method
    lives on an adapter around whatever `logging.Logger` already exists
    instead of on a replacement logger class.
    """

    def __init__(self, logger: logging.Logger) -> None:
        super().__init__(logger, None)

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        """Pass ``msg`` and ``kwargs`` through unchanged (no adapter-level ``extra``)."""
        return msg, kwargs

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log 'msg % args' with severity 'TRACE'.

        Args:
            msg (object): The message to be logged.
            *args (object): Variable length argument list for the message.
            extra (Mapping[str, object] | None): Optional dictionary of extra information to pass
                to the logger.
        """
        if self.isEnabledFor(TRACE_LEVEL):
            self.logger.log(TRACE_LEVEL, msg, *args, extra=extra, stacklevel=2)


if not hasattr(logging, "TRACE"):
    logging.addLevelName(TRACE_LEVEL, "TRACE")
    # Expose TRACE_LEVEL as logging.TRACE
    logging.TRACE = TRACE_LEVEL  # type: ignore


LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"

_LEVEL_NAMES: Final[dict[str, int]] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


class ChalkFormatter(logging.Formatter):
    """Formatter that outputs log records with chalk-colored formatting based on severity level."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the specified record with colors based on log level.

        Args:
            record (logging.LogRecord): The LogRecord to be formatted.

        Returns:
            str: The colorized formatted log message as a string.
        """
        level = record.levelno
        message = super().format(record)

        result: str = ""

        if level >= logging.CRITICAL:
            result = chalk.red_bright(message)
        elif level >= logging.ERROR:
            result = chalk.red(message)
        elif level >= logging.WARNING:
            result = chalk.yellow(message)
        elif level >= logging.INFO:
            result = chalk.green(message)
        elif level >= logging.DEBUG:
            result = chalk.gray(message)
        elif level >= TRACE_LEVEL:
            result = chalk.blue(message)
        else:
            result = chalk.dim.red(message)

        return result


def parse_log_level(value: str | None) -> int | None:
    """Return a logging level for a level name or number, or None if unknown.

    Args:
        value (str | None): A level name (``"TRACE"``, ``"debug"``...) or a numeric string.

    Returns:
        int | None: The numeric logging level, or ``None`` when ``value`` is empty or unknown.
    """
    if not value:
        return None
    v: str = value.strip().upper()
    if v.isdigit():
        return int(v)
    return _LEVEL_NAMES.get(v)


def resolve_env_log_level() -> int | None:
    """Return a logging level from environment or None if unset.

    Honors THROWLINE_LOG_LEVEL (e.g., "TRACE", "DEBUG", "INFO", numeric "10").
    """
    return parse_log_level(os.environ.get(LOG_LEVEL_ENV_VAR))


def setup_logging(level: int | None = None) -> None:
    """Configure the root logger with a specified log level and colored output.

    If ``level`` is None, environment variables are consulted via
    `resolve_env_log_level`. Default is CRITICAL when unspecified.
    """
    if level is None:
        level = resolve_env_log_level() or logging.CRITICAL

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove all existing handlers to prevent duplicate log messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    formatter = ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    root_logger.propagate = False


def get_logger(name: str) -> ThrowlineLogger:
    """Retrieve a ThrowlineLogger for the logger with the specified name.

    Works whatever class the underlying logger was created with, so loggers the
    host application configured before importing ThrowLine keep their setup.

    Args:
        name (str): The name of the logger.

    Returns:
        ThrowlineLogger: A TRACE-capable adapter around `logging.getLogger(name)`.
    """
    return ThrowlineLogger(logging.getLogger(name))
