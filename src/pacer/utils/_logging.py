"""Logging utilities for pacer.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs either to a file or through the stdlib
``pacer`` logger. Each logger is self-contained and does not modify global
structlog configuration.
"""

import functools
import logging
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

from pacer.config._models import LoggingConfig  # noqa: TC001 - Used at runtime in type annotation

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]

STDLIB_LOGGER_NAME = "pacer"


def _get_log_level() -> int:
    """Get the log level from environment variables.

    Checks PACER_DEBUG first (sets DEBUG if present), then PACER_LOG_LEVEL.
    Defaults to INFO if neither is set.

    Returns:
        The logging level as an integer.
    """
    if getenv("PACER_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(getenv("PACER_LOG_LEVEL", "info").upper(), logging.INFO)


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, PACER_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("PACER_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def create_logger(
    level: str | None = None,
    *,
    log_format: LogFormatType = "text",
    log_file: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger.

    The log level is determined by (in order of precedence):
    1. PACER_DEBUG environment variable (if set, enables DEBUG level)
    2. The `level` parameter (if provided)
    3. PACER_LOG_LEVEL environment variable
    4. Default: INFO

    Args:
        level: Optional log level string (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to a log file opened in append mode. When empty, events
            are rendered and handed to the stdlib ``pacer`` logger so the host
            application's handlers decide where they go.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    if level is not None:
        effective_level = _log_level_from_string(level, respect_env=True)
    else:
        effective_level = _get_log_level()

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        raw_logger: object = structlog.WriteLoggerFactory(file=log_path.open("a"))()
    else:
        raw_logger = logging.getLogger(STDLIB_LOGGER_NAME)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(effective_level)

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )


def create_logger_from_config(config: LoggingConfig) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger from a logging configuration section.

    Args:
        config: Validated logging configuration.

    Returns:
        A FilteringBoundLogger honoring the configured level, format and file.
    """
    return create_logger(
        str(config.level),
        log_format=cast("LogFormatType", str(config.format)),
        log_file=config.file,
    )


@functools.cache
def get_default_logger() -> "FilteringBoundLogger":  # noqa: UP037
    """Return the process-wide logger used when none is injected.

    The logger is created once, on first use, from environment variables.
    """
    return create_logger()
