"""Shared utilities for pacer."""

from ._logging import (
    create_logger,
    create_logger_from_config,
    get_default_logger,
)

__all__ = [
    "create_logger",
    "create_logger_from_config",
    "get_default_logger",
]
