"""Exponential backoff durations for retrying transient failures.

pacer computes how long to wait before retrying an operation. It does not
sleep and does not decide whether to retry.

Key Components:
    - Backoff: Exponential backoff calculator with an atomic attempt counter
    - AttemptCounter: Thread-safe unsigned 64-bit counter
    - BackoffConfig: Validated backoff configuration section
    - load_config: Configuration loading from TOML and environment

Example:
    >>> from pacer import Backoff
    >>> backoff = Backoff().with_jitter(True)
    >>> delay = backoff.next_duration()  # caller sleeps, then retries
    >>> backoff.reset()  # after the operation finally succeeds
"""

from ._backoff import Backoff
from ._counter import AttemptCounter
from .config import BackoffConfig, LoggingConfig, PacerConfig, load_config
from .exceptions import ConfigError, ConfigLoadError, ConfigValidationError, PacerError

__all__ = [
    "AttemptCounter",
    "Backoff",
    "BackoffConfig",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "LoggingConfig",
    "PacerConfig",
    "PacerError",
    "load_config",
]
