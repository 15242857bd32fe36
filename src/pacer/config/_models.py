"""Configuration models.

This module provides the frozen Pydantic models for pacer configuration:
- LogLevel / LogFormat: Logging enumerations
- LoggingConfig: Logging section
- BackoffConfig: Backoff section
- PacerConfig: Root model combining all sections
"""

from datetime import timedelta
from enum import StrEnum
from typing import ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_MIN = timedelta(milliseconds=100)
DEFAULT_MAX = timedelta(seconds=10)
DEFAULT_FACTOR = 2.0


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty routes through stdlib logging).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    file: str = ""


class BackoffConfig(BaseModel):
    """Backoff configuration section.

    Durations accept a number of seconds or an ISO 8601 duration string.

    Attributes:
        min: Floor and exponential base for computed delays.
        max: Ceiling for computed delays.
        factor: Growth multiplier applied per attempt.
        jitter: Whether to randomize computed delays.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    min: timedelta = Field(default=DEFAULT_MIN, ge=timedelta(0))
    max: timedelta = Field(default=DEFAULT_MAX, ge=timedelta(0))
    factor: float = Field(default=DEFAULT_FACTOR, gt=0, allow_inf_nan=False)
    jitter: bool = False

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.min > self.max:
            msg = f"min ({self.min}) must not exceed max ({self.max})"
            raise ValueError(msg)
        return self


class PacerConfig(BaseModel):
    """Root configuration model.

    Attributes:
        backoff: Backoff section.
        logging: Logging section.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    backoff: BackoffConfig = BackoffConfig()
    logging: LoggingConfig = LoggingConfig()
