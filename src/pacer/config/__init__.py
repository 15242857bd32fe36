"""Configuration for pacer.

Configuration is read from an optional TOML file, ``PACER_*`` environment
variables and explicit overrides, then validated with Pydantic.

Example:
    >>> from pacer.config import load_config
    >>> config = load_config(include_env=False, overrides={"backoff": {"factor": 3}})
    >>> config.backoff.factor
    3.0
"""

from ._loader import (
    config_from_dict,
    deep_merge,
    load_config,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import BackoffConfig, LogFormat, LoggingConfig, LogLevel, PacerConfig
from ._validation import ValidationIssue, raise_if_validation_errors, validate_config

__all__ = [
    "BackoffConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "PacerConfig",
    "ValidationIssue",
    "config_from_dict",
    "deep_merge",
    "load_config",
    "parse_env_vars",
    "parse_string_value",
    "raise_if_validation_errors",
    "read_toml_file",
    "set_nested_key",
    "validate_config",
]
