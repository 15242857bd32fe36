# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""TOML configuration file loading and merging."""

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pacer.config._models import PacerConfig
from pacer.config._validation import raise_if_validation_errors, validate_config
from pacer.exceptions import ConfigLoadError

ENV_PREFIX = "PACER_"


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Deep merge two configuration dictionaries.

    Merges `override` into `base`, returning a new dictionary. Neither input
    is modified. Nested dictionaries are merged recursively; any other value
    in `override` replaces the one in `base`.
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key in base.keys() | override.keys():
        if key not in override:
            result[key] = _copy_value(base[key])
        elif key not in base:
            result[key] = _copy_value(override[key])
        elif isinstance(base[key], dict) and isinstance(override[key], dict):
            result[key] = deep_merge(base[key], override[key])
        else:
            result[key] = _copy_value(override[key])

    return result


def _copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    if isinstance(value, dict):
        return {k: _copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    return value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into config dictionary.

    Args:
        prefix: Environment variable prefix (default: "PACER_").
        environ: Mapping to read instead of os.environ.

    Returns:
        Dictionary of parsed config values with nested structure.

    Environment variable naming:
        - Add prefix (PACER_)
        - Convert to uppercase
        - Replace dots with double underscores
        - Example: backoff.factor -> PACER_BACKOFF__FACTOR
    """
    env = os.environ if environ is None else environ
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in env.items():
        if not key.startswith(prefix):
            continue

        # PACER_BACKOFF__FACTOR -> backoff.factor
        config_key = key[len(prefix) :]
        if not config_key:
            continue

        config_path = config_key.replace("__", ".").lower()
        set_nested_key(result, config_path, parse_string_value(value))

    return result


def parse_string_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Parse a string value with automatic type inference.

    Precedence:
    1. Boolean: true/false (case-insensitive)
    2. Integer: parseable as int (no decimal)
    3. Float: parseable as float (with decimal or exponent)
    4. JSON array/object: starts with [ or {
    5. String: fallback

    Numeric strings such as "1" stay numbers so that durations and factors
    can be set from the environment.

    Examples:
        >>> parse_string_value("true")
        True
        >>> parse_string_value("42")
        42
        >>> parse_string_value("0.25")
        0.25
        >>> parse_string_value("PT1S")
        'PT1S'
    """
    lower_value = value.lower()
    if lower_value in ("true", "false"):
        return lower_value == "true"

    try:
        return int(value)
    except ValueError:
        pass

    if "." in value or "e" in lower_value:
        try:
            return float(value)
        except ValueError:
            pass

    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path in a nested dictionary.

    Creates intermediate dictionaries as needed.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "backoff.jitter", True)
        >>> d
        {'backoff': {'jitter': True}}
    """
    parts = key_path.split(".")
    current = d

    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value


def config_from_dict(
    data: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    *,
    source: str | None = None,
) -> PacerConfig:
    """Create a validated configuration from a dictionary.

    Args:
        data: Dictionary of configuration values. Missing keys use defaults.
        source: Optional description of where the values came from.

    Returns:
        The validated PacerConfig.

    Raises:
        ConfigValidationError: If validation fails.
    """
    model, issues = validate_config(data)
    raise_if_validation_errors(issues, source=source)
    assert model is not None  # noqa: S101
    return model


def load_config(
    path: Path | None = None,
    *,
    include_env: bool = True,
    overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
    environ: Mapping[str, str] | None = None,
) -> PacerConfig:
    """Load configuration from defaults, a TOML file, the environment and overrides.

    Sources are merged in increasing precedence: file, environment, overrides.

    Args:
        path: Optional TOML file. When given, the file must exist.
        include_env: Whether to read PACER_* environment variables.
        overrides: Explicit values with the highest precedence.
        environ: Mapping to read instead of os.environ.

    Returns:
        The validated PacerConfig.

    Raises:
        FileNotFoundError: If path does not exist.
        ConfigLoadError: If the file cannot be parsed.
        ConfigValidationError: If the merged configuration is invalid.
    """
    merged: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    sources: list[str] = []

    if path is not None:
        merged = deep_merge(merged, read_toml_file(path))
        sources.append(str(path))

    if include_env:
        env_values = parse_env_vars(environ=environ)
        if env_values:
            merged = deep_merge(merged, env_values)
            sources.append("env")

    if overrides:
        merged = deep_merge(merged, overrides)
        sources.append("overrides")

    return config_from_dict(merged, source=", ".join(sources) or None)
