# pyright: reportAny=false, reportExplicitAny=false
"""Configuration validation using Pydantic schemas.

This module validates pacer configuration dictionaries against the frozen
models from _models and converts Pydantic errors into ConfigValidationError.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError
from pydantic_core import ErrorDetails  # noqa: TC002 - Used at runtime in type annotation

from pacer.config._models import PacerConfig
from pacer.exceptions import ConfigValidationError


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Represents a configuration validation issue.

    Attributes:
        key: Dotted path to the configuration key (e.g., "backoff.factor").
        message: Human-readable description of the issue.
        expected: Description of expected value or type, if available.
        actual: The actual value that caused the issue.
    """

    key: str
    message: str
    expected: str | None
    actual: Any


def _pydantic_error_to_issue(error: ErrorDetails) -> ValidationIssue:
    loc = error.get("loc", ())
    key = ".".join(str(part) for part in loc)

    message = str(error.get("msg", "Validation error"))

    ctx = error.get("ctx")
    expected: str | None = None
    if ctx is not None:
        if "expected" in ctx:
            expected = str(ctx["expected"])
        elif "gt" in ctx:
            expected = f"> {ctx['gt']}"
        elif "ge" in ctx:
            expected = f">= {ctx['ge']}"

    return ValidationIssue(
        key=key,
        message=message,
        expected=expected,
        actual=error.get("input"),
    )


def validate_config(
    config: dict[str, Any],
) -> tuple[PacerConfig | None, list[ValidationIssue]]:
    """Validate a merged configuration dictionary.

    Args:
        config: The merged configuration dictionary to validate.

    Returns:
        Tuple of (PacerConfig, issues). The model is None when issues exist.
    """
    try:
        model = PacerConfig.model_validate(config)
    except ValidationError as e:
        return None, [_pydantic_error_to_issue(err) for err in e.errors()]
    return model, []


def raise_if_validation_errors(
    issues: list[ValidationIssue],
    source: str | None = None,
) -> None:
    """Raise ConfigValidationError for the first issue, if any.

    Args:
        issues: List of ValidationIssue objects to check.
        source: Optional description of where the values came from.

    Raises:
        ConfigValidationError: If issues is not empty.
    """
    if issues:
        issue = issues[0]
        msg = f"Invalid configuration value for '{issue.key}': {issue.message}"
        raise ConfigValidationError(
            msg,
            key=issue.key,
            value=issue.actual,
            expected=issue.expected or issue.message,
            source=source,
        )
