"""Shared test fixtures for pacer tests."""

from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def clean_logging_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from PACER_* logging variables and the cached default logger."""
    from pacer.utils._logging import get_default_logger

    monkeypatch.delenv("PACER_DEBUG", raising=False)
    monkeypatch.delenv("PACER_LOG_LEVEL", raising=False)
    get_default_logger.cache_clear()
    yield
    get_default_logger.cache_clear()
