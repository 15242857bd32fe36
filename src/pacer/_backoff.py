"""Exponential backoff durations for retrying operations.

This module provides the Backoff value. It computes how long to wait before
the next retry of an operation that failed transiently. Delays start at a
minimum, grow by a constant factor per attempt and never exceed a maximum.
Optional jitter spreads out retriers that would otherwise fire in lockstep.

The delay for attempt ``n`` (0-indexed) is:
    raw = min * factor ** n
    with jitter: uniform value between raw and raw * factor
    result = clamp(raw, min, max)

Backoff never sleeps and never decides whether to retry; callers do both.
"""

import math
import random
from datetime import timedelta
from typing import TYPE_CHECKING, Self

from pacer._counter import AttemptCounter
from pacer.config._models import (
    DEFAULT_FACTOR,
    DEFAULT_MAX,
    DEFAULT_MIN,
    BackoffConfig,
)
from pacer.utils._logging import get_default_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

DurationLike = timedelta | float


def _to_timedelta(value: DurationLike) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=value)


class Backoff:
    """Exponential backoff calculator with an atomic attempt counter.

    Backoff has two modes. ``next_duration()`` is stateful: it consumes the
    next attempt index from the shared counter. ``duration_for_attempt()`` is
    a pure function of an explicit attempt index.

    Configuration uses chained builder calls that mutate the instance and
    return it. Configure before sharing across threads; the counter is the
    only state that is safe to touch concurrently.

    ``copy()`` returns an independent retry sequence. ``share()`` returns an
    instance that advances the same counter.

    Example:
        >>> backoff = Backoff().with_max(timedelta(milliseconds=400))
        >>> [backoff.next_duration().total_seconds() for _ in range(4)]
        [0.1, 0.2, 0.4, 0.4]
        >>> backoff.current_attempt()
        4
        >>> backoff.reset()
        >>> backoff.next_duration().total_seconds()
        0.1
    """

    __slots__ = ("_counter", "_logger", "_rng", "factor", "jitter", "max", "min")

    def __init__(
        self,
        *,
        min: DurationLike = DEFAULT_MIN,  # noqa: A002
        max: DurationLike = DEFAULT_MAX,  # noqa: A002
        factor: float = DEFAULT_FACTOR,
        jitter: bool = False,
        logger: "FilteringBoundLogger | None" = None,
        rng: random.Random | None = None,
        counter: AttemptCounter | None = None,
    ) -> None:
        """Initialize a Backoff.

        Args:
            min: Floor and exponential base, as a timedelta or seconds.
            max: Ceiling, as a timedelta or seconds.
            factor: Growth multiplier applied per attempt.
            jitter: Whether to randomize computed durations.
            logger: Logger for debug events. Defaults to the pacer logger.
            rng: Random source for jitter. Defaults to the random module.
            counter: Attempt counter to use. A fresh one is created if omitted.
        """
        self.min: timedelta = _to_timedelta(min)
        self.max: timedelta = _to_timedelta(max)
        self.factor: float = factor
        self.jitter: bool = jitter
        self._logger: "FilteringBoundLogger" = (
            logger if logger is not None else get_default_logger()
        )
        self._rng: random.Random | None = rng
        self._counter: AttemptCounter = counter if counter is not None else AttemptCounter()

    @classmethod
    def new(cls) -> Self:
        """Return a Backoff with default configuration."""
        return cls()

    @classmethod
    def from_config(
        cls,
        config: BackoffConfig,
        *,
        logger: "FilteringBoundLogger | None" = None,
        rng: random.Random | None = None,
    ) -> Self:
        """Create a Backoff from a validated configuration section.

        Args:
            config: Backoff configuration.
            logger: Optional logger for debug events.
            rng: Optional random source for jitter.

        Returns:
            A Backoff at attempt 0 with the configured values.
        """
        return cls(
            min=config.min,
            max=config.max,
            factor=config.factor,
            jitter=config.jitter,
            logger=logger,
            rng=rng,
        )

    # -------------------------------------------------------------------------
    # Builder
    # -------------------------------------------------------------------------

    def with_min(self, min: DurationLike) -> Self:  # noqa: A002
        """Set the minimum duration, which is also the exponential base."""
        self.min = _to_timedelta(min)
        return self

    def with_max(self, max: DurationLike) -> Self:  # noqa: A002
        """Set the maximum duration."""
        self.max = _to_timedelta(max)
        return self

    def with_jitter(self, jitter: bool) -> Self:  # noqa: FBT001
        """Set whether to apply jitter to computed durations."""
        self.jitter = jitter
        return self

    def with_factor(self, factor: float) -> Self:
        """Set the growth multiplier."""
        self.factor = factor
        return self

    # -------------------------------------------------------------------------
    # Attempt counter
    # -------------------------------------------------------------------------

    def next_duration(self) -> timedelta:
        """Consume the next attempt index and return its duration.

        The first call after creation or reset uses attempt index 0. Concurrent
        callers never receive the same index.

        Returns:
            The backoff duration for the consumed attempt index.
        """
        attempt = self._counter.fetch_add(1)
        duration = self.duration_for_attempt(attempt)
        self._logger.debug(
            "backoff_duration",
            attempt=attempt,
            delay=duration.total_seconds(),
            jitter=self.jitter,
        )
        return duration

    def current_attempt(self) -> int:
        """Return the number of durations issued since creation or last reset."""
        return self._counter.load()

    def reset(self) -> None:
        """Reset the attempt counter to 0. Configuration is kept."""
        self._counter.store(0)
        self._logger.debug("backoff_reset")

    # -------------------------------------------------------------------------
    # Duration computation
    # -------------------------------------------------------------------------

    def duration_for_attempt(self, attempt: int) -> timedelta:
        """Return the backoff duration for an explicit attempt index.

        Does not touch the attempt counter.

        Degenerate configurations never raise: a non-positive factor yields
        shrinking or oscillating values that are clamped, and ``min > max``
        always yields ``max`` because the lower bound is applied first.

        Args:
            attempt: The attempt index (0-indexed).

        Returns:
            The duration, clamped into ``[min, max]``.
        """
        base = self.min.total_seconds()
        raw = self._scaled(base, attempt)

        if self.jitter:
            raw = self._jittered(raw)

        if math.isnan(raw):
            raw = base

        # Lower bound first, so min > max resolves to max
        if raw <= base:
            raw = base
            if self.min <= self.max:
                return self.min
        if raw >= self.max.total_seconds():
            return self.max

        return timedelta(seconds=raw)

    def _scaled(self, base: float, attempt: int) -> float:
        try:
            return base * float(self.factor) ** attempt
        except (OverflowError, ZeroDivisionError):
            # Growth saturates; a zero base stays zero
            return math.copysign(math.inf, base) if base else 0.0

    def _jittered(self, raw: float) -> float:
        upper = raw * self.factor
        if not (math.isfinite(raw) and math.isfinite(upper)):
            return raw
        low, high = (raw, upper) if raw <= upper else (upper, raw)
        uniform = self._rng.uniform if self._rng is not None else random.uniform
        return uniform(low, high)  # noqa: S311

    # -------------------------------------------------------------------------
    # Cloning
    # -------------------------------------------------------------------------

    def copy(self) -> Self:
        """Return an independent Backoff with the same configuration.

        The copy starts at the current attempt count and advances its own
        counter from then on.
        """
        return type(self)(
            min=self.min,
            max=self.max,
            factor=self.factor,
            jitter=self.jitter,
            logger=self._logger,
            rng=self._rng,
            counter=AttemptCounter(self._counter.load()),
        )

    __copy__ = copy

    def share(self) -> Self:
        """Return a Backoff that shares this instance's attempt counter.

        Configuration is copied, so later builder calls on either instance do
        not affect the other. Attempt indices come from one sequence.
        """
        return type(self)(
            min=self.min,
            max=self.max,
            factor=self.factor,
            jitter=self.jitter,
            logger=self._logger,
            rng=self._rng,
            counter=self._counter,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(min={self.min!r}, max={self.max!r}, "
            f"factor={self.factor!r}, jitter={self.jitter!r}, "
            f"attempt={self._counter.load()})"
        )
