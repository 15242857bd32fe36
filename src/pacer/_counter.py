"""Thread-safe attempt counter.

This module provides the AttemptCounter used by Backoff to hand out attempt
indices. Every operation runs under a single lock, so concurrent callers
observe one total order of increments, loads and stores.
"""

import threading

# Counter values behave like an unsigned 64-bit register.
_U64_MASK = (1 << 64) - 1


class AttemptCounter:
    """Unsigned 64-bit counter with atomic fetch-and-add, load and store.

    Example:
        >>> counter = AttemptCounter()
        >>> counter.fetch_add()
        0
        >>> counter.fetch_add()
        1
        >>> counter.load()
        2
    """

    __slots__ = ("_lock", "_value")

    def __init__(self, value: int = 0) -> None:
        """Initialize the counter.

        Args:
            value: Starting value, reduced modulo 2**64.
        """
        self._lock: threading.Lock = threading.Lock()
        self._value: int = value & _U64_MASK

    def fetch_add(self, delta: int = 1) -> int:
        """Add delta to the counter and return the previous value.

        Args:
            delta: Amount to add. The result wraps modulo 2**64.

        Returns:
            The value held before the addition.
        """
        with self._lock:
            previous = self._value
            self._value = (previous + delta) & _U64_MASK
            return previous

    def load(self) -> int:
        """Return the current value."""
        with self._lock:
            return self._value

    def store(self, value: int) -> None:
        """Replace the current value."""
        with self._lock:
            self._value = value & _U64_MASK

    def __repr__(self) -> str:
        return f"AttemptCounter({self.load()})"
