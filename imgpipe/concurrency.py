"""
ConcurrencyLimiter - Process-wide cap on simultaneous thumbnail transcodes.
"""

import threading
from contextlib import contextmanager
from typing import Iterator

from .exceptions import InvalidConfigurationError


MIN_CONCURRENT_OPERATIONS = 1


def validate_limit(limit) -> int:
    """Return limit if it is a positive integer, raise InvalidConfigurationError otherwise."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < MIN_CONCURRENT_OPERATIONS:
        raise InvalidConfigurationError(
            f"Maximum concurrent operations must be a positive integer (got {limit!r})"
        )
    return limit


class ConcurrencyLimiter:
    """
    Counting gate with an adjustable limit.

    Callers over the limit wait for a slot instead of being rejected.
    Changing the limit never interrupts holders of a slot; it only
    changes how many new slots are handed out.
    """

    def __init__(self, limit: int = MIN_CONCURRENT_OPERATIONS):
        self._limit = validate_limit(limit)
        self._active = 0
        self._peak = 0
        self._condition = threading.Condition()

    @property
    def limit(self) -> int:
        with self._condition:
            return self._limit

    @limit.setter
    def limit(self, value: int) -> None:
        validate_limit(value)
        with self._condition:
            self._limit = value
            self._condition.notify_all()

    @property
    def active(self) -> int:
        """Number of slots currently held."""
        with self._condition:
            return self._active

    @property
    def peak(self) -> int:
        """Highest number of slots held at once since creation or reset_peak()."""
        with self._condition:
            return self._peak

    def reset_peak(self) -> None:
        with self._condition:
            self._peak = self._active

    def acquire(self) -> None:
        """Block until a slot is free, then take it."""
        with self._condition:
            while self._active >= self._limit:
                self._condition.wait()
            self._active += 1
            self._peak = max(self._peak, self._active)

    def release(self) -> None:
        with self._condition:
            if self._active == 0:
                raise RuntimeError("release() called without a held slot")
            self._active -= 1
            self._condition.notify_all()

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Hold a slot for the duration of the block."""
        self.acquire()
        try:
            yield
        finally:
            self.release()
