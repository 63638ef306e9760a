"""Time sources for timers.

Timers ask a :class:`Clock` for "now" instead of reading the system clock
directly, so tests can drive them with a :class:`ManualClock`.
"""

import time
from abc import ABC, abstractmethod

from typing_extensions import override


class Clock(ABC):

    @abstractmethod
    def now(self) -> int:
        """Return the current time in milliseconds since the Unix epoch."""
        pass


class SystemClock(Clock):
    """Wall clock backed by ``time.time_ns()``."""

    @override
    def now(self) -> int:
        return time.time_ns() // 1_000_000


class ManualClock(Clock):
    """
    Clock that only moves when told to.

    Example:
        >>> clock = ManualClock(1_000)
        >>> clock.advance(500)
        >>> clock.now()
        1500
    """

    def __init__(self, now: int = 0):
        self._now: int = now

    @override
    def now(self) -> int:
        return self._now

    def advance(self, ms: int) -> None:
        if ms < 0:
            raise ValueError(
                f"ManualClock.advance() needs a non-negative step, got {ms}.\n"
                f"Hint: use set() to move the clock backwards"
            )
        self._now += ms

    def set(self, ms: int) -> None:
        self._now = ms
