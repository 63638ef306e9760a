"""Polling countdown timer.

A :class:`Timer` is ``done()`` once its sampled time reaches
``start + duration`` or once it has been closed. Sampling runs on a
background thread started by :meth:`Timer.init`; the thread is cancelled
by :meth:`Timer.close`, by leaving a ``with`` block, or when the timer is
garbage-collected.
"""

import logging
import threading
import weakref
from types import TracebackType
from typing import Callable

from timekeep.clock import Clock, SystemClock
from timekeep.util import POLL_INTERVAL

logger = logging.getLogger(__name__)


class _Sampler:
    """Daemon thread calling ``Timer.sample`` every ``interval`` seconds.

    Holds only a weak reference to the timer, so an abandoned timer can be
    collected and its sampler stops on the next tick.
    """

    def __init__(self, owner: "Timer", interval: float):
        self._cancelled: threading.Event = threading.Event()
        self.thread: threading.Thread = threading.Thread(
            target=_sample_until_cancelled,
            args=(weakref.ref(owner), interval, self._cancelled),
            name=f"timekeep-sampler-{id(owner):x}",
            daemon=True,
        )

    @property
    def alive(self) -> bool:
        return self.thread.is_alive() and not self._cancelled.is_set()

    def start(self) -> None:
        self.thread.start()

    def cancel(self) -> None:
        self._cancelled.set()


def _sample_until_cancelled(
    ref: Callable[[], "Timer | None"],
    interval: float,
    cancelled: threading.Event,
) -> None:
    while not cancelled.wait(interval):
        owner = ref()
        if owner is None:
            break
        try:
            owner.sample()
        except Exception:
            logger.exception("Clock failed; stopping timer sampler")
            break
        del owner
    logger.debug("Timer sampler exited")


class Timer:
    """
    Countdown against a duration in milliseconds.

    Attributes:
        start: Epoch milliseconds at construction or last restart
        time: Most recent sampled epoch milliseconds (never decreases)
        duration: Milliseconds that must elapse after ``start``
        closed: One-way flag; a closed timer is always done
        interval: Sampling period in seconds
        clock: Source of "now"

    Example:
        >>> t = timer(5_000).init()
        >>> t.done()
        False
        >>> t.close()
        >>> t.done()
        True
    """

    def __init__(
        self,
        duration: int,
        *,
        clock: Clock | None = None,
        interval: float = POLL_INTERVAL,
    ):
        if interval <= 0:
            raise ValueError(
                f"Timer interval must be positive, got {interval}.\n"
                f"Hint: pass interval in seconds, e.g. interval=0.1"
            )

        self.clock: Clock = clock if clock is not None else SystemClock()
        self.interval: float = interval
        self.duration: int = duration
        self.closed: bool = False
        self.start: int = self.clock.now()
        self.time: int = self.start
        self._lock: threading.Lock = threading.Lock()
        self._sampler: _Sampler | None = None

    @property
    def running(self) -> bool:
        """True while a sampler is refreshing ``time``."""
        sampler = self._sampler
        return sampler is not None and sampler.alive

    def init(self) -> "Timer":
        """Start sampling; returns ``self`` for chaining. Idempotent."""
        with self._lock:
            if self.closed or self._sampler is not None:
                return self
            sampler = _Sampler(self, self.interval)
            self._sampler = sampler
        weakref.finalize(self, sampler.cancel)
        sampler.start()
        logger.debug("Started sampling every %ss for %r", self.interval, self)
        return self

    def sample(self) -> None:
        """Refresh ``time`` from the clock, ignoring backward steps."""
        now = self.clock.now()
        with self._lock:
            if now > self.time:
                self.time = now

    def done(self) -> bool:
        with self._lock:
            return self.closed or self.time >= self.start + self.duration

    def restart(self, duration: int) -> None:
        """Count ``duration`` milliseconds from now. Leaves ``closed`` alone."""
        now = self.clock.now()
        with self._lock:
            self.start = now
            self.duration = duration
        logger.debug("Restarted %r", self)

    def close(self) -> None:
        """Mark the timer done for good and stop its sampler."""
        with self._lock:
            already_closed = self.closed
            self.closed = True
            sampler, self._sampler = self._sampler, None
        if sampler is not None:
            sampler.cancel()
        if not already_closed:
            logger.debug("Closed %r", self)

    def __enter__(self) -> "Timer":
        return self.init()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Timer(start={self.start}, duration={self.duration}ms, "
            f"time={self.time}, closed={self.closed})"
        )


def timer(
    duration: int,
    *,
    clock: Clock | None = None,
    interval: float = POLL_INTERVAL,
) -> Timer:
    """
    Return a timer counting down ``duration`` milliseconds.

    Call :meth:`Timer.init` (or use it as a context manager) to start
    sampling the clock.

    Args:
        duration: Milliseconds until the timer is done
        clock: Time source (default: system wall clock)
        interval: Sampling period in seconds (default 0.1)

    Example:
        >>> from timekeep import timer
        >>>
        >>> with timer(2_000) as t:
        ...     while not t.done():
        ...         render_countdown(t)
    """
    return Timer(duration, clock=clock, interval=interval)
