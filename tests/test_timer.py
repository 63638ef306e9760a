"""Tests for the polling countdown timer."""

import gc
import time

import pytest

from timekeep import Clock, ManualClock, Timer, timer


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_new_timer_captures_now():
    """Test that start and time both begin at the clock's now."""
    t = timer(1_000, clock=ManualClock(5_000))

    assert t.start == 5_000
    assert t.time == 5_000
    assert t.duration == 1_000
    assert t.closed is False
    assert t.running is False


def test_zero_duration_is_done_before_init():
    """Test that a zero-length timer is done immediately."""
    t = timer(0, clock=ManualClock(42))

    assert t.done() is True


def test_close_makes_timer_done():
    """Test that closing reads the timer's own closed flag."""
    t = timer(1_000, clock=ManualClock())
    assert t.done() is False

    t.close()
    assert t.closed is True
    assert t.done() is True

    # Idempotent
    t.close()
    assert t.closed is True


def test_done_follows_sampled_time():
    """Test that done() only changes when time is sampled."""
    clock = ManualClock(0)
    t = timer(1_000, clock=clock)

    clock.advance(999)
    t.sample()
    assert t.done() is False

    clock.advance(1)
    assert t.done() is False  # not sampled yet
    t.sample()
    assert t.done() is True


def test_restart_uses_new_start_and_duration():
    """Test that restart() counts the new duration from the restart time."""
    clock = ManualClock(0)
    t = timer(10_000, clock=clock)

    clock.advance(2_000)
    t.restart(500)
    assert t.start == 2_000
    assert t.duration == 500

    clock.advance(499)
    t.sample()
    assert t.done() is False

    clock.advance(1)
    t.sample()
    assert t.done() is True


def test_restart_does_not_reopen_closed_timer():
    """Test that closed stays set across restarts."""
    clock = ManualClock(0)
    t = timer(1_000, clock=clock)
    t.close()

    t.restart(60_000)

    assert t.closed is True
    assert t.done() is True


def test_time_never_goes_backwards():
    """Test that a clock stepping back does not rewind the timer."""
    clock = ManualClock(10_000)
    t = timer(1_000, clock=clock)

    clock.set(11_000)
    t.sample()
    clock.set(9_000)
    t.sample()

    assert t.time == 11_000
    assert t.done() is True


def test_negative_duration_is_already_done():
    """Test that durations are not validated."""
    assert timer(-5, clock=ManualClock()).done() is True


def test_init_samples_in_background():
    """Test that init() keeps time tracking the clock."""
    clock = ManualClock(0)
    t = timer(1_000, clock=clock, interval=0.005)

    assert t.init() is t
    assert t.running is True

    clock.advance(1_000)
    assert _wait_for(t.done)
    assert t.time == 1_000

    t.close()


def test_init_is_idempotent():
    """Test that a second init() reuses the running sampler."""
    t = timer(1_000, clock=ManualClock(), interval=0.005).init()
    sampler = t._sampler

    t.init()

    assert t._sampler is sampler
    t.close()


def test_close_stops_sampler_thread():
    """Test that close() cancels the background sampler."""
    t = timer(1_000, clock=ManualClock(), interval=0.005).init()
    assert t._sampler is not None
    thread = t._sampler.thread

    t.close()
    thread.join(timeout=2)

    assert not thread.is_alive()
    assert t.running is False


def test_init_after_close_does_not_sample():
    """Test that a closed timer cannot be started again."""
    t = timer(1_000, clock=ManualClock())
    t.close()

    assert t.init() is t
    assert t.running is False


def test_context_manager_scopes_sampler():
    """Test that with-blocks start and close the timer."""
    with timer(1_000, clock=ManualClock(), interval=0.005) as t:
        assert t.running is True
        assert t._sampler is not None
        thread = t._sampler.thread

    assert t.closed is True
    thread.join(timeout=2)
    assert not thread.is_alive()


def test_abandoned_timer_stops_sampler():
    """Test that garbage-collecting a timer ends its sampler."""
    t = timer(1_000, clock=ManualClock(), interval=0.005).init()
    assert t._sampler is not None
    thread = t._sampler.thread

    del t
    gc.collect()
    thread.join(timeout=2)

    assert not thread.is_alive()


def test_real_clock_countdown():
    """Test a short countdown against the system clock."""
    with timer(50, interval=0.01) as t:
        assert _wait_for(t.done)
        assert t.time >= t.start + 50


def test_clock_failure_stops_sampler(caplog: pytest.LogCaptureFixture):
    """Test that a failing clock is logged and ends sampling."""

    class BrokenClock(Clock):
        def __init__(self):
            self.calls = 0

        def now(self) -> int:
            self.calls += 1
            if self.calls > 1:
                raise RuntimeError("clock unplugged")
            return 0

    t = timer(1_000, clock=BrokenClock(), interval=0.005).init()
    assert t._sampler is not None
    thread = t._sampler.thread

    thread.join(timeout=2)

    assert not thread.is_alive()
    assert "Clock failed" in caplog.text
    assert t.done() is False
    t.close()


def test_interval_must_be_positive():
    """Test that a non-positive sampling period is rejected."""
    with pytest.raises(ValueError, match="must be positive"):
        Timer(1_000, interval=0)


def test_interval_error_explains_units():
    """Test that the interval error hints at the expected unit."""
    with pytest.raises(ValueError, match=r"Hint: pass interval in seconds"):
        timer(1_000, interval=-0.1)
