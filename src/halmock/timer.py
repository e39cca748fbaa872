"""
Timer Mock
==========
Manually advanced clock and count-down timers.

Unlike the other mocks these are not expectation based: a test moves time
forward with MockClock.tick() and drivers observe it through MockTimer.
Every timer obtained from one clock shares its tick counter.

Usage:
    from halmock.timer import MockClock

    clock = MockClock()
    timer = clock.get_timer()
    timer.start(100)          # nanoseconds

    clock.tick(50)
    assert not timer.wait()   # would block
    clock.tick(50)
    assert timer.wait()       # expired, restarts for another period

Module: halmock.timer
Version: 1.0.0
"""

import threading

from halmock.core.constants import NANOS_PER_MICRO, NANOS_PER_MILLI
from halmock.utils.validation import validate_range


class _Ticks:
    """Tick counter shared by a clock and its clones."""

    def __init__(self):
        self.value = 0
        self.lock = threading.Lock()


class MockClock:
    """
    Clock whose time only advances when tick() is called.

    One tick is one nanosecond. clone() returns a clock over the same
    counter.
    """

    def __init__(self, _ticks=None):
        self._ticks = _ticks or _Ticks()

    def now(self):
        """Current time in nanoseconds since creation."""
        with self._ticks.lock:
            return self._ticks.value

    def elapsed(self):
        """Alias of now(): nanoseconds elapsed since creation."""
        return self.now()

    def tick(self, ns=0, *, us=0, ms=0):
        """
        Advance time.

        Args:
            ns: Nanoseconds to add
            us: Microseconds to add
            ms: Milliseconds to add
        """
        amount = ns + us * NANOS_PER_MICRO + ms * NANOS_PER_MILLI
        validate_range(amount, 0, 2**64 - 1, "tick")
        with self._ticks.lock:
            self._ticks.value += amount

    def clone(self):
        return MockClock(self._ticks)

    def get_timer(self):
        """Create a stopped count-down timer driven by this clock."""
        return MockTimer(self.clone())


class MockTimer:
    """
    Periodic count-down timer.

    Attributes:
        clock: MockClock the timer reads
        duration: Period in nanoseconds
        started: Whether the timer is running
    """

    def __init__(self, clock):
        self.clock = clock
        self.duration = 1
        self.expiration = clock.now()
        self.started = False

    def start(self, ns):
        """Start counting down ns nanoseconds from now."""
        self.duration = validate_range(ns, 0, 2**64 - 1, "timer duration")
        self.expiration = self.clock.now() + self.duration
        self.started = True

    def wait(self):
        """
        Poll for expiry.

        Returns:
            True if the period elapsed (the next period starts now), False if
            waiting would block or the timer is not started
        """
        now = self.clock.now()
        if self.started and now >= self.expiration:
            self.expiration = now + self.duration
            return True
        return False

    def cancel(self):
        """Stop the timer."""
        self.started = False
