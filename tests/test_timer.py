"""
Tests for Timer Mock
====================
Unit tests for halmock.timer.

Run with: python -m pytest tests/test_timer.py -v

Module: tests.test_timer
Version: 1.0.0
"""

import threading

import pytest

from halmock.core.errors import TransactionError
from halmock.timer import MockClock, MockTimer


class TestMockClock:
    """Manually advanced clock."""

    def test_starts_at_zero(self):
        assert MockClock().now() == 0

    def test_tick_units(self):
        clock = MockClock()

        clock.tick(5)
        clock.tick(us=2)
        clock.tick(ms=1)

        assert clock.elapsed() == 1_002_005

    def test_negative_tick_rejected(self):
        with pytest.raises(TransactionError):
            MockClock().tick(-1)

    def test_clones_share_time(self):
        clock = MockClock()
        other = clock.clone()

        other.tick(10)

        assert clock.now() == 10

    def test_concurrent_ticks(self):
        clock = MockClock()

        def worker():
            for _ in range(1000):
                clock.tick(1)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert clock.now() == 4000


class TestMockTimer:
    """Periodic count-down timer."""

    def test_count_down(self):
        clock = MockClock()
        timer = clock.get_timer()
        timer.start(100)

        clock.tick(50)
        assert not timer.wait()
        clock.tick(50)
        assert timer.wait()
        clock.tick(50)
        assert not timer.wait()
        clock.tick(50)
        assert timer.wait()

    def test_not_started(self):
        clock = MockClock()
        timer = MockTimer(clock)

        clock.tick(1000)

        assert not timer.wait()

    def test_cancel(self):
        clock = MockClock()
        timer = clock.get_timer()
        timer.start(10)

        timer.cancel()
        clock.tick(20)

        assert not timer.started
        assert not timer.wait()

    def test_late_poll_restarts_from_now(self):
        clock = MockClock()
        timer = clock.get_timer()
        timer.start(100)

        clock.tick(250)
        assert timer.wait()
        clock.tick(99)
        assert not timer.wait()
        clock.tick(1)
        assert timer.wait()
