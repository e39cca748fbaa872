"""
Delay Mock
==========
Checked and unchecked delay implementations.

MockDelay records every delay call against the expectation queue and only
sleeps for real when the matching transaction was built with wait().
AsyncMockDelay offers the same checks from coroutines. NoopDelay and
StdSleep are unchecked helpers for drivers that need a delay provider but
whose tests do not care about timing.

Usage:
    from halmock.delay import DelayTransaction, MockDelay

    delay = MockDelay([
        DelayTransaction.delay_ms(10),
        DelayTransaction.blocking_delay_us(50),
        DelayTransaction.delay_ms(1).wait(),   # really sleeps 1 ms
    ])

    delay.delay_ms(10)
    delay.delay_us(50)
    delay.delay_ms(1)
    delay.done()

Module: halmock.delay
Version: 1.0.0
"""

import asyncio
import time
from dataclasses import dataclass, replace
from enum import Enum

from halmock.common import Generic, Transaction, expect_equal
from halmock.config import get_config
from halmock.core.constants import NANOS_PER_MICRO, NANOS_PER_MILLI, NANOS_PER_SECOND
from halmock.core.errors import ModeMismatchError
from halmock.core.types import PeripheralKind
from halmock.utils.log import get_logger
from halmock.utils.validation import validate_range

logger = get_logger(__name__)

# Delay arguments are 32-bit unsigned counts of their unit
_MAX_DELAY_ARG = 2**32 - 1


class DelayKind(Enum):
    """
    Delay transaction kinds.

    DELAY matches both the blocking and the async calls; BLOCKING_DELAY and
    ASYNC_DELAY only match their own flavour.
    """
    DELAY = "delay"
    BLOCKING_DELAY = "blocking_delay"
    ASYNC_DELAY = "async_delay"


@dataclass(frozen=True)
class DelayTransaction(Transaction):
    """
    Delay transaction.

    The expected field holds the delay in nanoseconds, so delay_ms(1) and
    delay_us(1000) expectations are interchangeable. Delays cannot carry
    errors.
    """
    real_delay: bool = False

    errorless_modes = frozenset(DelayKind)

    @classmethod
    def _build(cls, kind, amount, scale):
        amount = validate_range(amount, 0, _MAX_DELAY_ARG, "delay")
        return cls(kind, expected=amount * scale)

    @classmethod
    def delay_ns(cls, ns):
        return cls._build(DelayKind.DELAY, ns, 1)

    @classmethod
    def delay_us(cls, us):
        return cls._build(DelayKind.DELAY, us, NANOS_PER_MICRO)

    @classmethod
    def delay_ms(cls, ms):
        return cls._build(DelayKind.DELAY, ms, NANOS_PER_MILLI)

    @classmethod
    def blocking_delay_ns(cls, ns):
        return cls._build(DelayKind.BLOCKING_DELAY, ns, 1)

    @classmethod
    def blocking_delay_us(cls, us):
        return cls._build(DelayKind.BLOCKING_DELAY, us, NANOS_PER_MICRO)

    @classmethod
    def blocking_delay_ms(cls, ms):
        return cls._build(DelayKind.BLOCKING_DELAY, ms, NANOS_PER_MILLI)

    @classmethod
    def async_delay_ns(cls, ns):
        return cls._build(DelayKind.ASYNC_DELAY, ns, 1)

    @classmethod
    def async_delay_us(cls, us):
        return cls._build(DelayKind.ASYNC_DELAY, us, NANOS_PER_MICRO)

    @classmethod
    def async_delay_ms(cls, ms):
        return cls._build(DelayKind.ASYNC_DELAY, ms, NANOS_PER_MILLI)

    def wait(self):
        """Return a copy that really sleeps for the delay when consumed."""
        return replace(self, real_delay=True)

    @property
    def nanoseconds(self):
        return self.expected


class MockDelay(Generic):
    """
    Checked blocking delay.

    Accepts DELAY and BLOCKING_DELAY expectations. The real sleep, when
    requested, happens after the expectation was popped and checked, so
    the queue lock is never held while sleeping.
    """

    peripheral = "delay"
    transaction_type = DelayTransaction
    kind = PeripheralKind.DELAY

    accepted_kinds = (DelayKind.DELAY, DelayKind.BLOCKING_DELAY)

    def delay_ns(self, ns):
        """Pause for ns nanoseconds."""
        self._sleep(self._check("delay_ns", ns))

    def delay_us(self, us):
        """Pause for us microseconds."""
        self._sleep(self._check("delay_us", us * NANOS_PER_MICRO))

    def delay_ms(self, ms):
        """Pause for ms milliseconds."""
        self._sleep(self._check("delay_ms", ms * NANOS_PER_MILLI))

    def _check(self, name, ns):
        """
        Pop and verify a delay expectation.

        Returns:
            Seconds to really sleep, or 0
        """
        operation = self._operation(name)
        transaction = self._next(name)
        if transaction.mode not in self.accepted_kinds:
            raise ModeMismatchError(operation, transaction.mode, self.accepted_kinds[-1])
        expect_equal(transaction.expected, ns, operation, "delay value")

        if not transaction.real_delay:
            return 0
        if not get_config('allow_real_delays'):
            logger.debug("%s real delay of %d ns skipped by configuration", operation, ns)
            return 0
        logger.warning("%s sleeping for real: %d ns", operation, ns)
        return ns / NANOS_PER_SECOND

    def _sleep(self, seconds):
        if seconds:
            time.sleep(seconds)


class AsyncMockDelay(MockDelay):
    """Checked async delay. Accepts DELAY and ASYNC_DELAY expectations."""

    accepted_kinds = (DelayKind.DELAY, DelayKind.ASYNC_DELAY)

    async def delay_ns(self, ns):
        await self._async_sleep(self._check("delay_ns", ns))

    async def delay_us(self, us):
        await self._async_sleep(self._check("delay_us", us * NANOS_PER_MICRO))

    async def delay_ms(self, ms):
        await self._async_sleep(self._check("delay_ms", ms * NANOS_PER_MILLI))

    async def _async_sleep(self, seconds):
        if seconds:
            await asyncio.sleep(seconds)


# ============================================================================
# Unchecked Delays
# ============================================================================

class NoopDelay:
    """Delay provider that returns immediately and checks nothing."""

    def delay_ns(self, ns):
        pass

    def delay_us(self, us):
        pass

    def delay_ms(self, ms):
        pass


class StdSleep:
    """Delay provider that really sleeps for every call and checks nothing."""

    def delay_ns(self, ns):
        time.sleep(ns / NANOS_PER_SECOND)

    def delay_us(self, us):
        time.sleep(us * NANOS_PER_MICRO / NANOS_PER_SECOND)

    def delay_ms(self, ms):
        time.sleep(ms * NANOS_PER_MILLI / NANOS_PER_SECOND)
