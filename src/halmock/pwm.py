"""
PWM Mock
========
Mock PWM output with a duty cycle.

Two surfaces share one transaction type:

    - the duty cycle surface (max_duty_cycle, set_duty_cycle and helpers)
    - the channel surface (enable, disable, get_period, set_period,
      get_duty, get_max_duty, set_duty) taking an ignored channel argument

The helpers set_duty_cycle_fully_on, set_duty_cycle_fraction and
set_duty_cycle_percent first query max_duty_cycle, just like drivers
written against a real PWM channel do, so tests must queue a
max_duty_cycle expectation before each of them. set_duty_cycle_fully_off
sets 0 directly.

get_max_duty and max_duty_cycle match the same expectation, as do
set_duty and set_duty_cycle.

Usage:
    from halmock.pwm import MockPwm, PwmTransaction

    pwm = MockPwm([
        PwmTransaction.max_duty_cycle(100),
        PwmTransaction.set_duty_cycle(50),
        PwmTransaction.set_duty_cycle(101).with_error(MockErrorKind.NO_DETAILS),
    ])

    pwm.set_duty_cycle_percent(50)
    with pytest.raises(PwmError):
        pwm.set_duty_cycle(101)

    pwm.done()

Module: halmock.pwm
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum

from halmock.common import Generic, Transaction, expect_equal, expect_mode, resolve
from halmock.core.constants import PWM_MAX_DUTY, PWM_MAX_PERIOD
from halmock.core.errors import PwmError
from halmock.core.types import PeripheralKind
from halmock.utils.validation import validate_range


class PwmMode(Enum):
    """PWM transaction kinds."""
    MAX_DUTY_CYCLE = "max_duty_cycle"
    SET_DUTY_CYCLE = "set_duty_cycle"
    ENABLE = "enable"
    DISABLE = "disable"
    GET_PERIOD = "get_period"
    SET_PERIOD = "set_period"
    GET_DUTY = "get_duty"


@dataclass(frozen=True)
class PwmTransaction(Transaction):
    """
    PWM transaction.

    Queries (MAX_DUTY_CYCLE, GET_PERIOD, GET_DUTY) report their value
    through response; setters check their argument against expected.
    Only SET_DUTY_CYCLE can carry an error.
    """

    error_class = PwmError
    errorless_modes = frozenset({
        PwmMode.MAX_DUTY_CYCLE,
        PwmMode.ENABLE,
        PwmMode.DISABLE,
        PwmMode.GET_PERIOD,
        PwmMode.SET_PERIOD,
        PwmMode.GET_DUTY,
    })

    @classmethod
    def max_duty_cycle(cls, duty):
        """Expect a max_duty_cycle query; report duty."""
        return cls(
            PwmMode.MAX_DUTY_CYCLE,
            response=validate_range(duty, 0, PWM_MAX_DUTY, "max duty cycle"),
        )

    @classmethod
    def set_duty_cycle(cls, duty):
        """Expect the duty cycle to be set to duty."""
        return cls(
            PwmMode.SET_DUTY_CYCLE,
            expected=validate_range(duty, 0, PWM_MAX_DUTY, "duty cycle"),
        )

    get_max_duty = max_duty_cycle
    set_duty = set_duty_cycle

    @classmethod
    def enable(cls):
        return cls(PwmMode.ENABLE)

    @classmethod
    def disable(cls):
        return cls(PwmMode.DISABLE)

    @classmethod
    def get_period(cls, period):
        """Expect a period query; report period."""
        return cls(
            PwmMode.GET_PERIOD,
            response=validate_range(period, 0, PWM_MAX_PERIOD, "period"),
        )

    @classmethod
    def set_period(cls, period):
        """Expect the period to be set to period."""
        return cls(
            PwmMode.SET_PERIOD,
            expected=validate_range(period, 0, PWM_MAX_PERIOD, "period"),
        )

    @classmethod
    def get_duty(cls, duty):
        """Expect a duty query; report duty."""
        return cls(
            PwmMode.GET_DUTY,
            response=validate_range(duty, 0, PWM_MAX_DUTY, "duty cycle"),
        )


class MockPwm(Generic):
    """Mock PWM channel."""

    peripheral = "pwm"
    transaction_type = PwmTransaction
    kind = PeripheralKind.PWM

    # Duty cycle surface

    def max_duty_cycle(self):
        """
        Query the maximum duty cycle.

        Returns:
            int: The queued maximum
        """
        return self._query(PwmMode.MAX_DUTY_CYCLE, "max_duty_cycle")

    def set_duty_cycle(self, duty):
        """Set the duty cycle to duty (0 to max_duty_cycle())."""
        operation = self._operation("set_duty_cycle")
        transaction = self._next("set_duty_cycle")
        expect_mode(transaction, PwmMode.SET_DUTY_CYCLE, operation)
        expect_equal(transaction.expected, duty, operation, "duty cycle")
        resolve(transaction)

    def set_duty_cycle_fully_off(self):
        """Set a duty cycle of 0."""
        self.set_duty_cycle(0)

    def set_duty_cycle_fully_on(self):
        """Set the maximum duty cycle."""
        self.set_duty_cycle(self.max_duty_cycle())

    def set_duty_cycle_fraction(self, numerator, denominator):
        """
        Set the duty cycle to numerator / denominator of the maximum.

        Raises:
            ValueError: If denominator is 0 or numerator exceeds it
        """
        if denominator == 0 or numerator > denominator:
            raise ValueError(
                f"invalid duty cycle fraction {numerator}/{denominator}"
            )
        maximum = self.max_duty_cycle()
        self.set_duty_cycle(maximum * numerator // denominator)

    def set_duty_cycle_percent(self, percent):
        """Set the duty cycle to percent (0-100) of the maximum."""
        self.set_duty_cycle_fraction(percent, 100)

    # Channel surface

    def enable(self, channel=None):
        """Enable the output."""
        transaction = self._next("enable")
        expect_mode(transaction, PwmMode.ENABLE, self._operation("enable"))

    def disable(self, channel=None):
        """Disable the output."""
        transaction = self._next("disable")
        expect_mode(transaction, PwmMode.DISABLE, self._operation("disable"))

    def get_period(self):
        """Query the period."""
        return self._query(PwmMode.GET_PERIOD, "get_period")

    def set_period(self, period):
        """Set the period to period."""
        operation = self._operation("set_period")
        transaction = self._next("set_period")
        expect_mode(transaction, PwmMode.SET_PERIOD, operation)
        expect_equal(transaction.expected, period, operation, "period")

    def get_duty(self, channel=None):
        """Query the current duty."""
        return self._query(PwmMode.GET_DUTY, "get_duty")

    def get_max_duty(self):
        """Query the maximum duty. Matches a max_duty_cycle expectation."""
        return self._query(PwmMode.MAX_DUTY_CYCLE, "get_max_duty")

    def set_duty(self, channel, duty):
        """Set the duty of channel. Matches a set_duty_cycle expectation."""
        operation = self._operation("set_duty")
        transaction = self._next("set_duty")
        expect_mode(transaction, PwmMode.SET_DUTY_CYCLE, operation)
        expect_equal(transaction.expected, duty, operation, "duty cycle")
        resolve(transaction)

    def _query(self, mode, name):
        transaction = self._next(name)
        expect_mode(transaction, mode, self._operation(name))
        return transaction.response
