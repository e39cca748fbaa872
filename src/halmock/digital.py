"""
Digital Pin Mock
================
Mock digital input/output pin.

Usage:
    from halmock.core.types import PinState, DigitalErrorKind
    from halmock.core.errors import DigitalError
    from halmock.digital import MockPin, PinTransaction

    pin = MockPin([
        PinTransaction.get(PinState.HIGH),
        PinTransaction.get(PinState.LOW),
        PinTransaction.set(PinState.LOW),
        PinTransaction.set(PinState.HIGH).with_error(DigitalErrorKind.OTHER),
    ])

    assert pin.is_high()
    assert pin.is_low()
    pin.set_low()
    with pytest.raises(DigitalError):
        pin.set_high()

    pin.done()

Module: halmock.digital
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum

from halmock.common import Generic, Transaction, expect_equal, expect_mode, resolve
from halmock.core.constants import PWM_MAX_DUTY
from halmock.core.errors import DigitalError
from halmock.core.types import Edge, PeripheralKind, PinState
from halmock.utils.validation import validate_range


class PinMode(Enum):
    """Digital pin transaction kinds."""
    SET = "set"
    GET = "get"
    TOGGLE = "toggle"
    GET_STATE = "get_state"
    WAIT_FOR_STATE = "wait_for_state"
    WAIT_FOR_EDGE = "wait_for_edge"
    ENABLE = "enable"
    DISABLE = "disable"
    GET_DUTY = "get_duty"
    GET_MAX_DUTY = "get_max_duty"
    SET_DUTY = "set_duty"


@dataclass(frozen=True)
class PinTransaction(Transaction):
    """
    Digital pin transaction.

    For SET the expected field holds the level the driver must drive; for
    GET and GET_STATE the response field holds the level reported back.
    The PWM pin modes carry duties and cannot fail.
    """

    error_class = DigitalError
    errorless_modes = frozenset({
        PinMode.ENABLE,
        PinMode.DISABLE,
        PinMode.GET_DUTY,
        PinMode.GET_MAX_DUTY,
        PinMode.SET_DUTY,
    })

    @classmethod
    def set(cls, state):
        """Expect the pin to be driven to state."""
        return cls(PinMode.SET, expected=PinState(state))

    @classmethod
    def get(cls, state):
        """Expect the pin level to be read; report state."""
        return cls(PinMode.GET, response=PinState(state))

    @classmethod
    def toggle(cls):
        """Expect the output to be toggled."""
        return cls(PinMode.TOGGLE)

    @classmethod
    def get_state(cls, state):
        """Expect the driven output level to be read back; report state."""
        return cls(PinMode.GET_STATE, response=PinState(state))

    @classmethod
    def wait_for_state(cls, state):
        """Expect an async wait for the pin to reach state."""
        return cls(PinMode.WAIT_FOR_STATE, expected=PinState(state))

    @classmethod
    def wait_for_edge(cls, edge):
        """Expect an async wait for edge."""
        return cls(PinMode.WAIT_FOR_EDGE, expected=Edge(edge))

    @classmethod
    def enable(cls):
        return cls(PinMode.ENABLE)

    @classmethod
    def disable(cls):
        return cls(PinMode.DISABLE)

    @classmethod
    def get_duty(cls, duty):
        """Expect a PWM duty query; report duty."""
        return cls(PinMode.GET_DUTY, response=validate_range(duty, 0, PWM_MAX_DUTY, "duty"))

    @classmethod
    def get_max_duty(cls, duty):
        """Expect a PWM maximum duty query; report duty."""
        return cls(
            PinMode.GET_MAX_DUTY,
            response=validate_range(duty, 0, PWM_MAX_DUTY, "max duty"),
        )

    @classmethod
    def set_duty(cls, duty):
        """Expect the PWM duty to be set to duty."""
        return cls(PinMode.SET_DUTY, expected=validate_range(duty, 0, PWM_MAX_DUTY, "duty"))


class MockPin(Generic):
    """
    Mock digital pin implementing output, input and stateful output
    operations, the async waits and the PWM pin operations.
    """

    peripheral = "pin"
    transaction_type = PinTransaction
    kind = PeripheralKind.DIGITAL

    # Output

    def set_low(self):
        """Drive the pin low."""
        self._set(PinState.LOW, "set_low")

    def set_high(self):
        """Drive the pin high."""
        self._set(PinState.HIGH, "set_high")

    def set_state(self, state):
        """Drive the pin to state (PinState or bool)."""
        state = PinState.from_bool(state)
        self._set(state, "set_high" if state else "set_low")

    @property
    def value(self):
        """digitalio-style level read."""
        return self.is_high()

    @value.setter
    def value(self, level):
        self.set_state(level)

    def _set(self, state, name):
        transaction = self._next(name)
        expect_mode(transaction, PinMode.SET, self._operation(name))
        expect_equal(transaction.expected, state, self._operation(name))
        resolve(transaction)

    # Input

    def is_high(self):
        """Is the input pin high?"""
        return self._get("is_high") is PinState.HIGH

    def is_low(self):
        """Is the input pin low?"""
        return self._get("is_low") is PinState.LOW

    def _get(self, name):
        transaction = self._next(name)
        expect_mode(transaction, PinMode.GET, self._operation(name))
        return resolve(transaction, transaction.response)

    # Stateful output

    def is_set_high(self):
        """Is the output pin currently driven high?"""
        return self._get_state("is_set_high") is PinState.HIGH

    def is_set_low(self):
        """Is the output pin currently driven low?"""
        return self._get_state("is_set_low") is PinState.LOW

    def toggle(self):
        """Toggle the output level."""
        transaction = self._next("toggle")
        expect_mode(transaction, PinMode.TOGGLE, self._operation("toggle"))
        resolve(transaction)

    def _get_state(self, name):
        transaction = self._next(name)
        expect_mode(transaction, PinMode.GET_STATE, self._operation(name))
        return resolve(transaction, transaction.response)

    # Async waits

    async def wait_for_high(self):
        """Wait until the pin is high."""
        self._wait_state(PinState.HIGH, "wait_for_high")

    async def wait_for_low(self):
        """Wait until the pin is low."""
        self._wait_state(PinState.LOW, "wait_for_low")

    async def wait_for_rising_edge(self):
        """Wait for a rising edge."""
        self._wait_edge(Edge.RISING, "wait_for_rising_edge")

    async def wait_for_falling_edge(self):
        """Wait for a falling edge."""
        self._wait_edge(Edge.FALLING, "wait_for_falling_edge")

    async def wait_for_any_edge(self):
        """Wait for either edge."""
        self._wait_edge(Edge.ANY, "wait_for_any_edge")

    def _wait_state(self, state, name):
        transaction = self._next(name)
        expect_mode(transaction, PinMode.WAIT_FOR_STATE, self._operation(name))
        expect_equal(transaction.expected, state, self._operation(name))
        resolve(transaction)

    def _wait_edge(self, edge, name):
        transaction = self._next(name)
        expect_mode(transaction, PinMode.WAIT_FOR_EDGE, self._operation(name))
        expect_equal(transaction.expected, edge, self._operation(name))
        resolve(transaction)

    # PWM pin

    def enable(self):
        """Enable PWM output on the pin."""
        transaction = self._next("enable")
        expect_mode(transaction, PinMode.ENABLE, self._operation("enable"))

    def disable(self):
        """Disable PWM output on the pin."""
        transaction = self._next("disable")
        expect_mode(transaction, PinMode.DISABLE, self._operation("disable"))

    def get_duty(self):
        """Query the PWM duty."""
        transaction = self._next("get_duty")
        expect_mode(transaction, PinMode.GET_DUTY, self._operation("get_duty"))
        return transaction.response

    def get_max_duty(self):
        """Query the maximum PWM duty."""
        transaction = self._next("get_max_duty")
        expect_mode(transaction, PinMode.GET_MAX_DUTY, self._operation("get_max_duty"))
        return transaction.response

    def set_duty(self, duty):
        """Set the PWM duty."""
        operation = self._operation("set_duty")
        transaction = self._next("set_duty")
        expect_mode(transaction, PinMode.SET_DUTY, operation)
        expect_equal(transaction.expected, duty, operation, "duty")
