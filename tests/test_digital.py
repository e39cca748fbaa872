"""
Tests for Digital Pin Mock
==========================
Unit tests for halmock.digital.

Run with: python -m pytest tests/test_digital.py -v

Module: tests.test_digital
Version: 1.0.0
"""

import pytest

from halmock.core.errors import (
    DataMismatchError,
    DigitalError,
    ModeMismatchError,
    StarvationError,
    TransactionError,
)
from halmock.core.types import DigitalErrorKind, Edge, PinState
from halmock.digital import MockPin, PinMode, PinTransaction


class TestPinTransaction:
    """Transaction builders."""

    def test_set_stores_expected_level(self):
        transaction = PinTransaction.set(PinState.HIGH)

        assert transaction.mode is PinMode.SET
        assert transaction.expected is PinState.HIGH
        assert transaction.response is None

    def test_get_stores_response_level(self):
        transaction = PinTransaction.get(PinState.LOW)

        assert transaction.mode is PinMode.GET
        assert transaction.response is PinState.LOW

    def test_levels_accept_ints(self):
        assert PinTransaction.set(1).expected is PinState.HIGH
        assert PinTransaction.get(0).response is PinState.LOW

    def test_with_error_wraps_kind(self):
        transaction = PinTransaction.toggle().with_error(DigitalErrorKind.OTHER)

        assert transaction.error == DigitalError(DigitalErrorKind.OTHER)

    def test_transactions_are_immutable(self):
        transaction = PinTransaction.toggle()
        transaction.with_error(DigitalErrorKind.OTHER)

        assert transaction.error is None

    def test_wait_for_edge_rejects_unknown_edge(self):
        with pytest.raises(ValueError):
            PinTransaction.wait_for_edge("sideways")


class TestOutput:
    """OutputPin operations."""

    def test_set_low_and_high(self):
        pin = MockPin([
            PinTransaction.set(PinState.LOW),
            PinTransaction.set(PinState.HIGH),
        ])

        pin.set_low()
        pin.set_high()

        pin.done()

    def test_wrong_level_is_data_mismatch(self):
        pin = MockPin([PinTransaction.set(PinState.LOW)])

        with pytest.raises(DataMismatchError) as exc_info:
            pin.set_high()

        assert "pin::set_high" in str(exc_info.value)
        pin.done()

    def test_set_state_and_value_property(self):
        pin = MockPin([
            PinTransaction.set(PinState.HIGH),
            PinTransaction.set(PinState.LOW),
        ])

        pin.set_state(PinState.HIGH)
        pin.value = False

        pin.done()

    def test_injected_error_is_raised_after_mode_check(self):
        pin = MockPin([
            PinTransaction.set(PinState.HIGH).with_error(DigitalErrorKind.OTHER),
        ])

        with pytest.raises(DigitalError) as exc_info:
            pin.set_high()

        assert exc_info.value.kind is DigitalErrorKind.OTHER
        pin.done()


class TestInput:
    """InputPin operations."""

    def test_is_high_and_is_low(self):
        pin = MockPin([
            PinTransaction.get(PinState.HIGH),
            PinTransaction.get(PinState.HIGH),
        ])

        assert pin.is_high()
        assert not pin.is_low()

        pin.done()

    def test_value_property_reads_level(self):
        pin = MockPin([PinTransaction.get(PinState.LOW)])

        assert pin.value is False

        pin.done()

    def test_get_expectation_does_not_match_set(self):
        pin = MockPin([PinTransaction.get(PinState.HIGH)])

        with pytest.raises(ModeMismatchError):
            pin.set_high()

        pin.done()

    def test_read_without_expectation_starves(self):
        pin = MockPin([])

        with pytest.raises(StarvationError) as exc_info:
            pin.is_high()

        assert str(exc_info.value) == "no expectation for pin::is_high call"
        pin.done()


class TestStatefulOutput:
    """StatefulOutputPin operations."""

    def test_toggle_and_read_back(self):
        pin = MockPin([
            PinTransaction.toggle(),
            PinTransaction.get_state(PinState.HIGH),
            PinTransaction.get_state(PinState.HIGH),
        ])

        pin.toggle()
        assert pin.is_set_high()
        assert not pin.is_set_low()

        pin.done()

    def test_get_state_is_distinct_from_get(self):
        pin = MockPin([PinTransaction.get(PinState.HIGH)])

        with pytest.raises(ModeMismatchError):
            pin.is_set_high()

        pin.done()


class TestAsyncWaits:
    """Async wait operations."""

    @pytest.mark.asyncio
    async def test_wait_for_levels(self):
        pin = MockPin([
            PinTransaction.wait_for_state(PinState.HIGH),
            PinTransaction.wait_for_state(PinState.LOW),
        ])

        await pin.wait_for_high()
        await pin.wait_for_low()

        pin.done()

    @pytest.mark.asyncio
    async def test_wait_for_edges(self):
        pin = MockPin([
            PinTransaction.wait_for_edge(Edge.RISING),
            PinTransaction.wait_for_edge(Edge.FALLING),
            PinTransaction.wait_for_edge(Edge.ANY),
        ])

        await pin.wait_for_rising_edge()
        await pin.wait_for_falling_edge()
        await pin.wait_for_any_edge()

        pin.done()

    @pytest.mark.asyncio
    async def test_wrong_edge(self):
        pin = MockPin([PinTransaction.wait_for_edge(Edge.RISING)])

        with pytest.raises(DataMismatchError):
            await pin.wait_for_falling_edge()

        pin.done()

    @pytest.mark.asyncio
    async def test_wait_error(self):
        pin = MockPin([
            PinTransaction.wait_for_state(PinState.HIGH).with_error(DigitalErrorKind.OTHER),
        ])

        with pytest.raises(DigitalError):
            await pin.wait_for_high()

        pin.done()


class TestPwmPin:
    """PWM operations on a pin."""

    def test_pwm_sequence(self):
        pin = MockPin([
            PinTransaction.enable(),
            PinTransaction.get_max_duty(10_000),
            PinTransaction.set_duty(10_000),
            PinTransaction.get_duty(10_000),
            PinTransaction.disable(),
        ])

        pin.enable()
        max_duty = pin.get_max_duty()
        pin.set_duty(max_duty)
        assert pin.get_duty() == 10_000
        pin.disable()

        pin.done()

    def test_duty_mismatch(self):
        pin = MockPin([PinTransaction.set_duty(100)])

        with pytest.raises(DataMismatchError) as exc_info:
            pin.set_duty(200)

        assert "pin::set_duty duty mismatch" in str(exc_info.value)
        pin.done()

    def test_get_duty_when_set_expected(self):
        pin = MockPin([PinTransaction.set(PinState.HIGH)])

        with pytest.raises(ModeMismatchError) as exc_info:
            pin.get_duty()

        assert exc_info.value.expected is PinMode.SET
        pin.done()

    def test_pwm_modes_cannot_fail(self):
        for transaction in (
            PinTransaction.enable(),
            PinTransaction.disable(),
            PinTransaction.get_duty(1),
            PinTransaction.get_max_duty(1),
            PinTransaction.set_duty(1),
        ):
            with pytest.raises(TransactionError):
                transaction.with_error(DigitalErrorKind.OTHER)

    def test_duty_range(self):
        with pytest.raises(TransactionError):
            PinTransaction.set_duty(0x10000)


class TestLoadingPins:
    """Loading behaviour specific to pins."""

    def test_foreign_transaction_rejected(self):
        from halmock.i2c import I2cTransaction

        with pytest.raises(TransactionError):
            MockPin([I2cTransaction.write(0x10, [1])])
