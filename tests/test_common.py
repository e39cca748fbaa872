"""
Tests for the Expectation Engine
================================
Unit tests for the shared queue, the handle base class and the matching
protocol, exercised through the digital pin and I2C mocks.

Run with: python -m pytest tests/test_common.py -v

Module: tests.test_common
Version: 1.0.0
"""

import contextlib
import copy
import gc
import sys
import threading

import pytest

from halmock.common import SharedExpectations, Transaction, expect_equal, expect_mode, resolve
from halmock.config import configure
from halmock.core.errors import (
    DataMismatchError,
    DoneCallError,
    I2cError,
    MissingDoneError,
    ModeMismatchError,
    StarvationError,
    TransactionError,
    UnsatisfiedExpectationsError,
)
from halmock.core.types import I2cErrorKind, PinState
from halmock.digital import MockPin, PinMode, PinTransaction
from halmock.i2c import I2cTransaction, MockI2C


@contextlib.contextmanager
def captured_unraisable():
    """Collect exceptions raised from finalizers instead of printing them."""
    seen = []
    old_hook = sys.unraisablehook
    sys.unraisablehook = seen.append
    try:
        yield seen
    finally:
        sys.unraisablehook = old_hook


# ============================================================================
# Scenario Tests
# ============================================================================

class TestScenarios:
    """End-to-end behaviour of a single mock."""

    def test_write_then_read_consumes_in_order(self):
        """Queued write then read succeed and the check passes."""
        i2c = MockI2C([
            I2cTransaction.write(0x2A, [1, 2]),
            I2cTransaction.read(0x3B, [3, 4]),
        ])

        i2c.write(0x2A, [1, 2])
        assert i2c.read(0x3B, 2) == bytes([3, 4])

        i2c.done()

    def test_payload_mismatch_names_expected_and_actual(self):
        """Writing different data reports both payloads."""
        i2c = MockI2C([I2cTransaction.write(0x2A, [1, 2])])

        with pytest.raises(DataMismatchError) as exc_info:
            i2c.write(0x2A, [1, 3])

        message = str(exc_info.value)
        assert "i2c::write data does not match expectation" in message
        assert "[1, 2]" in message
        assert "[1, 3]" in message

    def test_unconsumed_expectation_reported_on_done(self):
        """done() without any call reports one remaining expectation."""
        i2c = MockI2C([I2cTransaction.read(0x2A, [1, 2])])

        with pytest.raises(UnsatisfiedExpectationsError) as exc_info:
            i2c.done()

        assert len(exc_info.value.remaining) == 1
        assert "1 expectation remaining" in str(exc_info.value)

    def test_second_done_fails(self):
        """done() twice without a reload fails on the second call."""
        pin = MockPin([PinTransaction.set(PinState.HIGH), PinTransaction.set(PinState.LOW)])
        pin.set_high()
        pin.set_low()

        pin.done()
        with pytest.raises(DoneCallError) as exc_info:
            pin.done()

        assert "called twice" in str(exc_info.value)


# ============================================================================
# Queue Property Tests
# ============================================================================

class TestQueueProperties:
    """FIFO, exhaustion, incompleteness and sharing."""

    @pytest.mark.parametrize("count", [1, 3, 10])
    def test_fifo_order(self, count):
        """N queued reads return their responses in order."""
        levels = [PinState.HIGH if i % 2 else PinState.LOW for i in range(count)]
        pin = MockPin([PinTransaction.get(level) for level in levels])

        observed = [PinState.from_bool(pin.is_high()) for _ in range(count)]

        assert observed == levels
        pin.done()

    def test_out_of_order_call_fails_before_success(self):
        """Calling the second expectation first is a mode mismatch."""
        pin = MockPin([PinTransaction.set(PinState.HIGH), PinTransaction.toggle()])

        with pytest.raises(ModeMismatchError) as exc_info:
            pin.toggle()

        assert "pin::toggle unexpected mode" in str(exc_info.value)
        assert exc_info.value.expected is PinMode.SET
        assert exc_info.value.actual is PinMode.TOGGLE

    @pytest.mark.parametrize("count", [0, 1, 4])
    def test_one_call_too_many_starves(self, count):
        """The call after the last expectation raises StarvationError."""
        pin = MockPin([PinTransaction.toggle() for _ in range(count)])
        for _ in range(count):
            pin.toggle()

        with pytest.raises(StarvationError) as exc_info:
            pin.toggle()

        assert str(exc_info.value) == "no expectation for pin::toggle call"

    @pytest.mark.parametrize("loaded,consumed", [(2, 0), (3, 1), (5, 4)])
    def test_incomplete_reports_exact_remaining(self, loaded, consumed):
        """done() reports exactly loaded - consumed items."""
        pin = MockPin([PinTransaction.toggle() for _ in range(loaded)])
        for _ in range(consumed):
            pin.toggle()

        with pytest.raises(UnsatisfiedExpectationsError) as exc_info:
            pin.done()

        assert len(exc_info.value.remaining) == loaded - consumed
        count = loaded - consumed
        noun = "expectation" if count == 1 else "expectations"
        assert f"{count} {noun} remaining" in str(exc_info.value)

    def test_clone_shares_queue(self):
        """Consumption through a clone is visible to the original."""
        pin = MockPin([PinTransaction.toggle(), PinTransaction.toggle()])
        clone = pin.clone()

        clone.toggle()
        assert len(pin.remaining()) == 1
        pin.toggle()

        assert clone.shares_state_with(pin)
        clone.done()
        assert pin.is_checked()

    def test_copy_module_clones(self):
        """copy.copy() behaves like clone()."""
        pin = MockPin([PinTransaction.toggle()])
        other = copy.copy(pin)

        other.toggle()

        assert other.shares_state_with(pin)
        pin.done()

    def test_done_through_either_handle_retires_obligation(self):
        """A check through one handle makes a check through the other a double check."""
        pin = MockPin([PinTransaction.toggle()])
        clone = pin.clone()
        pin.toggle()

        clone.done()
        with pytest.raises(DoneCallError):
            pin.done()

    def test_independent_mocks_do_not_share(self):
        """Separately created mocks own separate queues."""
        first = MockPin([PinTransaction.toggle()])
        second = MockPin([])

        assert not first.shares_state_with(second)
        first.toggle()
        first.done()
        second.done()


# ============================================================================
# Loading Tests
# ============================================================================

class TestLoading:
    """update_expectations, add_expectations and the deprecated expect."""

    def test_update_after_done_installs_new_expectations(self):
        """A reload after a successful check starts a new cycle."""
        pin = MockPin([PinTransaction.toggle()])
        pin.toggle()
        pin.done()

        pin.update_expectations([PinTransaction.set(PinState.LOW)])
        pin.set_low()

        pin.done()

    def test_update_checks_residual_expectations(self):
        """Replacing a non-empty queue fails and keeps the old items."""
        pin = MockPin([PinTransaction.toggle()])

        with pytest.raises(UnsatisfiedExpectationsError):
            pin.update_expectations([PinTransaction.set(PinState.LOW)])

        assert pin.remaining() == [PinTransaction.toggle()]
        pin.toggle()
        pin.done()

    def test_update_without_explicit_done(self):
        """A drained queue can be reloaded without calling done() first."""
        pin = MockPin([PinTransaction.toggle()])
        pin.toggle()

        pin.update_expectations([PinTransaction.toggle()])
        pin.toggle()

        pin.done()

    def test_update_requires_new_check(self):
        """After a reload the check is owed again."""
        pin = MockPin([])
        pin.done()
        pin.update_expectations([])

        assert not pin.is_checked()
        pin.done()

    def test_add_expectations_appends(self):
        """Appended expectations come after the queued ones."""
        pin = MockPin([PinTransaction.set(PinState.HIGH)])
        pin.add_expectations(PinTransaction.set(PinState.LOW))

        pin.set_high()
        pin.set_low()

        pin.done()

    def test_expect_is_deprecated_alias(self):
        """expect() replaces the queue and warns."""
        pin = MockPin([])
        pin.done()

        with pytest.warns(DeprecationWarning):
            pin.expect([PinTransaction.toggle()])

        pin.toggle()
        pin.done()

    def test_wrong_transaction_type_rejected(self):
        """Loading another adapter's transaction is a construction error."""
        with pytest.raises(TransactionError) as exc_info:
            MockPin([I2cTransaction.write(0x10, [1])])

        assert "expects PinTransaction" in str(exc_info.value)


# ============================================================================
# Error Injection Tests
# ============================================================================

class TestErrorInjection:
    """with_error() and the raising of injected errors."""

    def test_injected_error_consumes_one_expectation(self):
        """The error is raised once and only its expectation is consumed."""
        i2c = MockI2C([
            I2cTransaction.write(0x10, [1]).with_error(I2cErrorKind.BUS),
            I2cTransaction.write(0x10, [2]),
        ])

        with pytest.raises(I2cError) as exc_info:
            i2c.write(0x10, [1])

        assert exc_info.value == I2cError(I2cErrorKind.BUS)
        assert len(i2c.remaining()) == 1
        i2c.write(0x10, [2])
        i2c.done()

    def test_exception_instance_raised_as_is(self):
        """A ready exception instance is raised unchanged."""
        error = OSError(5, "Input/output error")
        pin = MockPin([PinTransaction.set(PinState.HIGH).with_error(error)])

        with pytest.raises(OSError) as exc_info:
            pin.set_high()

        assert exc_info.value is error
        pin.done()

    def test_mode_checked_before_error(self):
        """A call of the wrong kind fails even if the expectation carries an error."""
        pin = MockPin([PinTransaction.set(PinState.HIGH).with_error(OSError())])

        with pytest.raises(ModeMismatchError):
            pin.toggle()

    def test_errorless_mode_rejects_error(self):
        """Attaching an error to a mode that cannot fail is rejected."""
        with pytest.raises(TransactionError) as exc_info:
            I2cTransaction.transaction_start(0x10).with_error(I2cErrorKind.OTHER)

        assert "cannot carry an error" in str(exc_info.value)

    def test_with_error_returns_copy(self):
        """with_error() leaves the original transaction untouched."""
        original = PinTransaction.toggle()
        failing = original.with_error(OSError())

        assert original.error is None
        assert failing.error is not None
        assert failing.mode is original.mode


# ============================================================================
# Matching Protocol Tests
# ============================================================================

class TestMatchingProtocol:
    """expect_mode, expect_equal and resolve."""

    def test_expect_mode_passes_on_match(self):
        expect_mode(Transaction("a"), "a", "mock::op")

    def test_expect_mode_raises_on_mismatch(self):
        with pytest.raises(ModeMismatchError) as exc_info:
            expect_mode(Transaction("a"), "b", "mock::op")

        assert "mock::op unexpected mode" in str(exc_info.value)

    def test_expect_equal_uses_label(self):
        with pytest.raises(DataMismatchError) as exc_info:
            expect_equal(0x10, 0x11, "i2c::write", "address")

        assert "i2c::write address mismatch" in str(exc_info.value)

    def test_resolve_returns_result(self):
        assert resolve(Transaction("a"), 42) == 42

    def test_resolve_raises_error(self):
        with pytest.raises(ValueError):
            resolve(Transaction("a", error=ValueError("boom")), 42)


# ============================================================================
# Scoped Verification Tests
# ============================================================================

class TestScopedVerification:
    """Context manager use and release-time checks."""

    def test_context_manager_calls_done(self):
        """Leaving the block normally performs the check."""
        with MockPin([PinTransaction.toggle()]) as pin:
            pin.toggle()

        assert pin.is_checked()

    def test_context_manager_reports_leftovers(self):
        """Leaving the block with items left fails."""
        with pytest.raises(UnsatisfiedExpectationsError):
            with MockPin([PinTransaction.toggle()]):
                pass

    def test_context_manager_does_not_mask_failures(self):
        """An exception inside the block propagates and abandons the check."""
        with pytest.raises(RuntimeError):
            with MockPin([PinTransaction.toggle()]) as pin:
                raise RuntimeError("driver crashed")

        assert pin.is_checked()

    def test_release_without_done_reported(self):
        """Dropping the last handle of an unchecked mock raises MissingDoneError."""
        configure(verify_on_release=True)

        with captured_unraisable() as unraisable:
            pin = MockPin([PinTransaction.toggle()])
            pin.toggle()
            del pin
            gc.collect()

        assert len(unraisable) == 1
        assert isinstance(unraisable[0].exc_value, MissingDoneError)

    def test_release_while_handling_exception_reported(self):
        """A finalizer running inside an except block still reports."""
        configure(verify_on_release=True)

        with captured_unraisable() as unraisable:
            pin = MockPin([PinTransaction.toggle()])
            try:
                raise RuntimeError("driver crashed")
            except RuntimeError:
                del pin
                gc.collect()

        assert len(unraisable) == 1
        assert isinstance(unraisable[0].exc_value, MissingDoneError)

    def test_release_waits_for_last_clone(self):
        """The check fires only when no handle is left."""
        configure(verify_on_release=True)

        with captured_unraisable() as unraisable:
            pin = MockPin([])
            clone = pin.clone()
            del pin
            gc.collect()
            assert unraisable == []

            del clone
            gc.collect()

        assert len(unraisable) == 1

    def test_release_after_done_is_silent(self):
        """A checked mock can be dropped freely."""
        configure(verify_on_release=True)

        with captured_unraisable() as unraisable:
            pin = MockPin([])
            pin.done()
            del pin
            gc.collect()

        assert unraisable == []

    def test_release_check_can_be_disabled(self):
        """verify_on_release=False silences the release check."""
        configure(verify_on_release=False)

        with captured_unraisable() as unraisable:
            pin = MockPin([])
            del pin
            gc.collect()

        assert unraisable == []


# ============================================================================
# Shared State Tests
# ============================================================================

class TestSharedExpectations:
    """SharedExpectations used directly."""

    def test_pop_next_returns_none_when_drained(self):
        shared = SharedExpectations(["a"])

        assert shared.pop_next() == ("a", 0)
        assert shared.pop_next() == (None, 0)
        shared.check_complete()

    def test_len_and_remaining(self):
        shared = SharedExpectations(["a", "b"])

        assert len(shared) == 2
        assert shared.remaining() == ["a", "b"]
        shared.abandon()

    def test_concurrent_pops_consume_each_item_once(self):
        """Items popped from several threads are each seen exactly once."""
        items = list(range(1000))
        shared = SharedExpectations(items)
        seen = []
        seen_lock = threading.Lock()

        def worker():
            while True:
                item, _ = shared.pop_next()
                if item is None:
                    return
                with seen_lock:
                    seen.append(item)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(seen) == items
        shared.check_complete()

    def test_pops_are_logged(self, debug_log):
        """Every consumed expectation is logged at DEBUG."""
        pin = MockPin([PinTransaction.toggle()])
        pin.toggle()
        pin.done()

        assert "pin::toggle consumed" in debug_log.text
