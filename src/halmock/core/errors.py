"""
Error Definitions
=================
Failure taxonomy of the expectation engine and the injectable peripheral
errors.

Two unrelated families live here:

Fatal expectation failures (subclasses of ExpectationError):
    These signal a bug in the test or in the driver under test. They derive
    from AssertionError so pytest reports them as assertion failures, and
    they are never meant to be caught by driver code.

    - StarvationError: operation performed with no expectation left
    - ModeMismatchError: the next expectation is for a different operation
    - DataMismatchError: right operation, wrong data (address, payload, ...)
    - UnsatisfiedExpectationsError: done() with expectations remaining
    - DoneCallError: done() called twice without reloading
    - MissingDoneError: handle released without done()
    - PeripheralKindError: multiplexed handle popped another family's item
    - PeripheralIdentityError: multiplexed handle popped another handle's item

Injected errors (subclasses of MockError):
    Queued on purpose with Transaction.with_error() and raised from the mock
    operation as the peripheral's own error type, so the driver's error path
    can be exercised.

TransactionError is raised while building transactions (authoring mistakes
caught at construction time).

Module: halmock.core.errors
Version: 1.0.0
"""

from halmock.core.types import MockErrorKind


def _display(value):
    """Render bytes-like payloads as lists of ints for readable diffs."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return list(bytes(value))
    return value


# ============================================================================
# Fatal Expectation Failures
# ============================================================================

class ExpectationError(AssertionError):
    """Base class for every mismatch between expected and actual calls."""


class StarvationError(ExpectationError):
    """An operation was performed but no expectation was left."""

    def __init__(self, operation):
        self.operation = operation
        super().__init__(f"no expectation for {operation} call")


class ModeMismatchError(ExpectationError):
    """
    The next expectation describes a different operation.

    Attributes:
        operation: Name of the operation performed (e.g. "i2c::write")
        expected: Mode of the popped expectation
        actual: Mode of the performed operation
    """

    def __init__(self, operation, expected, actual):
        self.operation = operation
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{operation} unexpected mode (expected {expected!r}, got {actual!r})"
        )


class DataMismatchError(ExpectationError):
    """
    The operation matched but its data did not.

    The label defaults to "data" and is replaced for other compared values,
    e.g. "address" or "channel".
    """

    def __init__(self, operation, expected, actual, label="data"):
        self.operation = operation
        self.expected = expected
        self.actual = actual
        self.label = label
        if label == "data":
            headline = f"{operation} data does not match expectation"
        else:
            headline = f"{operation} {label} mismatch"
        super().__init__(
            f"{headline} (expected {_display(expected)!r}, got {_display(actual)!r})"
        )


class UnsatisfiedExpectationsError(ExpectationError):
    """done() found expectations that were never consumed."""

    def __init__(self, remaining):
        self.remaining = list(remaining)
        count = len(self.remaining)
        noun = "expectation" if count == 1 else "expectations"
        details = ", ".join(repr(item) for item in self.remaining[:5])
        if count > 5:
            details += ", ..."
        super().__init__(
            f"Not all expectations consumed: {count} {noun} remaining [{details}]"
        )


class DoneCallError(ExpectationError):
    """The completion check was called twice without reloading."""

    def __init__(self, message="The .done() method was called twice!"):
        super().__init__(message)


class MissingDoneError(DoneCallError):
    """A mock was released without its completion check."""

    def __init__(self, description="mock"):
        super().__init__(
            f"A {description} was dropped without calling the .done() method. "
            "Call .done() (or use the mock as a context manager) once the "
            "driver under test has finished."
        )


class PeripheralKindError(ExpectationError):
    """A multiplexed handle popped an expectation for another peripheral family."""

    def __init__(self, operation, expected_kind, actual_kind):
        self.operation = operation
        self.expected_kind = expected_kind
        self.actual_kind = actual_kind
        super().__init__(
            f"{operation} wrong peripheral type: next expectation is for "
            f"{expected_kind}, call came from {actual_kind}"
        )


class PeripheralIdentityError(ExpectationError):
    """A multiplexed handle popped an expectation owned by another handle."""

    def __init__(self, operation, expected_identity, actual_identity):
        self.operation = operation
        self.expected_identity = expected_identity
        self.actual_identity = actual_identity
        super().__init__(
            f"{operation} wrong instance: next expectation belongs to handle "
            f"{expected_identity!r}, call came from handle {actual_identity!r}"
        )


# ============================================================================
# Construction-time Errors
# ============================================================================

class TransactionError(ValueError):
    """A transaction could not be built or loaded as requested."""


# ============================================================================
# Injected Peripheral Errors
# ============================================================================

class MockError(Exception):
    """
    Error returned by a mocked peripheral operation.

    Raised only when a test queued it with Transaction.with_error(). Two
    errors are equal when they are of the same class and kind.

    Attributes:
        kind: Error kind enum member describing the failure
    """

    def __init__(self, kind=MockErrorKind.NO_DETAILS, message=None):
        self.kind = kind
        super().__init__(message or f"{type(self).__name__}: {kind.value}")

    def __eq__(self, other):
        if type(other) is type(self):
            return self.kind == other.kind
        return NotImplemented

    def __hash__(self):
        return hash((type(self), self.kind))

    def __repr__(self):
        return f"{type(self).__name__}({self.kind})"


class DigitalError(MockError):
    """Error raised by a mocked digital pin."""


class I2cError(MockError):
    """Error raised by a mocked I2C bus."""


class SpiError(MockError):
    """Error raised by a mocked SPI bus."""


class SerialError(MockError):
    """Error raised by a mocked serial port."""


class IoError(MockError):
    """Error raised by a mocked byte-stream IO device."""


class CanError(MockError):
    """Error raised by a mocked CAN controller."""


class PwmError(MockError):
    """Error raised by a mocked PWM channel."""


class AdcError(MockError):
    """Error raised by a mocked ADC."""
