"""
Expectation Engine
==================
Shared expectation queue and the handle base class every mock peripheral
builds on.

A mock is a handle onto a SharedExpectations record: an ordered queue of
transactions plus the completion detector guarding it. Cloning a handle
gives a second handle onto the same record, so a test can move one clone
into the driver under test and keep another to call done() on.

Every mocked operation follows the same matching protocol:

    1. pop the next expectation (StarvationError if there is none)
    2. check its mode is the operation performed (ModeMismatchError)
    3. check its data against the call arguments (DataMismatchError)
    4. raise the injected error if one was queued, else return the response

Classes:
    Transaction: Base value type for one expected interaction
    SharedExpectations: Lock-guarded queue + completion detector
    Generic: Handle base class for all mock peripherals

Functions:
    expect_mode, expect_equal, resolve: Matching protocol steps

Usage:
    i2c = MockI2C([I2cTransaction.write(0xAA, [1, 2])])
    driver = Driver(i2c.clone())
    driver.run()
    i2c.done()

Module: halmock.common
Version: 1.0.0
"""

import copy
import dataclasses
import threading
import warnings
from collections import deque
from dataclasses import dataclass
from typing import Any, ClassVar, FrozenSet, Optional

from halmock.config import get_config
from halmock.core.errors import (
    DataMismatchError,
    MockError,
    ModeMismatchError,
    StarvationError,
    TransactionError,
    UnsatisfiedExpectationsError,
)
from halmock.state import CompletionDetector
from halmock.utils.log import get_logger

logger = get_logger(__name__)


# ============================================================================
# Transaction
# ============================================================================

@dataclass(frozen=True)
class Transaction:
    """
    One expected interaction with a peripheral.

    Subclasses add the peripheral specific fields (address, channel, ...)
    and classmethod builders. Instances are immutable; with_error() returns
    a modified copy.

    Attributes:
        mode: Operation discriminator (an Enum member of the subclass)
        expected: Data the driver is expected to send
        response: Data handed back to the driver
        error: Exception raised instead of returning the response
    """
    mode: Any
    expected: Any = None
    response: Any = None
    error: Optional[BaseException] = None

    error_class: ClassVar[type] = MockError
    errorless_modes: ClassVar[FrozenSet[Any]] = frozenset()

    def supports_errors(self):
        """Whether the real operation for this mode can report an error."""
        return self.mode not in self.errorless_modes

    def with_error(self, error):
        """
        Add an error return to a transaction.

        This is used to mock failure behaviours. The mode is still checked
        before the error is raised.

        Args:
            error: Error kind enum member (wrapped into error_class) or an
                exception instance raised as-is

        Returns:
            A copy of this transaction carrying the error

        Raises:
            TransactionError: If the real operation cannot report errors
        """
        if not self.supports_errors():
            raise TransactionError(
                f"{type(self).__name__} mode {self.mode.name} cannot carry an error: "
                "the real operation does not report errors"
            )
        if not isinstance(error, BaseException):
            error = self.error_class(error)
        return dataclasses.replace(self, error=error)


# ============================================================================
# Matching Protocol
# ============================================================================

def expect_mode(transaction, mode, operation):
    """
    Assert the popped transaction is for the operation performed.

    Raises:
        ModeMismatchError: If the modes differ
    """
    if transaction.mode != mode:
        raise ModeMismatchError(operation, transaction.mode, mode)


def expect_equal(expected, actual, operation, label="data"):
    """
    Assert the driver supplied the expected value.

    Raises:
        DataMismatchError: If the values differ
    """
    if expected != actual:
        raise DataMismatchError(operation, expected, actual, label)


def resolve(transaction, result=None):
    """
    Finish an operation: raise the injected error or return the result.

    Args:
        transaction: The matched transaction
        result: Value returned when no error was injected

    Returns:
        result
    """
    if transaction.error is not None:
        raise transaction.error
    return result


# ============================================================================
# Shared State
# ============================================================================

class SharedExpectations:
    """
    Ordered expectation queue shared by every handle cloned from one mock.

    All operations hold the lock only while touching the queue and the
    detector, and never perform I/O while holding it. The last handle
    releasing the record triggers the completion detector.

    Attributes:
        detector: CompletionDetector for the current load cycle
    """

    def __init__(self, items=(), description="mock"):
        self.detector = CompletionDetector(description)
        self.description = description
        self._lock = threading.Lock()
        self._items = deque(items)
        self.detector.load()
        logger.debug("%s created with %d expectations", description, len(self._items))

    def replace(self, items):
        """
        Replace the expectations.

        The current expectations are implicitly checked first, so a replace
        never silently discards expectations the driver did not consume.
        A failed replace leaves the old expectations queued and still owes
        a done().

        Raises:
            UnsatisfiedExpectationsError: If expectations remain
        """
        items = list(items)
        with self._lock:
            remaining = list(self._items)
            if not remaining:
                self.detector.check(explicit=False)
                self._items = deque(items)
                self.detector.load()

        if remaining:
            raise UnsatisfiedExpectationsError(remaining)
        logger.debug("%s loaded %d expectations", self.description, len(items))

    def extend(self, items):
        """Append expectations behind the ones already queued."""
        items = list(items)
        with self._lock:
            self._items.extend(items)
            self.detector.load()
            total = len(self._items)
        logger.debug(
            "%s appended %d expectations (%d queued)", self.description, len(items), total
        )

    def pop_next(self):
        """
        Remove and return the oldest expectation.

        Returns:
            Tuple of (item or None if drained, number of items left)
        """
        with self._lock:
            if not self._items:
                return None, 0
            item = self._items.popleft()
            return item, len(self._items)

    def check_complete(self):
        """
        Assert every expectation was consumed.

        Raises:
            DoneCallError: If already checked since the last load
            UnsatisfiedExpectationsError: If expectations remain
        """
        with self._lock:
            self.detector.check()
            remaining = list(self._items)

        if remaining:
            raise UnsatisfiedExpectationsError(remaining)
        logger.debug("%s verified complete", self.description)

    def abandon(self):
        """Drop the completion obligation because the test is already failing."""
        with self._lock:
            self.detector.abandon()

    def remaining(self):
        """Snapshot of the expectations not yet consumed."""
        with self._lock:
            return list(self._items)

    def __len__(self):
        with self._lock:
            return len(self._items)

    def __del__(self):
        # Best effort: finalizers run whenever the last reference goes, often
        # long after the test failed. Use a with block or the hal_mocks
        # fixture for a deterministic check.
        detector = getattr(self, "detector", None)
        if detector is None or not detector.is_pending():
            return
        if get_config('verify_on_release'):
            detector.release()


# ============================================================================
# Handle Base Class
# ============================================================================

class Generic:
    """
    Generic mock handle.

    This supports declaring and evaluating expectations to allow
    automated testing of drivers. Mismatches between expectations and calls
    raise ExpectationError subclasses at the call site.

    Subclasses set:
        peripheral: Prefix of operation names in diagnostics ("i2c")
        transaction_type: Accepted Transaction subclass
        kind: PeripheralKind used when multiplexed by an Engine

    A handle is either standalone (owns its SharedExpectations) or bound to
    an Engine, in which case it draws from the engine's shared queue and
    only accepts items tagged with its own kind and identity.
    """

    peripheral = "mock"
    transaction_type = Transaction
    kind = None

    def __init__(self, expectations=(), *, _shared=None, _binding=None):
        """
        Initialize a mock.

        Args:
            expectations: Transactions expected, in order
        """
        self._binding = _binding
        if _shared is None:
            _shared = SharedExpectations(
                self._prepare(expectations), description=type(self).__name__
            )
        elif expectations:
            _shared.extend(self._prepare(expectations))
        self._shared = _shared

    # ------------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------------

    @classmethod
    def _expand(cls, transaction):
        """Queue items a transaction turns into. One per transaction by default."""
        return (transaction,)

    def _prepare(self, expectations):
        items = []
        for transaction in expectations:
            if not isinstance(transaction, self.transaction_type):
                raise TransactionError(
                    f"{type(self).__name__} expects {self.transaction_type.__name__} "
                    f"items, got {type(transaction).__name__}"
                )
            for item in self._expand(transaction):
                items.append(self._binding.tag(item) if self._binding else item)
        return items

    def update_expectations(self, expectations):
        """
        Set expectations on the interface.

        Any existing expectations are checked first; a non-empty queue fails
        with UnsatisfiedExpectationsError. Afterwards the new expectations
        are installed and a new completion check is owed.

        For a handle bound to an Engine this replaces the engine's whole
        shared stream.

        Args:
            expectations: Transactions expected, in order
        """
        self._shared.replace(self._prepare(expectations))

    def expect(self, expectations):
        """
        Deprecated alias of update_expectations().

        On a handle bound to an Engine this instead appends one transaction
        (or a list of them) for this handle to the shared stream.
        """
        if self._binding is not None:
            if isinstance(expectations, Transaction):
                expectations = [expectations]
            self._shared.extend(self._prepare(expectations))
            return
        warnings.warn(
            "expect() was renamed to update_expectations()",
            DeprecationWarning,
            stacklevel=2,
        )
        logger.warning("%s.expect() is deprecated", type(self).__name__)
        self.update_expectations(expectations)

    def add_expectations(self, *transactions):
        """
        Append expectations behind the ones already queued.

        Args:
            *transactions: Transactions expected after the queued ones
        """
        self._shared.extend(self._prepare(transactions))

    # ------------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------------

    def done(self):
        """
        Assert that all expectations on this mock have been met.

        Raises:
            DoneCallError: If done() was already called since the last load
            UnsatisfiedExpectationsError: If expectations remain
        """
        self._shared.check_complete()

    def check_complete(self):
        """Alias of done()."""
        self.done()

    def remaining(self):
        """Expectations not yet consumed, in order."""
        return self._shared.remaining()

    def is_checked(self):
        """Whether the completion check for the current load was performed."""
        return self._shared.detector.is_checked()

    # ------------------------------------------------------------------------
    # Sharing
    # ------------------------------------------------------------------------

    def clone(self):
        """
        Return another handle onto the same expectations.

        Both handles share the queue and the completion detector.
        """
        return copy.copy(self)

    def shares_state_with(self, other):
        """Whether other draws from the same expectation queue."""
        return isinstance(other, Generic) and other._shared is self._shared

    @property
    def identity(self):
        """Handle identity when bound to an Engine, else None."""
        return self._binding.identity if self._binding else None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.done()
        else:
            self._shared.abandon()
        return False

    def __repr__(self):
        identity = f" id={self.identity!r}" if self._binding else ""
        return f"<{type(self).__name__}{identity} pending={len(self._shared)}>"

    # ------------------------------------------------------------------------
    # Consumption
    # ------------------------------------------------------------------------

    def _operation(self, name):
        return f"{self.peripheral}::{name}"

    def _next(self, name):
        """
        Pop the next expectation for operation name.

        Args:
            name: Operation name without the peripheral prefix

        Returns:
            The next transaction (unwrapped when bound to an Engine)

        Raises:
            StarvationError: If no expectation is left
            PeripheralKindError, PeripheralIdentityError: If bound and the
                item belongs to another handle
        """
        operation = self._operation(name)
        item, left = self._shared.pop_next()
        if item is None:
            raise StarvationError(operation)
        if self._binding is not None:
            item = self._binding.unwrap(item, operation)
        logger.debug("%s consumed %r (%d remaining)", operation, item, left)
        return item
