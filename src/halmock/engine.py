"""
Multi-Peripheral Engine
=======================
One ordered expectation stream shared by many peripheral handles.

Independent mocks can only check the order of calls on one peripheral. The
Engine hands out handles of any kind that all draw from a single queue, so
a test can require "pin high, then SPI write, then delay" across devices.

Every queued item is an Expectation: a transaction tagged with the kind and
identity of the handle expected to consume it. When a handle pops an item
it checks, in order:

    1. the item's kind matches the handle's kind   (PeripheralKindError)
    2. the item's identity matches the handle's    (PeripheralIdentityError)
    3. the usual mode/data checks of the adapter   (ModeMismatchError, ...)

An Expectation without identity matches any handle of its kind.

Usage:
    from halmock.engine import Engine
    from halmock.digital import PinTransaction
    from halmock.spi import SpiTransaction
    from halmock.core.types import PinState

    with Engine() as engine:
        cs = engine.pin()
        spi = engine.spi()
        engine.expect(cs, PinTransaction.set(PinState.LOW))
        engine.expect(spi, SpiTransaction.write_vec([0x9F]))
        engine.expect(cs, PinTransaction.set(PinState.HIGH))

        driver = FlashDriver(spi.clone(), cs.clone())
        driver.read_id()
    # leaving the block calls engine.done()

Module: halmock.engine
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Any, Hashable, Optional

from halmock.adc import MockAdc
from halmock.can import MockCan
from halmock.common import Generic, SharedExpectations, Transaction
from halmock.core.errors import PeripheralIdentityError, PeripheralKindError, TransactionError
from halmock.core.types import PeripheralKind
from halmock.delay import AsyncMockDelay, MockDelay
from halmock.digital import MockPin
from halmock.i2c import MockI2C
from halmock.io import MockIo
from halmock.pwm import MockPwm
from halmock.serial import MockSerial
from halmock.spi import MockSPI
from halmock.utils.log import get_logger

logger = get_logger(__name__)


# Handle class spawned for each kind unless the caller picks another one
MOCK_CLASSES = {
    PeripheralKind.DIGITAL: MockPin,
    PeripheralKind.I2C: MockI2C,
    PeripheralKind.SPI: MockSPI,
    PeripheralKind.DELAY: MockDelay,
    PeripheralKind.PWM: MockPwm,
    PeripheralKind.SERIAL: MockSerial,
    PeripheralKind.IO: MockIo,
    PeripheralKind.CAN: MockCan,
    PeripheralKind.ADC: MockAdc,
}


# ============================================================================
# Tagged Items
# ============================================================================

@dataclass(frozen=True)
class Expectation:
    """
    A transaction tagged with the handle expected to consume it.

    Attributes:
        kind: PeripheralKind of the consuming handle
        transaction: The adapter transaction
        identity: Identity of the consuming handle, or None for any handle
            of that kind
    """
    kind: PeripheralKind
    transaction: Transaction
    identity: Optional[Hashable] = None

    def __repr__(self):
        owner = "*" if self.identity is None else repr(self.identity)
        return f"Expectation({self.kind}:{owner} {self.transaction!r})"


@dataclass(frozen=True)
class Binding:
    """Kind and identity of a handle spawned by an Engine."""
    kind: PeripheralKind
    identity: Any

    def tag(self, transaction):
        """Wrap transaction into an Expectation owned by this handle."""
        return Expectation(self.kind, transaction, self.identity)

    def unwrap(self, item, operation):
        """
        Check a popped item belongs to this handle and return its transaction.

        Raises:
            PeripheralKindError: If the item is for another kind of peripheral
            PeripheralIdentityError: If the item is for another handle
        """
        if item.kind != self.kind:
            raise PeripheralKindError(operation, item.kind, self.kind)
        if item.identity is not None and item.identity != self.identity:
            raise PeripheralIdentityError(operation, item.identity, self.identity)
        return item.transaction


# ============================================================================
# Engine
# ============================================================================

class Engine:
    """
    Multiplexer handing out handles over one shared expectation queue.

    The engine and all its handles share one completion detector: done()
    through the engine or through any handle checks the whole stream.

    Attributes:
        handles: Mapping of identity to PeripheralKind for spawned handles
    """

    def __init__(self, expectations=()):
        """
        Initialize an engine.

        Args:
            expectations: Expectation items, in order. (handle, transaction)
                pairs need spawned handles and are accepted by
                update_expectations() and add_expectations() instead.
        """
        self.handles = {}
        self._next_id = 0
        self._shared = SharedExpectations(description="Engine")
        if expectations:
            self._shared.extend(self._prepare(expectations))

    # ------------------------------------------------------------------------
    # Handles
    # ------------------------------------------------------------------------

    def spawn_handle(self, kind, identity=None, mock_class=None):
        """
        Create a handle of kind bound to this engine.

        Args:
            kind: PeripheralKind of the handle
            identity: Hashable identity; defaults to the next free integer
            mock_class: Generic subclass to instantiate (default per kind)

        Returns:
            The new handle

        Raises:
            ValueError: If identity is already taken or mock_class does not
                implement kind
        """
        kind = PeripheralKind(kind)
        mock_class = mock_class or MOCK_CLASSES[kind]
        if mock_class.kind != kind:
            raise ValueError(f"{mock_class.__name__} does not implement {kind} peripherals")

        if identity is None:
            while self._next_id in self.handles:
                self._next_id += 1
            identity = self._next_id
            self._next_id += 1
        elif identity in self.handles:
            raise ValueError(f"a handle with identity {identity!r} already exists")

        self.handles[identity] = kind
        logger.debug("Engine spawned %s handle %r", kind, identity)
        return mock_class(_shared=self._shared, _binding=Binding(kind, identity))

    def pin(self, identity=None):
        return self.spawn_handle(PeripheralKind.DIGITAL, identity)

    def i2c(self, identity=None):
        return self.spawn_handle(PeripheralKind.I2C, identity)

    def spi(self, identity=None):
        return self.spawn_handle(PeripheralKind.SPI, identity)

    def delay(self, identity=None):
        return self.spawn_handle(PeripheralKind.DELAY, identity)

    def async_delay(self, identity=None):
        return self.spawn_handle(PeripheralKind.DELAY, identity, AsyncMockDelay)

    def pwm(self, identity=None):
        return self.spawn_handle(PeripheralKind.PWM, identity)

    def serial(self, identity=None):
        return self.spawn_handle(PeripheralKind.SERIAL, identity)

    def io(self, identity=None):
        return self.spawn_handle(PeripheralKind.IO, identity)

    def can(self, identity=None):
        return self.spawn_handle(PeripheralKind.CAN, identity)

    def adc(self, identity=None):
        return self.spawn_handle(PeripheralKind.ADC, identity)

    # ------------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------------

    def _prepare(self, items):
        prepared = []
        for item in items:
            if isinstance(item, Expectation):
                prepared.extend(self._prepare_tagged(item))
            elif isinstance(item, tuple) and len(item) == 2:
                handle, transaction = item
                self._check_handle(handle)
                prepared.extend(handle._prepare([transaction]))
            else:
                raise TransactionError(
                    "Engine expects Expectation items or (handle, transaction) "
                    f"pairs, got {type(item).__name__}"
                )
        return prepared

    def _prepare_tagged(self, item):
        mock_class = MOCK_CLASSES[PeripheralKind(item.kind)]
        if not isinstance(item.transaction, mock_class.transaction_type):
            raise TransactionError(
                f"{item.kind} expectations need {mock_class.transaction_type.__name__} "
                f"items, got {type(item.transaction).__name__}"
            )
        return [
            Expectation(item.kind, transaction, item.identity)
            for transaction in mock_class._expand(item.transaction)
        ]

    def _check_handle(self, handle):
        if not isinstance(handle, Generic) or handle._shared is not self._shared:
            raise TransactionError(f"{handle!r} was not spawned by this engine")

    def expect(self, handle, transaction):
        """
        Append one transaction for handle to the shared stream.

        Args:
            handle: A handle spawned by this engine
            transaction: Transaction of the handle's kind
        """
        self._check_handle(handle)
        self._shared.extend(handle._prepare([transaction]))

    def add_expectations(self, *items):
        """Append Expectation items or (handle, transaction) pairs."""
        self._shared.extend(self._prepare(items))

    def update_expectations(self, items):
        """
        Replace the shared stream.

        Residual expectations are checked first, exactly like the
        update_expectations() of a standalone mock.

        Args:
            items: Expectation items or (handle, transaction) pairs, in order
        """
        self._shared.replace(self._prepare(items))

    # ------------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------------

    def done(self):
        """
        Assert the whole shared stream was consumed.

        Raises:
            DoneCallError: If already checked since the last load
            UnsatisfiedExpectationsError: If expectations remain
        """
        self._shared.check_complete()

    def check_complete(self):
        """Alias of done()."""
        self.done()

    def remaining(self):
        """Expectation items not yet consumed, in order."""
        return self._shared.remaining()

    def is_checked(self):
        return self._shared.detector.is_checked()

    def __len__(self):
        return len(self._shared)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.done()
        else:
            self._shared.abandon()
        return False

    def __repr__(self):
        return f"<Engine handles={len(self.handles)} pending={len(self._shared)}>"
