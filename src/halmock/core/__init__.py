"""
Core Module
===========
Core type definitions, constants and errors for halmock.

Exports:
    Types:
        - PeripheralKind, PinState, Edge
        - Error kinds: DigitalErrorKind, I2cErrorKind, SpiErrorKind,
          SerialErrorKind, IoErrorKind, CanErrorKind, MockErrorKind

    Errors:
        - ExpectationError and its fatal subclasses
        - MockError and the injectable per-peripheral subclasses
        - TransactionError

Module: halmock.core
Version: 1.0.0
"""

from halmock.core.types import (
    PeripheralKind,
    PinState,
    Edge,
    DigitalErrorKind,
    NoAcknowledgeSource,
    I2cErrorKind,
    SpiErrorKind,
    SerialErrorKind,
    IoErrorKind,
    CanErrorKind,
    MockErrorKind,
)

from halmock.core.errors import (
    # Fatal
    ExpectationError,
    StarvationError,
    ModeMismatchError,
    DataMismatchError,
    UnsatisfiedExpectationsError,
    DoneCallError,
    MissingDoneError,
    PeripheralKindError,
    PeripheralIdentityError,

    # Construction
    TransactionError,

    # Injected
    MockError,
    DigitalError,
    I2cError,
    SpiError,
    SerialError,
    IoError,
    CanError,
    PwmError,
    AdcError,
)

from halmock.core.constants import VERSION

__all__ = [
    # Types
    "PeripheralKind",
    "PinState",
    "Edge",
    "DigitalErrorKind",
    "NoAcknowledgeSource",
    "I2cErrorKind",
    "SpiErrorKind",
    "SerialErrorKind",
    "IoErrorKind",
    "CanErrorKind",
    "MockErrorKind",

    # Errors - Fatal
    "ExpectationError",
    "StarvationError",
    "ModeMismatchError",
    "DataMismatchError",
    "UnsatisfiedExpectationsError",
    "DoneCallError",
    "MissingDoneError",
    "PeripheralKindError",
    "PeripheralIdentityError",

    # Errors - Construction
    "TransactionError",

    # Errors - Injected
    "MockError",
    "DigitalError",
    "I2cError",
    "SpiError",
    "SerialError",
    "IoError",
    "CanError",
    "PwmError",
    "AdcError",

    "VERSION",
]

__version__ = VERSION
