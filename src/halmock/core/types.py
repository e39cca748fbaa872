"""
Core Type Definitions
=====================
Type definitions shared by the expectation engine and every mock peripheral.

Types:
    - PeripheralKind: Peripheral families a multiplexed handle can belong to
    - PinState: Digital pin level (LOW/HIGH)
    - Edge: Digital pin edge used by the async wait operations
    - DigitalErrorKind, I2cErrorKind, SpiErrorKind, SerialErrorKind,
      IoErrorKind, CanErrorKind: Error kinds mirroring what the real
      peripheral APIs can report. Used with Transaction.with_error().
    - NoAcknowledgeSource: Which I2C phase was not acknowledged

Module: halmock.core.types
Version: 1.0.0
"""

from enum import Enum


class PeripheralKind(Enum):
    """
    Peripheral families known to the multiplexer.

    Every tagged expectation carries one of these so that a handle of the
    wrong family popping it fails with a "wrong peripheral type" error
    instead of a confusing shape mismatch.

    Usage:
        engine = Engine()
        pin = engine.spawn_handle(PeripheralKind.DIGITAL)
    """
    DIGITAL = "digital"
    I2C = "i2c"
    SPI = "spi"
    DELAY = "delay"
    PWM = "pwm"
    SERIAL = "serial"
    IO = "io"
    CAN = "can"
    ADC = "adc"

    def __str__(self):
        return self.value


class PinState(Enum):
    """
    Digital pin level.

    Usage:
        PinTransaction.set(PinState.HIGH)
        PinTransaction.get(PinState.LOW)
    """
    LOW = 0
    HIGH = 1

    @classmethod
    def from_bool(cls, value):
        """Convert a truthy level into a PinState."""
        return cls.HIGH if value else cls.LOW

    def __bool__(self):
        return self is PinState.HIGH

    def __invert__(self):
        return PinState.LOW if self is PinState.HIGH else PinState.HIGH


class Edge(Enum):
    """Digital pin edge for wait_for_*_edge expectations."""
    RISING = "rising"
    FALLING = "falling"
    ANY = "any"


# ============================================================================
# Error Kinds
# ============================================================================

class DigitalErrorKind(Enum):
    """Errors a digital pin can report."""
    OTHER = "other"


class NoAcknowledgeSource(Enum):
    """Phase of an I2C transfer that was not acknowledged."""
    ADDRESS = "address"
    DATA = "data"
    UNKNOWN = "unknown"


class I2cErrorKind(Enum):
    """
    Errors an I2C bus can report.

    NO_ACKNOWLEDGE_* variants carry the NoAcknowledgeSource of the real API
    folded into the member name to keep the enum flat.
    """
    BUS = "bus"
    ARBITRATION_LOSS = "arbitration_loss"
    NO_ACKNOWLEDGE_ADDRESS = "no_acknowledge_address"
    NO_ACKNOWLEDGE_DATA = "no_acknowledge_data"
    NO_ACKNOWLEDGE_UNKNOWN = "no_acknowledge_unknown"
    OVERRUN = "overrun"
    OTHER = "other"

    @classmethod
    def no_acknowledge(cls, source=NoAcknowledgeSource.UNKNOWN):
        """Build the NO_ACKNOWLEDGE_* member for a NoAcknowledgeSource."""
        return cls("no_acknowledge_" + source.value)


class SpiErrorKind(Enum):
    """Errors an SPI bus can report."""
    OVERRUN = "overrun"
    MODE_FAULT = "mode_fault"
    FRAME_FORMAT = "frame_format"
    CHIP_SELECT_FAULT = "chip_select_fault"
    OTHER = "other"


class SerialErrorKind(Enum):
    """
    Errors a serial port can report.

    WOULD_BLOCK models the non-blocking "try again" outcome of a word-level
    read or write so drivers polling a UART can be exercised.
    """
    WOULD_BLOCK = "would_block"
    OVERRUN = "overrun"
    FRAME_FORMAT = "frame_format"
    PARITY = "parity"
    NOISE = "noise"
    OTHER = "other"


class IoErrorKind(Enum):
    """Errors a byte-stream IO device can report."""
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    CONNECTION_REFUSED = "connection_refused"
    CONNECTION_RESET = "connection_reset"
    BROKEN_PIPE = "broken_pipe"
    INVALID_INPUT = "invalid_input"
    INVALID_DATA = "invalid_data"
    TIMED_OUT = "timed_out"
    INTERRUPTED = "interrupted"
    UNSUPPORTED = "unsupported"
    OUT_OF_MEMORY = "out_of_memory"
    OTHER = "other"


class CanErrorKind(Enum):
    """Errors a CAN controller can report."""
    OVERRUN = "overrun"
    BIT = "bit"
    STUFF = "stuff"
    CRC = "crc"
    FORM = "form"
    ACKNOWLEDGE = "acknowledge"
    OTHER = "other"


class MockErrorKind(Enum):
    """Generic error kinds for peripherals without their own taxonomy."""
    NO_DETAILS = "no_details"
    IO = "io"
