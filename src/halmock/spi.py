"""
SPI Mock
========
Mock SPI bus and device.

Covers the bus level operations (read, write, transfer, transfer_in_place,
flush), the word level full-duplex operations (write_word, read_word), the
device level grouped transaction() and the CircuitPython busio.SPI names
(readinto, write_readinto).

Usage:
    from halmock.spi import MockSPI, SpiTransaction

    spi = MockSPI([
        SpiTransaction.write(0x09),
        SpiTransaction.read(0x0A),
        SpiTransaction.write_vec([1, 2]),
        SpiTransaction.transfer_in_place([3, 4], [5, 6]),
    ])

    spi.write_word(0x09)
    assert spi.read_word() == 0x0A
    spi.write(bytes([1, 2]))
    buffer = bytearray([3, 4])
    spi.transfer_in_place(buffer)
    assert buffer == bytearray([5, 6])

    spi.done()

Module: halmock.spi
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum

from halmock.common import Generic, Transaction, expect_equal, expect_mode, resolve
from halmock.core.errors import SpiError
from halmock.core.types import PeripheralKind
from halmock.utils.validation import validate_range, validate_words


class SpiMode(Enum):
    """SPI transaction modes."""
    WRITE = "write"
    TRANSFER = "transfer"
    TRANSFER_IN_PLACE = "transfer_in_place"
    READ = "read"
    FLUSH = "flush"
    TRANSACTION_START = "transaction_start"
    TRANSACTION_END = "transaction_end"
    DELAY = "delay"


@dataclass(frozen=True)
class SpiTransaction(Transaction):
    """
    SPI transaction.

    Words are stored as tuples of ints so 8 and 16 bit buses share one
    representation; word_bits only affects builder validation. For DELAY
    the expected field holds the delay in nanoseconds.
    """
    word_bits: int = 8

    error_class = SpiError
    errorless_modes = frozenset({
        SpiMode.TRANSACTION_START,
        SpiMode.TRANSACTION_END,
        SpiMode.DELAY,
    })

    @classmethod
    def write(cls, word, word_bits=8):
        """Create a single-word write transaction."""
        return cls.write_vec([word], word_bits)

    @classmethod
    def write_vec(cls, expected, word_bits=8):
        """Create a write transaction."""
        return cls(
            SpiMode.WRITE,
            expected=validate_words(expected, word_bits, "write data"),
            response=(),
            word_bits=word_bits,
        )

    @classmethod
    def read(cls, word, word_bits=8):
        """Create a single-word read transaction."""
        return cls.read_vec([word], word_bits)

    @classmethod
    def read_vec(cls, response, word_bits=8):
        """Create a read transaction."""
        return cls(
            SpiMode.READ,
            expected=(),
            response=validate_words(response, word_bits, "read response"),
            word_bits=word_bits,
        )

    @classmethod
    def transfer(cls, expected, response, word_bits=8):
        """Create a transfer transaction (separate write and read buffers)."""
        return cls(
            SpiMode.TRANSFER,
            expected=validate_words(expected, word_bits, "write data"),
            response=validate_words(response, word_bits, "read response"),
            word_bits=word_bits,
        )

    @classmethod
    def transfer_in_place(cls, expected, response, word_bits=8):
        """Create a transfer-in-place transaction (one buffer, overwritten)."""
        return cls(
            SpiMode.TRANSFER_IN_PLACE,
            expected=validate_words(expected, word_bits, "write data"),
            response=validate_words(response, word_bits, "read response"),
            word_bits=word_bits,
        )

    @classmethod
    def flush(cls):
        """Create a flush transaction."""
        return cls(SpiMode.FLUSH)

    @classmethod
    def transaction_start(cls):
        """Mark the start of a device transaction (chip select asserted)."""
        return cls(SpiMode.TRANSACTION_START)

    @classmethod
    def transaction_end(cls):
        """Mark the end of a device transaction (chip select released)."""
        return cls(SpiMode.TRANSACTION_END)

    @classmethod
    def delay(cls, ns):
        """Create an in-transaction delay of ns nanoseconds."""
        return cls(SpiMode.DELAY, expected=validate_range(ns, 0, 2**32 - 1, "delay"))


class SpiOperation:
    """One step of an SPI device transaction() call."""

    READ = "read"
    WRITE = "write"
    TRANSFER = "transfer"
    TRANSFER_IN_PLACE = "transfer_in_place"
    DELAY_NS = "delay_ns"

    def __init__(self, kind, buffer=None, write=None, ns=0):
        self.kind = kind
        self.buffer = buffer
        self.write_data = write
        self.ns = ns

    @classmethod
    def read(cls, buffer):
        return cls(cls.READ, buffer)

    @classmethod
    def write(cls, data):
        return cls(cls.WRITE, write=data)

    @classmethod
    def transfer(cls, read_buffer, data):
        return cls(cls.TRANSFER, read_buffer, write=data)

    @classmethod
    def transfer_in_place(cls, buffer):
        return cls(cls.TRANSFER_IN_PLACE, buffer)

    @classmethod
    def delay_ns(cls, ns):
        return cls(cls.DELAY_NS, ns=ns)


class MockSPI(Generic):
    """
    Mock SPI implementation.

    This supports declaring and checking expectations to allow
    automated testing of SPI based drivers. Mismatches between expected and
    real SPI transactions raise at the call site.
    """

    peripheral = "spi"
    transaction_type = SpiTransaction
    kind = PeripheralKind.SPI

    def __init__(self, expectations=(), **kwargs):
        super().__init__(expectations, **kwargs)
        self._locked = False

    # Bus

    def read(self, buffer):
        """Fill buffer with the queued read response."""
        operation = self._operation("read")
        transaction = self._next("read")
        expect_mode(transaction, SpiMode.READ, operation)
        expect_equal(len(transaction.response), len(buffer), operation, "response length")
        resolve(transaction)
        buffer[:] = transaction.response

    def write(self, words):
        """Write words to the bus."""
        operation = self._operation("write")
        transaction = self._next("write")
        expect_mode(transaction, SpiMode.WRITE, operation)
        expect_equal(transaction.expected, tuple(words), operation)
        resolve(transaction)

    def transfer(self, read_buffer, words):
        """Write words while reading into read_buffer."""
        operation = self._operation("transfer")
        transaction = self._next("transfer")
        expect_mode(transaction, SpiMode.TRANSFER, operation)
        expect_equal(transaction.expected, tuple(words), operation)
        expect_equal(len(transaction.response), len(read_buffer), operation, "response length")
        resolve(transaction)
        read_buffer[:] = transaction.response

    def transfer_in_place(self, buffer):
        """Write buffer and overwrite it with the words read back."""
        operation = self._operation("transfer_in_place")
        transaction = self._next("transfer_in_place")
        expect_mode(transaction, SpiMode.TRANSFER_IN_PLACE, operation)
        expect_equal(transaction.expected, tuple(buffer), operation)
        expect_equal(len(transaction.response), len(buffer), operation, "response length")
        resolve(transaction)
        buffer[:] = transaction.response

    def flush(self):
        """Wait for pending writes to complete."""
        transaction = self._next("flush")
        expect_mode(transaction, SpiMode.FLUSH, self._operation("flush"))
        resolve(transaction)

    # Full duplex words

    def write_word(self, word):
        """Send a single word."""
        operation = self._operation("write_word")
        transaction = self._next("write_word")
        expect_mode(transaction, SpiMode.WRITE, operation)
        expect_equal(transaction.expected, (word,), operation)
        resolve(transaction)

    def read_word(self):
        """Receive a single word."""
        operation = self._operation("read_word")
        transaction = self._next("read_word")
        expect_mode(transaction, SpiMode.READ, operation)
        expect_equal(len(transaction.response), 1, operation, "response length")
        return resolve(transaction, transaction.response[0])

    # Device

    def transaction(self, operations):
        """
        Execute a group of operations with chip select asserted.

        Expects TRANSACTION_START, one expectation per operation (DELAY for
        delay_ns steps), then TRANSACTION_END.
        """
        operation = self._operation("transaction")
        start = self._next("transaction")
        expect_mode(start, SpiMode.TRANSACTION_START, operation)

        for step in operations:
            if step.kind == SpiOperation.READ:
                self.read(step.buffer)
            elif step.kind == SpiOperation.WRITE:
                self.write(step.write_data)
            elif step.kind == SpiOperation.TRANSFER:
                self.transfer(step.buffer, step.write_data)
            elif step.kind == SpiOperation.TRANSFER_IN_PLACE:
                self.transfer_in_place(step.buffer)
            else:
                delay = self._next("delay")
                expect_mode(delay, SpiMode.DELAY, self._operation("delay"))
                expect_equal(delay.expected, step.ns, self._operation("delay"), "delay value")

        end = self._next("transaction")
        expect_mode(end, SpiMode.TRANSACTION_END, operation)

    # busio.SPI surface

    def try_lock(self):
        """Acquire the bus lock. Always succeeds on the mock."""
        self._locked = True
        return True

    def unlock(self):
        """Release the bus lock."""
        self._locked = False

    def configure(self, *, baudrate=100000, polarity=0, phase=0, bits=8):
        """Accept bus configuration; the mock does not check it."""

    def readinto(self, buffer, *, start=0, end=None, write_value=0):
        """busio read filling buffer[start:end]."""
        end = len(buffer) if end is None else end
        view = bytearray(end - start)
        self.read(view)
        buffer[start:end] = view

    def write_readinto(
        self, buffer_out, buffer_in, *, out_start=0, out_end=None, in_start=0, in_end=None
    ):
        """busio alias of transfer()."""
        in_end = len(buffer_in) if in_end is None else in_end
        view = bytearray(in_end - in_start)
        self.transfer(view, buffer_out[out_start:out_end])
        buffer_in[in_start:in_end] = view
