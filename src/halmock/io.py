"""
Byte Stream IO Mock
===================
Mock byte-oriented IO device: a stream that can be written, read, flushed,
sought, polled for readiness and read through an internal buffer.

Usage:
    import os
    from halmock.io import IoTransaction, MockIo

    io = MockIo([
        IoTransaction.write(b"AT\\r\\n"),
        IoTransaction.flush(),
        IoTransaction.read_ready(True),
        IoTransaction.read(b"OK"),
        IoTransaction.seek(0, os.SEEK_SET, 0),
    ])

    assert io.write(b"AT\\r\\n") == 4
    io.flush()
    assert io.read_ready()
    buffer = bytearray(8)
    assert io.read(buffer) == 2
    assert io.seek(0) == 0

    io.done()

Module: halmock.io
Version: 1.0.0
"""

import os
from dataclasses import dataclass
from enum import Enum

from halmock.common import Generic, Transaction, expect_equal, expect_mode, resolve
from halmock.core.errors import DataMismatchError, IoError, TransactionError
from halmock.core.types import PeripheralKind
from halmock.utils.validation import validate_bytes, validate_range


class IoMode(Enum):
    """IO transaction kinds."""
    WRITE = "write"
    READ = "read"
    FLUSH = "flush"
    SEEK = "seek"
    WRITE_READY = "write_ready"
    READ_READY = "read_ready"
    FILL_BUF = "fill_buf"
    CONSUME = "consume"


_WHENCE = (os.SEEK_SET, os.SEEK_CUR, os.SEEK_END)


@dataclass(frozen=True)
class IoTransaction(Transaction):
    """IO transaction."""

    error_class = IoError
    errorless_modes = frozenset({IoMode.CONSUME})

    @classmethod
    def write(cls, expected):
        """Expect expected to be written in one call."""
        return cls(IoMode.WRITE, expected=validate_bytes(expected, "write data"))

    @classmethod
    def read(cls, response):
        """Expect a read; copy response into the driver's buffer."""
        return cls(IoMode.READ, response=validate_bytes(response, "read response"))

    @classmethod
    def flush(cls):
        return cls(IoMode.FLUSH)

    @classmethod
    def seek(cls, offset, whence, position):
        """
        Expect seek(offset, whence); report the new absolute position.

        Args:
            offset: Expected offset
            whence: os.SEEK_SET, os.SEEK_CUR or os.SEEK_END
            position: Position returned to the driver
        """
        if whence not in _WHENCE:
            raise TransactionError(f"invalid whence: {whence}")
        return cls(
            IoMode.SEEK,
            expected=(offset, whence),
            response=validate_range(position, 0, 2**64 - 1, "seek position"),
        )

    @classmethod
    def write_ready(cls, ready):
        return cls(IoMode.WRITE_READY, response=bool(ready))

    @classmethod
    def read_ready(cls, ready):
        return cls(IoMode.READ_READY, response=bool(ready))

    @classmethod
    def fill_buf(cls, response):
        """Expect fill_buf(); return response as the buffered data."""
        return cls(IoMode.FILL_BUF, response=validate_bytes(response, "buffer data"))

    @classmethod
    def consume(cls, amount):
        """Expect consume(amount)."""
        return cls(IoMode.CONSUME, expected=validate_range(amount, 0, 2**64 - 1, "consume amount"))


class MockIo(Generic):
    """Mock byte stream."""

    peripheral = "io"
    transaction_type = IoTransaction
    kind = PeripheralKind.IO

    def write(self, data):
        """
        Write data.

        Returns:
            int: Number of bytes written (always all of them)
        """
        operation = self._operation("write")
        transaction = self._next("write")
        expect_mode(transaction, IoMode.WRITE, operation)
        expect_equal(transaction.expected, bytes(data), operation)
        return resolve(transaction, len(data))

    def read(self, buffer):
        """
        Read into buffer.

        Returns:
            int: Number of bytes copied into buffer

        Raises:
            DataMismatchError: If the queued response does not fit in buffer
        """
        operation = self._operation("read")
        transaction = self._next("read")
        expect_mode(transaction, IoMode.READ, operation)
        size = len(transaction.response)
        if size > len(buffer):
            raise DataMismatchError(operation, size, len(buffer), "response length")
        resolve(transaction)
        buffer[:size] = transaction.response
        return size

    def flush(self):
        transaction = self._next("flush")
        expect_mode(transaction, IoMode.FLUSH, self._operation("flush"))
        resolve(transaction)

    def seek(self, offset, whence=os.SEEK_SET):
        """
        Move the stream position.

        Returns:
            int: The new absolute position
        """
        operation = self._operation("seek")
        transaction = self._next("seek")
        expect_mode(transaction, IoMode.SEEK, operation)
        expect_equal(transaction.expected, (offset, whence), operation, "position")
        return resolve(transaction, transaction.response)

    def write_ready(self):
        """Whether a write would complete without blocking."""
        transaction = self._next("write_ready")
        expect_mode(transaction, IoMode.WRITE_READY, self._operation("write_ready"))
        return resolve(transaction, transaction.response)

    def read_ready(self):
        """Whether a read would complete without blocking."""
        transaction = self._next("read_ready")
        expect_mode(transaction, IoMode.READ_READY, self._operation("read_ready"))
        return resolve(transaction, transaction.response)

    def fill_buf(self):
        """
        Return the contents of the internal buffer, filling it if empty.

        Returns:
            bytes: The queued buffer contents
        """
        transaction = self._next("fill_buf")
        expect_mode(transaction, IoMode.FILL_BUF, self._operation("fill_buf"))
        return resolve(transaction, transaction.response)

    def consume(self, amount):
        """Mark amount bytes of the buffer returned by fill_buf() as used."""
        operation = self._operation("consume")
        transaction = self._next("consume")
        expect_mode(transaction, IoMode.CONSUME, operation)
        expect_equal(transaction.expected, amount, operation, "amount")
