"""
I2C Mock
========
Mock I2C bus.

The mock provides the embedded-hal style operations (read, write,
write_read, transaction) and the CircuitPython busio.I2C names (writeto,
readfrom_into, writeto_then_readfrom, try_lock, unlock) so drivers written
against either surface can be tested.

Usage:
    from halmock.i2c import MockI2C, I2cTransaction

    i2c = MockI2C([
        I2cTransaction.write(0xAA, [1, 2]),
        I2cTransaction.read(0xBB, [3, 4]),
    ])

    i2c.write(0xAA, bytes([1, 2]))
    assert i2c.read(0xBB, 2) == bytes([3, 4])

    # Injected errors are raised as I2cError
    i2c.add_expectations(
        I2cTransaction.write(0xAA, [5]).with_error(I2cErrorKind.OTHER)
    )
    with pytest.raises(I2cError):
        i2c.write(0xAA, bytes([5]))

    i2c.done()

Module: halmock.i2c
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum

from halmock.common import Generic, Transaction, expect_equal, expect_mode, resolve
from halmock.core.errors import I2cError
from halmock.core.types import PeripheralKind
from halmock.utils.validation import validate_bytes, validate_i2c_address


class I2cMode(Enum):
    """I2C transaction modes."""
    WRITE = "write"
    READ = "read"
    WRITE_READ = "write_read"
    TRANSACTION_START = "transaction_start"
    TRANSACTION_END = "transaction_end"


@dataclass(frozen=True)
class I2cTransaction(Transaction):
    """
    I2C transaction.

    Models an I2C read or write to one device address. When an error is
    attached to a read, the response is not copied to the driver's buffer.
    """
    address: int = 0

    error_class = I2cError
    errorless_modes = frozenset({I2cMode.TRANSACTION_START, I2cMode.TRANSACTION_END})

    @classmethod
    def write(cls, address, expected):
        """Create a Write transaction."""
        return cls(
            I2cMode.WRITE,
            expected=validate_bytes(expected, "write data"),
            response=b"",
            address=validate_i2c_address(address),
        )

    @classmethod
    def read(cls, address, response):
        """Create a Read transaction."""
        return cls(
            I2cMode.READ,
            expected=b"",
            response=validate_bytes(response, "read response"),
            address=validate_i2c_address(address),
        )

    @classmethod
    def write_read(cls, address, expected, response):
        """Create a WriteRead transaction."""
        return cls(
            I2cMode.WRITE_READ,
            expected=validate_bytes(expected, "write data"),
            response=validate_bytes(response, "read response"),
            address=validate_i2c_address(address),
        )

    @classmethod
    def transaction_start(cls, address):
        """Mark the start of a grouped transaction."""
        return cls(I2cMode.TRANSACTION_START, address=validate_i2c_address(address))

    @classmethod
    def transaction_end(cls, address):
        """Mark the end of a grouped transaction."""
        return cls(I2cMode.TRANSACTION_END, address=validate_i2c_address(address))


class I2cOperation:
    """
    One step of an I2C transaction() call.

    Usage:
        buffer = bytearray(2)
        i2c.transaction(0x5A, [I2cOperation.write(b"\\x01"), I2cOperation.read(buffer)])
    """

    READ = "read"
    WRITE = "write"

    def __init__(self, kind, buffer):
        self.kind = kind
        self.buffer = buffer

    @classmethod
    def read(cls, buffer):
        """Read into a writable buffer."""
        return cls(cls.READ, buffer)

    @classmethod
    def write(cls, data):
        """Write data."""
        return cls(cls.WRITE, data)

    def __repr__(self):
        return f"I2cOperation.{self.kind}({self.buffer!r})"


class MockI2C(Generic):
    """
    Mock I2C implementation.

    Each operation consumes exactly one expectation and checks, in order,
    the mode, the address, the written data and the read length.
    """

    peripheral = "i2c"
    transaction_type = I2cTransaction
    kind = PeripheralKind.I2C

    def __init__(self, expectations=(), **kwargs):
        super().__init__(expectations, **kwargs)
        self._locked = False

    # embedded-hal surface

    def read(self, address, length):
        """
        Read length bytes from address.

        Returns:
            bytes: The queued response
        """
        return self._read("read", address, length)

    def write(self, address, data):
        """Write data to address."""
        operation = self._operation("write")
        transaction = self._next("write")
        expect_mode(transaction, I2cMode.WRITE, operation)
        expect_equal(transaction.address, address, operation, "address")
        expect_equal(transaction.expected, bytes(data), operation)
        resolve(transaction)

    def write_read(self, address, data, length):
        """
        Write data then read length bytes in one bus transaction.

        Returns:
            bytes: The queued response
        """
        operation = self._operation("write_read")
        transaction = self._next("write_read")
        expect_mode(transaction, I2cMode.WRITE_READ, operation)
        expect_equal(transaction.address, address, operation, "address")
        expect_equal(transaction.expected, bytes(data), operation)
        expect_equal(len(transaction.response), length, operation, "response length")
        return resolve(transaction, transaction.response)

    def transaction(self, address, operations):
        """
        Execute a group of reads and writes framed by start/end markers.

        Expects TRANSACTION_START, one expectation per operation, then
        TRANSACTION_END. Read operations fill their buffers in place. An
        injected error inside the group propagates immediately and the
        remaining expectations of the group stay queued.
        """
        operation = self._operation("transaction")
        start = self._next("transaction")
        expect_mode(start, I2cMode.TRANSACTION_START, operation)
        expect_equal(start.address, address, operation, "address")

        for step in operations:
            if step.kind == I2cOperation.READ:
                step.buffer[:] = self.read(address, len(step.buffer))
            else:
                self.write(address, step.buffer)

        end = self._next("transaction")
        expect_mode(end, I2cMode.TRANSACTION_END, operation)
        expect_equal(end.address, address, operation, "address")

    def _read(self, name, address, length):
        operation = self._operation(name)
        transaction = self._next(name)
        expect_mode(transaction, I2cMode.READ, operation)
        expect_equal(transaction.address, address, operation, "address")
        expect_equal(len(transaction.response), length, operation, "response length")
        return resolve(transaction, transaction.response)

    # busio.I2C surface

    def try_lock(self):
        """Acquire the bus lock. Always succeeds on the mock."""
        self._locked = True
        return True

    def unlock(self):
        """Release the bus lock."""
        self._locked = False

    def locked(self):
        """Whether try_lock() was called without a matching unlock()."""
        return self._locked

    def writeto(self, address, buffer, *, start=0, end=None):
        """busio alias of write() over buffer[start:end]."""
        self.write(address, bytes(buffer[start:end]))

    def readfrom_into(self, address, buffer, *, start=0, end=None):
        """busio read filling buffer[start:end]."""
        end = len(buffer) if end is None else end
        buffer[start:end] = self._read("read", address, end - start)

    def writeto_then_readfrom(
        self, address, buffer_out, buffer_in, *, out_start=0, out_end=None, in_start=0, in_end=None
    ):
        """busio alias of write_read() filling buffer_in[in_start:in_end]."""
        in_end = len(buffer_in) if in_end is None else in_end
        buffer_in[in_start:in_end] = self.write_read(
            address, bytes(buffer_out[out_start:out_end]), in_end - in_start
        )
