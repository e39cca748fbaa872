"""
Serial Mock
===========
Mock word-oriented serial port (UART).

A multi-word transaction such as read_many([1, 2, 3]) is expanded into one
queue entry per word when loaded, because the real interface moves one word
per call. Errors are attached to the last word of the transaction.

Usage:
    from halmock.serial import MockSerial, SerialTransaction

    serial = MockSerial([
        SerialTransaction.read(0x0A),
        SerialTransaction.read_many(b"xyz"),
        SerialTransaction.write(0x0A),
        SerialTransaction.write_many(b"abc"),
        SerialTransaction.flush(),
        SerialTransaction.read_error(SerialErrorKind.OVERRUN),
    ])

    assert serial.read() == 0x0A
    assert [serial.read() for _ in range(3)] == list(b"xyz")
    serial.write(0x0A)
    serial.write_all(b"abc")
    serial.flush()
    with pytest.raises(SerialError):
        serial.read()

    serial.done()

Module: halmock.serial
Version: 1.0.0
"""

from dataclasses import dataclass, replace
from enum import Enum

from halmock.common import Generic, Transaction, expect_equal, expect_mode, resolve
from halmock.core.errors import SerialError
from halmock.core.types import PeripheralKind, SerialErrorKind
from halmock.utils.validation import validate_words


class SerialMode(Enum):
    """Serial transaction kinds."""
    READ = "read"
    WRITE = "write"
    FLUSH = "flush"


@dataclass(frozen=True)
class SerialTransaction(Transaction):
    """
    Serial transaction.

    READ carries the words to report in response, WRITE the words the
    driver must send in expected. Both are non-empty tuples of ints, since
    each word becomes one queue item.
    """

    error_class = SerialError

    @classmethod
    def read(cls, word):
        """Expect a read of one word; report word."""
        return cls.read_many([word])

    @classmethod
    def read_many(cls, words):
        """Expect consecutive reads; report words one per call."""
        return cls(
            SerialMode.READ,
            response=validate_words(words, 8, "read words", allow_empty=False),
        )

    @classmethod
    def read_error(cls, error):
        """Expect a read that fails with error."""
        return cls(SerialMode.READ, response=(0,)).with_error(error)

    @classmethod
    def write(cls, word):
        """Expect a write of one word."""
        return cls.write_many([word])

    @classmethod
    def write_many(cls, words):
        """Expect consecutive writes of words."""
        return cls(
            SerialMode.WRITE,
            expected=validate_words(words, 8, "write words", allow_empty=False),
        )

    @classmethod
    def write_error(cls, word, error):
        """Expect a write of word that fails with error."""
        return cls.write(word).with_error(error)

    @classmethod
    def flush(cls):
        """Expect a flush."""
        return cls(SerialMode.FLUSH)

    @classmethod
    def flush_error(cls, error):
        """Expect a flush that fails with error."""
        return cls.flush().with_error(error)


class MockSerial(Generic):
    """
    Mock serial port.

    read() and write() move a single word; write_all() is the blocking
    multi-word write and retries words rejected with WOULD_BLOCK.
    """

    peripheral = "serial"
    transaction_type = SerialTransaction
    kind = PeripheralKind.SERIAL

    @classmethod
    def _expand(cls, transaction):
        if transaction.mode is SerialMode.READ:
            words, field = transaction.response, "response"
        elif transaction.mode is SerialMode.WRITE:
            words, field = transaction.expected, "expected"
        else:
            return (transaction,)

        items = []
        last = len(words) - 1
        for index, word in enumerate(words):
            item = replace(transaction, **{field: (word,)})
            if index != last:
                item = replace(item, error=None)
            items.append(item)
        return tuple(items)

    def read(self):
        """
        Read a single word.

        Returns:
            int: The queued word
        """
        transaction = self._next("read")
        expect_mode(transaction, SerialMode.READ, self._operation("read"))
        resolve(transaction)
        return transaction.response[0]

    def write(self, word):
        """Write a single word."""
        operation = self._operation("write")
        transaction = self._next("write")
        expect_mode(transaction, SerialMode.WRITE, operation)
        expect_equal(transaction.expected[0], word, operation)
        resolve(transaction)

    def flush(self):
        """Ensure all written words have left the port."""
        transaction = self._next("flush")
        expect_mode(transaction, SerialMode.FLUSH, self._operation("flush"))
        resolve(transaction)

    def write_all(self, words):
        """
        Blocking write of every word in words.

        Raises:
            SerialError: For any injected error other than WOULD_BLOCK
        """
        for word in words:
            while True:
                try:
                    self.write(word)
                except SerialError as e:
                    if e.kind is SerialErrorKind.WOULD_BLOCK:
                        continue
                    raise
                break
