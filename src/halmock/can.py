"""
CAN Mock
========
Mock CAN controller exchanging python-can Message frames.

Frames are compared by arbitration id, id width, remote flag, DLC and
payload. Timestamps, channel and direction are ignored since a driver under
test has no control over them.

Usage:
    import can
    from halmock.can import CanTransaction, MockCan, frame

    bus = MockCan([
        CanTransaction.transmit(frame(0x123, [1, 2, 3])),
        CanTransaction.receive(frame(0x12345678, [4, 5], extended=True)),
    ])

    bus.send(can.Message(arbitration_id=0x123, data=[1, 2, 3], is_extended_id=False))
    reply = bus.recv()
    assert reply.arbitration_id == 0x12345678

    bus.done()

Module: halmock.can
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum

import can

from halmock.common import Generic, Transaction, expect_equal, expect_mode, resolve
from halmock.core.constants import CAN_MAX_DATA_LENGTH
from halmock.core.errors import CanError, TransactionError
from halmock.core.types import PeripheralKind
from halmock.utils.validation import validate_bytes, validate_can_id


class CanMode(Enum):
    """CAN transaction kinds."""
    TRANSMIT = "transmit"
    RECEIVE = "receive"


def frame(arbitration_id, data=b"", extended=False, remote=False, dlc=None):
    """
    Build a classic CAN frame with validated fields.

    Args:
        arbitration_id: 11-bit (or 29-bit if extended) identifier
        data: Payload, at most 8 bytes; must be empty for remote frames
        extended: Use a 29-bit identifier
        remote: Build a remote transmission request
        dlc: Requested length for remote frames (defaults to len(data))

    Returns:
        can.Message
    """
    validate_can_id(arbitration_id, extended)
    payload = validate_bytes(data, "CAN data")
    if len(payload) > CAN_MAX_DATA_LENGTH:
        raise TransactionError(
            f"CAN data must be at most {CAN_MAX_DATA_LENGTH} bytes, got {len(payload)}"
        )
    if remote and payload:
        raise TransactionError("remote CAN frames carry no data")
    return can.Message(
        arbitration_id=arbitration_id,
        data=payload,
        is_extended_id=extended,
        is_remote_frame=remote,
        dlc=len(payload) if dlc is None else dlc,
    )


def frame_fields(message):
    """Fields of a frame that take part in comparisons."""
    return (
        message.arbitration_id,
        message.is_extended_id,
        message.is_remote_frame,
        message.dlc,
        bytes(message.data),
    )


def _check_message(message, name):
    if not isinstance(message, can.Message):
        raise TransactionError(f"{name} must be a can.Message, got {type(message).__name__}")
    return message


@dataclass(frozen=True)
class CanTransaction(Transaction):
    """
    CAN transaction holding a can.Message in expected or response.

    can.Message compares by identity, so equality and hashing go through
    frame_fields() instead of the generated dataclass methods.
    """

    error_class = CanError

    def _key(self):
        return (
            self.mode,
            None if self.expected is None else frame_fields(self.expected),
            None if self.response is None else frame_fields(self.response),
            self.error,
        )

    def __eq__(self, other):
        if not isinstance(other, CanTransaction):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    @classmethod
    def transmit(cls, expected_frame):
        """Expect expected_frame to be transmitted."""
        return cls(CanMode.TRANSMIT, expected=_check_message(expected_frame, "expected frame"))

    @classmethod
    def receive(cls, response_frame):
        """Expect a receive; hand back response_frame."""
        return cls(CanMode.RECEIVE, response=_check_message(response_frame, "response frame"))


class MockCan(Generic):
    """
    Mock CAN controller.

    transmit()/receive() form the blocking interface; send()/recv() accept
    and ignore the timeout argument of python-can's BusABC.
    """

    peripheral = "can"
    transaction_type = CanTransaction
    kind = PeripheralKind.CAN

    def transmit(self, message):
        """Transmit message."""
        operation = self._operation("transmit")
        transaction = self._next("transmit")
        expect_mode(transaction, CanMode.TRANSMIT, operation)
        expect_equal(frame_fields(transaction.expected), frame_fields(message), operation)
        resolve(transaction)

    def receive(self):
        """
        Receive the next frame.

        Returns:
            can.Message: The queued frame
        """
        transaction = self._next("receive")
        expect_mode(transaction, CanMode.RECEIVE, self._operation("receive"))
        return resolve(transaction, transaction.response)

    def send(self, msg, timeout=None):
        self.transmit(msg)

    def recv(self, timeout=None):
        return self.receive()
