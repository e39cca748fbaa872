"""
ADC Mock
========
Mock one-shot analog to digital converter.

Each expectation names the channel the driver must sample and the raw
value to report.

Usage:
    from halmock.adc import AdcTransaction, MockAdc

    adc = MockAdc([
        AdcTransaction.read(0, 0xABCD),
        AdcTransaction.read(1, 0xABBA),
    ])

    assert adc.read(0) == 0xABCD
    assert adc.read(1) == 0xABBA
    adc.done()

Module: halmock.adc
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum

from halmock.common import Generic, Transaction, expect_equal, expect_mode, resolve
from halmock.core.errors import AdcError
from halmock.core.types import PeripheralKind
from halmock.utils.validation import validate_range


class AdcMode(Enum):
    """ADC transaction kinds."""
    READ = "read"


@dataclass(frozen=True)
class AdcTransaction(Transaction):
    """ADC read of one channel. The expected field holds the channel."""

    error_class = AdcError

    @classmethod
    def read(cls, channel, response):
        """Expect a sample of channel; report response."""
        return cls(
            AdcMode.READ,
            expected=validate_range(channel, 0, 0xFF, "ADC channel"),
            response=response,
        )


class MockAdc(Generic):
    """Mock ADC."""

    peripheral = "adc"
    transaction_type = AdcTransaction
    kind = PeripheralKind.ADC

    def read(self, channel):
        """
        Sample channel.

        Args:
            channel: Channel number, or any object with a ``channel``
                attribute (an analog pin wrapper)

        Returns:
            The queued raw value
        """
        channel = getattr(channel, "channel", channel)
        operation = self._operation("read")
        transaction = self._next("read")
        expect_mode(transaction, AdcMode.READ, operation)
        expect_equal(transaction.expected, channel, operation, "channel")
        return resolve(transaction, transaction.response)


class AdcChannel:
    """
    Analog input bound to one channel of a MockAdc.

    Mirrors analogio.AnalogIn: reading value samples the channel.
    """

    def __init__(self, adc, channel):
        self.adc = adc
        self.channel = channel

    @property
    def value(self):
        return self.adc.read(self.channel)
