"""
halmock
=======
Expectation-based test doubles for hardware peripheral drivers.

A test declares the ordered transactions a driver should perform, hands
the mock to the driver in place of the real peripheral, runs it and calls
done(). Any call out of order, with the wrong data, or missing, fails the
test with a diagnostic naming the operation.

Modules:
    - digital, i2c, spi, delay, pwm, serial, io, can, adc: Peripheral mocks
    - timer: Manually driven clock and count-down timers
    - engine: One expectation stream spanning several peripherals
    - config: Process-wide settings
    - pytest_plugin: hal_mocks fixture checking every mock at teardown

Module: halmock
Version: 1.0.0
"""

from halmock.core.constants import VERSION
from halmock.core.types import PeripheralKind, PinState, Edge
from halmock.core.errors import (
    ExpectationError,
    StarvationError,
    ModeMismatchError,
    DataMismatchError,
    UnsatisfiedExpectationsError,
    DoneCallError,
    MissingDoneError,
    PeripheralKindError,
    PeripheralIdentityError,
    TransactionError,
    MockError,
)
from halmock.config import configure, get_config, load_mock_config, reset_config
from halmock.common import Generic, SharedExpectations, Transaction
from halmock.digital import MockPin, PinTransaction
from halmock.i2c import I2cOperation, I2cTransaction, MockI2C
from halmock.spi import MockSPI, SpiOperation, SpiTransaction
from halmock.delay import AsyncMockDelay, DelayTransaction, MockDelay, NoopDelay, StdSleep
from halmock.pwm import MockPwm, PwmTransaction
from halmock.serial import MockSerial, SerialTransaction
from halmock.io import IoTransaction, MockIo
from halmock.can import CanTransaction, MockCan
from halmock.adc import AdcTransaction, MockAdc
from halmock.timer import MockClock, MockTimer
from halmock.engine import Binding, Engine, Expectation

__version__ = VERSION

__all__ = [
    # Types
    'PeripheralKind',
    'PinState',
    'Edge',

    # Errors
    'ExpectationError',
    'StarvationError',
    'ModeMismatchError',
    'DataMismatchError',
    'UnsatisfiedExpectationsError',
    'DoneCallError',
    'MissingDoneError',
    'PeripheralKindError',
    'PeripheralIdentityError',
    'TransactionError',
    'MockError',

    # Configuration
    'configure',
    'get_config',
    'load_mock_config',
    'reset_config',

    # Engine
    'Generic',
    'SharedExpectations',
    'Transaction',
    'Engine',
    'Expectation',
    'Binding',

    # Peripherals
    'MockPin',
    'PinTransaction',
    'MockI2C',
    'I2cTransaction',
    'I2cOperation',
    'MockSPI',
    'SpiTransaction',
    'SpiOperation',
    'MockDelay',
    'AsyncMockDelay',
    'DelayTransaction',
    'NoopDelay',
    'StdSleep',
    'MockPwm',
    'PwmTransaction',
    'MockSerial',
    'SerialTransaction',
    'MockIo',
    'IoTransaction',
    'MockCan',
    'CanTransaction',
    'MockAdc',
    'AdcTransaction',
    'MockClock',
    'MockTimer',
]
