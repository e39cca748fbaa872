"""
Validation Utilities
====================
Argument validation for transaction builders.

This module provides validation utilities for common operations:
- Numeric range validation
- I2C address validation
- Bus word and byte-string validation
- CAN identifier validation

All validators raise TransactionError (a ValueError) with descriptive
messages on failure, so a malformed expectation is reported while the test
is being set up rather than when the driver runs.

Usage:
    from halmock.utils.validation import (
        validate_range,
        validate_i2c_address,
        validate_bytes,
    )

    address = validate_i2c_address(0x5A)
    payload = validate_bytes([0x01, 0x02], "write data")

Module: halmock.utils.validation
Version: 1.0.0
"""

from halmock.core.constants import (
    I2C_MIN_ADDRESS,
    I2C_MAX_ADDRESS,
    CAN_MAX_STANDARD_ID,
    CAN_MAX_EXTENDED_ID,
)
from halmock.core.errors import TransactionError


def validate_range(value, min_value, max_value, name="value"):
    """
    Validate that a numeric value is within specified range.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive)
        name: Name of value for error message

    Returns:
        The validated value (unchanged)

    Raises:
        TransactionError: If value is not an int or is outside range

    Example:
        duty = validate_range(75, 0, 0xFFFF, "duty cycle")
        # duty = 75

        duty = validate_range(-1, 0, 0xFFFF, "duty cycle")
        # Raises: TransactionError: duty cycle must be between 0 and 65535, got -1
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TransactionError(f"{name} must be an int, got {type(value).__name__}")
    if not (min_value <= value <= max_value):
        raise TransactionError(
            f"{name} must be between {min_value} and {max_value}, got {value}"
        )
    return value


def validate_i2c_address(
    address, name="I2C address", min_addr=I2C_MIN_ADDRESS, max_addr=I2C_MAX_ADDRESS
):
    """
    Validate a one-byte I2C device address.

    Args:
        address: I2C address to validate (7-bit, or 8-bit with the R/W bit)
        name: Name of device for error message
        min_addr: Minimum valid address (default: 0x00)
        max_addr: Maximum valid address (default: 0xFF)

    Returns:
        The validated address (unchanged)

    Raises:
        TransactionError: If address is outside valid range

    Example:
        addr = validate_i2c_address(0x70, "TCA9548A")
        # addr = 0x70

        addr = validate_i2c_address(0x100, "Device")
        # Raises: TransactionError: Device must be between 0x00 and 0xFF, got 0x100
    """
    if isinstance(address, bool) or not isinstance(address, int):
        raise TransactionError(f"{name} must be an int, got {type(address).__name__}")
    if not (min_addr <= address <= max_addr):
        raise TransactionError(
            f"{name} must be between 0x{min_addr:02X} and 0x{max_addr:02X}, got 0x{address:02X}"
        )
    return address


def validate_word(word, bits=8, name="word"):
    """
    Validate a single unsigned bus word.

    Args:
        word: Word to validate
        bits: Word width in bits (default: 8)
        name: Name for error message

    Returns:
        The validated word (unchanged)
    """
    return validate_range(word, 0, (1 << bits) - 1, name)


def validate_bytes(data, name="data"):
    """
    Validate and normalise a byte payload.

    Accepts bytes, bytearray, memoryview or any iterable of ints in 0-255.

    Args:
        data: Payload to validate
        name: Name for error message

    Returns:
        bytes: Immutable copy of the payload

    Raises:
        TransactionError: If data is a str or contains values outside 0-255
    """
    if isinstance(data, str):
        raise TransactionError(f"{name} must be bytes or a sequence of ints, got str")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    try:
        items = list(data)
    except TypeError:
        raise TransactionError(
            f"{name} must be bytes or a sequence of ints, got {type(data).__name__}"
        ) from None
    for index, item in enumerate(items):
        validate_word(item, 8, f"{name}[{index}]")
    return bytes(items)


def validate_words(words, bits=8, name="words", allow_empty=True):
    """
    Validate a sequence of bus words of arbitrary width.

    Args:
        words: Sequence of ints
        bits: Word width
        name: Name used in error messages
        allow_empty: Accept an empty sequence

    Returns:
        tuple: Immutable copy of the words
    """
    if isinstance(words, str):
        raise TransactionError(f"{name} must be a sequence of ints, got str")
    items = tuple(words)
    if not items and not allow_empty:
        raise TransactionError(f"{name} must contain at least one word")
    for index, item in enumerate(items):
        validate_word(item, bits, f"{name}[{index}]")
    return items


def validate_can_id(arbitration_id, extended=False, name="CAN identifier"):
    """
    Validate a standard (11-bit) or extended (29-bit) CAN identifier.

    Returns:
        The validated identifier (unchanged)
    """
    max_id = CAN_MAX_EXTENDED_ID if extended else CAN_MAX_STANDARD_ID
    return validate_range(arbitration_id, 0, max_id, name)
