"""
Core Constants
==============
Package-wide constants for halmock.

This module defines:

- Package version information
- Time unit conversions used by delay and timer mocks
- Bus limits used when validating transaction builders

All constants are defined at module level for easy import and use.

Module: halmock.core.constants
Version: 1.0.0
"""

# ============================================================================
# Version
# ============================================================================

VERSION = "1.0.0"

# ============================================================================
# Time Units
# ============================================================================

NANOS_PER_MICRO = 1_000
NANOS_PER_MILLI = 1_000_000
NANOS_PER_SECOND = 1_000_000_000

# ============================================================================
# Bus Limits
# ============================================================================

I2C_MIN_ADDRESS = 0x00
"""
Lowest address accepted by I2C transaction builders.

The reserved ranges (0x00-0x07, 0x78-0x7F) are accepted on purpose: a
driver under test may legitimately probe them, and the mock only checks
that the driver used the address it was expected to use.
"""

I2C_MAX_ADDRESS = 0xFF
"""
Highest address accepted by I2C transaction builders.

Addresses are stored as one byte. 7-bit devices use 0x00-0x7F, but the
mock does not enforce that, so drivers that pass shifted 8-bit addresses
can be tested as well.
"""

CAN_MAX_STANDARD_ID = 0x7FF
"""Highest 11-bit standard CAN identifier."""

CAN_MAX_EXTENDED_ID = 0x1FFFFFFF
"""Highest 29-bit extended CAN identifier."""

CAN_MAX_DATA_LENGTH = 8
"""Maximum classic CAN payload in bytes."""

PWM_MAX_DUTY = 0xFFFF
"""Duty cycles are 16-bit values."""

PWM_MAX_PERIOD = 0xFFFFFFFF
"""PWM periods are 32-bit tick counts."""

# ============================================================================
# Logging
# ============================================================================

LOGGER_NAME = "halmock"
DEFAULT_LOG_LEVEL = "WARNING"
