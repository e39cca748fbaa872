"""
Utils Module
============
Common utility functions for halmock.

Modules:
    validation: Argument validation for transaction builders
    log: Package logger helpers

Module: halmock.utils
Version: 1.0.0
"""

from halmock.utils.validation import (
    validate_range,
    validate_i2c_address,
    validate_word,
    validate_bytes,
    validate_words,
    validate_can_id,
)
from halmock.utils.log import get_logger, set_log_level

__all__ = [
    # Validation
    "validate_range",
    "validate_i2c_address",
    "validate_word",
    "validate_bytes",
    "validate_words",
    "validate_can_id",

    # Logging
    "get_logger",
    "set_log_level",
]
