"""
Test Fixtures
=============

Predefined test fixtures for halmock testing including configurations
and canned expectation sequences.

Modules:
    configs: Test configuration fixtures
    transactions: Expectation sequences for the drivers under test

Version: 1.0.0
"""

from .configs import (
    strict_config,
    fast_config,
    write_config_file,
)
from .transactions import (
    multiplexer_select,
    multiplexer_deselect,
    haptic_init_sequence,
    haptic_activate_sequence,
    battery_samples,
)

__all__ = [
    "strict_config",
    "fast_config",
    "write_config_file",
    "multiplexer_select",
    "multiplexer_deselect",
    "haptic_init_sequence",
    "haptic_activate_sequence",
    "battery_samples",
]
