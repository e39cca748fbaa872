"""
Pytest Configuration and Fixtures
===================================

Pytest configuration and fixtures for the halmock test suite.

Fixtures:
    - halmock_defaults: Restores the suite configuration after every
      test (autouse)
    - debug_log: caplog capturing the halmock logger at DEBUG
    - haptic_bus: MockI2C preloaded with a multiplexer probe
    - delay: Empty MockDelay
    - engine: Empty Engine
    - config_file: halmock.json written to a temporary directory

The hal_mocks fixture comes from halmock.pytest_plugin, registered
through the package's pytest11 entry point.

Version: 1.0.0
"""

import logging

import pytest

from halmock.config import configure, reset_config
from halmock.delay import MockDelay
from halmock.engine import Engine
from halmock.i2c import MockI2C

from tests.fixtures import fast_config, multiplexer_deselect, write_config_file

pytest_plugins = ["pytester"]


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Drivers exercised against several mocks"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that really sleep"
    )


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def halmock_defaults():
    """
    Run every test with the suite settings and restore them afterwards.

    Release checks are off so that mocks abandoned by tests that provoke
    mismatches on purpose do not emit unraisable-exception warnings; tests
    of the release check turn it back on explicitly.
    """
    configure(**fast_config())
    yield
    reset_config()
    configure(**fast_config())


@pytest.fixture
def config_file(tmp_path):
    """
    Provide a halmock.json in a temporary directory.

    Returns:
        Path: Path to the file (verifyOnRelease, allowRealDelays=false,
        logLevel=DEBUG)
    """
    return write_config_file(tmp_path)


@pytest.fixture
def debug_log(caplog):
    """
    Capture halmock log records at DEBUG level.

    Usage:
        def test_pop_is_logged(debug_log):
            ...
            assert "consumed" in debug_log.text
    """
    caplog.set_level(logging.DEBUG, logger="halmock")
    return caplog


# ============================================================================
# Mock Fixtures
# ============================================================================

@pytest.fixture
def haptic_bus():
    """
    Provide MockI2C expecting the multiplexer probe done at construction.

    Returns:
        MockI2C: Bus with one queued deselect write

    Usage:
        def test_driver(haptic_bus):
            mux = I2CMultiplexer(haptic_bus.clone())
            haptic_bus.done()
    """
    bus = MockI2C([multiplexer_deselect()])
    yield bus


@pytest.fixture
def delay():
    """Provide an empty MockDelay."""
    yield MockDelay()


@pytest.fixture
def engine():
    """Provide an empty Engine."""
    yield Engine()
