"""
pytest Plugin
=============
Fixtures that enforce the completion check at test teardown.

Garbage collection gives no guarantee about when an unchecked mock is
released, so a forgotten done() may only surface as an unraisable-exception
warning in a later test. Mocks created through the hal_mocks fixture are
instead checked when the test that created them tears down: a test that
passed but left a mock unverified is reported as an error.

The plugin is registered through the pytest11 entry point, so installing
halmock makes the fixture available to every test suite.

Usage:
    def test_sensor_reads_temperature(hal_mocks):
        i2c = hal_mocks(MockI2C, [I2cTransaction.write_read(0x48, [0x00], [0x19, 0x00])])
        assert Tmp102(i2c.clone()).temperature() == 25.0
        i2c.done()

Module: halmock.pytest_plugin
Version: 1.0.0
"""

import pytest

from halmock.engine import Engine
from halmock.utils.log import get_logger

logger = get_logger(__name__)


class MockRegistry:
    """
    Factory recording every mock created during one test.

    Calling the registry creates a mock: hal_mocks(MockPin, [...]) is
    MockPin([...]) plus registration.
    """

    def __init__(self):
        self.mocks = []

    def __call__(self, mock_class, *args, **kwargs):
        mock = mock_class(*args, **kwargs)
        self.mocks.append(mock)
        return mock

    def engine(self, expectations=()):
        """Create and register an Engine."""
        return self(Engine, expectations)

    def unchecked(self):
        """Registered mocks whose completion check is still owed."""
        return [mock for mock in self.mocks if not mock.is_checked()]

    def abandon(self):
        """Drop the completion obligation of every registered mock."""
        for mock in self.mocks:
            mock._shared.abandon()


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Keep each phase's report on the item so fixtures can see the outcome."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"halmock_report_{report.when}", report)


@pytest.fixture
def hal_mocks(request):
    """
    Factory fixture creating mocks that must be verified by the test.

    At teardown, if the test body passed, every registered mock must have
    had done() called; otherwise the test errors listing the unchecked
    mocks. If the test body failed the check is skipped so the original
    failure stays visible.
    """
    registry = MockRegistry()
    yield registry

    report = getattr(request.node, "halmock_report_call", None)
    unchecked = registry.unchecked()
    registry.abandon()

    if report is None or report.failed or not unchecked:
        return

    logger.error("%d mock(s) not verified in %s", len(unchecked), request.node.nodeid)
    pytest.fail(
        "mocks were not verified with done(): "
        + ", ".join(repr(mock) for mock in unchecked),
        pytrace=False,
    )
