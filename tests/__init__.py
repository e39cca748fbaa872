"""
halmock Testing Infrastructure
==============================

Test suite for halmock: the expectation engine, each peripheral mock,
the multi-peripheral engine and the pytest plugin.

Modules:
    drivers: Example drivers exercised against the mocks
    fixtures.configs: Configuration fixtures
    fixtures.transactions: Canned expectation sequences
    conftest: Pytest configuration and fixtures

Version: 1.0.0
"""
