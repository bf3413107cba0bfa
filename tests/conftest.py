"""Top-level pytest configuration for the monitor test suites."""

from __future__ import annotations

import pytest

import logging_lib
from logging_lib import get_manager, load_settings, reset_loggers

from tests.mock_interfaces import MockAnalogReader, MockClimateSensor, MockClock


@pytest.fixture(autouse=True)
def _memory_logging(monkeypatch):
    """Route structured logs to an in-memory sink so suites stay quiet and assertable."""

    env = {"LOG_SERVICE_NAME": "monitor-tests", "LOG_ENV": "test", "LOG_LEVEL": "DEBUG", "LOG_SINKS": "memory"}
    for key, value in env.items():
        monkeypatch.setenv(key, value)

    reset_loggers()
    logging_lib.configure(load_settings(env))
    yield
    reset_loggers()


@pytest.fixture
def log_records():
    """Records captured by the global manager's memory sink."""

    sinks = get_manager().memory_sinks()
    assert sinks, "expected the memory sink to be configured"
    return sinks[0].records


@pytest.fixture
def clock():
    return MockClock()


@pytest.fixture
def reader():
    return MockAnalogReader()


@pytest.fixture
def climate():
    return MockClimateSensor()
