"""Fixtures for logging library unit tests."""

from __future__ import annotations

import pytest

from logging_lib import get_logger
from logging_lib.config import load_settings
from logging_lib.logger import LoggerManager


def pytest_collection_modifyitems(config, items):  # pragma: no cover - Pytest hook
    """Tag every test in this directory with the `logging` marker."""

    for item in items:
        if "unit/logging" in str(item.path).replace("\\", "/"):
            item.add_marker(pytest.mark.logging)


@pytest.fixture
def logging_settings():
    """Provide deterministic logging settings wired to the in-memory sink."""

    return load_settings(
        {
            "LOG_SERVICE_NAME": "logging-unit-tests",
            "LOG_ENV": "test",
            "LOG_LEVEL": "DEBUG",
            "LOG_SINKS": "memory",
            "LOG_QUEUE_SIZE": "8",
        }
    )


@pytest.fixture
def logger_manager(monkeypatch, logging_settings):
    """Test-scoped logger manager configured with deterministic settings."""

    import logging_lib.logger as logger_module

    manager = LoggerManager()
    monkeypatch.setattr(logger_module, "_MANAGER", manager)
    manager.configure(logging_settings)

    yield manager

    manager.reset()


@pytest.fixture
def memory_sink(logger_manager):
    """Return the in-memory sink registered during configuration."""

    sinks = logger_manager.memory_sinks()
    if not sinks:
        pytest.fail("Expected an InMemorySink to be registered during configuration")

    return sinks[0]


@pytest.fixture
def memory_logger(logger_manager):
    """Convenience fixture for producing a logger bound to the in-memory sink."""

    return get_logger("memory-test")
