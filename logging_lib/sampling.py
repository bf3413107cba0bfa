"""Severity threshold helpers."""

from __future__ import annotations

from .config import LoggingSettings

_LEVEL_NUMERIC = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "WARN": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


def level_value(level: str) -> int:
    """Return the numeric severity for ``level`` (unknown levels count as INFO)."""

    return _LEVEL_NUMERIC.get(level.upper(), 20)


def should_emit(level: str, settings: LoggingSettings) -> bool:
    """Return ``True`` when a record at ``level`` passes the configured threshold."""

    return level_value(level) >= level_value(settings.level)
