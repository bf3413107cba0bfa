"""Configuration utilities for the logging library."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Mapping


_DEFAULT_SERVICE = "dravyavraksh"
_DEFAULT_ENV = "local"


def _comma_tuple(value: str | None, *, default: tuple[str, ...]) -> tuple[str, ...]:
    """Convert a comma-separated string to a tuple."""

    if not value:
        return default

    return tuple(filter(None, (part.strip().lower() for part in value.split(","))))


def _bool_env(value: str | None, default: bool) -> bool:
    """Convert a string to a boolean."""

    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _int_env(value: str | None, default: int) -> int:
    if value is None:
        return default

    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class LoggingSettings:
    """Immutable runtime configuration."""

    service: str = _DEFAULT_SERVICE # Name stamped on every record
    env: str = _DEFAULT_ENV # Deployment environment (local, bench, field)
    level: str = "INFO" # Minimum level of records to emit
    queue_size: int = 1024 # Capacity of the ring queue buffering records
    sinks: tuple[str, ...] = ("stdout",) # Sink names, see LoggerManager.configure
    auto_flush: bool = True # Write records through on submit instead of on flush()
    default_context: Mapping[str, Any] = field(default_factory=dict) # Context merged into every record

    def with_overrides(self, **kwargs: Any) -> "LoggingSettings":
        """Return a new LoggingSettings with the given overrides."""

        return replace(self, **kwargs)


_SETTINGS_LOCK = threading.RLock()
_SETTINGS: LoggingSettings | None = None


def load_settings(env: Mapping[str, str] | None = None) -> LoggingSettings:
    """Load settings from environment variables or provided mapping."""

    source = os.environ if env is None else env

    return LoggingSettings(
        service=source.get("LOG_SERVICE_NAME", _DEFAULT_SERVICE),
        env=source.get("LOG_ENV", _DEFAULT_ENV),
        level=source.get("LOG_LEVEL", "INFO").upper(),
        queue_size=max(1, _int_env(source.get("LOG_QUEUE_SIZE"), 1024)),
        sinks=_comma_tuple(source.get("LOG_SINKS"), default=("stdout",)),
        auto_flush=_bool_env(source.get("LOG_AUTO_FLUSH"), True),
        default_context={},
    )


def configure_settings(
    settings: LoggingSettings | None = None, **overrides: Any
) -> LoggingSettings:
    """Resolve settings and persist them globally."""

    with _SETTINGS_LOCK:
        resolved = settings or load_settings()
        if overrides:
            resolved = resolved.with_overrides(**overrides)
        global _SETTINGS
        _SETTINGS = resolved
        return _SETTINGS


def get_settings() -> LoggingSettings:
    """Return the active settings, loading them from the environment on first use."""

    with _SETTINGS_LOCK:
        global _SETTINGS
        if _SETTINGS is None:
            _SETTINGS = load_settings()
        return _SETTINGS
