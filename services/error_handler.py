# services/error_handler.py
# Error codes, monitor exceptions and the runner's error bookkeeping

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from logging_lib import get_logger


class ErrorCodes:
    """Error code definitions for the monitor."""

    NO_ERROR = 0

    # Sensor errors (100-199)
    SENSOR_READ_FAILED = 102
    SENSOR_INVALID_DATA = 103
    CLIMATE_READ_FAILED = 106

    # System errors (500-599)
    CONFIG_INVALID = 502
    UNKNOWN_ERROR = 599

    _DESCRIPTIONS = {
        NO_ERROR: "No error",
        SENSOR_READ_FAILED: "Failed to read gas sensor sample",
        SENSOR_INVALID_DATA: "Invalid gas sensor sample",
        CLIMATE_READ_FAILED: "Failed to read temperature/humidity sensor",
        CONFIG_INVALID: "Monitor configuration invalid",
        UNKNOWN_ERROR: "Unknown error",
    }

    @classmethod
    def describe(cls, error_code: int) -> str:
        """Get human-readable description of error code."""
        return cls._DESCRIPTIONS.get(error_code, f"Unknown error ({error_code})")

    @classmethod
    def is_critical(cls, error_code: int) -> bool:
        return error_code >= 500


class MonitorError(Exception):
    """Base monitor error with structured information."""

    def __init__(
        self,
        error_code: int,
        message: Optional[str] = None,
        component: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ):
        self.error_code = error_code
        self.component = component or "monitor"
        self.context = dict(context or {})
        self.message = message or ErrorCodes.describe(error_code)

        super().__init__(f"[{self.component}] {self.message} (code: {error_code})")

    def is_critical(self) -> bool:
        return ErrorCodes.is_critical(self.error_code)


class ConfigError(MonitorError):
    """Configuration-related errors."""

    def __init__(self, message: str, errors: Optional[list] = None):
        self.errors = list(errors or [])
        super().__init__(ErrorCodes.CONFIG_INVALID, message, component="config")


class ErrorHandler:
    """Counts and logs monitor errors raised during ticks."""

    def __init__(self):
        self._logger = get_logger("ErrorHandler")
        self._error_counts: Dict[int, int] = {}
        self._last_errors: Dict[str, MonitorError] = {}

    def handle_error(self, error: MonitorError) -> bool:
        """Record and log ``error``; returns False when it is critical."""

        self._error_counts[error.error_code] = self._error_counts.get(error.error_code, 0) + 1
        self._last_errors[error.component] = error

        log_data = {
            "error_code": error.error_code,
            "source": error.component,
            "count": self._error_counts[error.error_code],
        }
        log_data.update(error.context)

        if error.is_critical():
            self._logger.critical(error.message, **log_data)
        else:
            self._logger.error(error.message, **log_data)

        return not error.is_critical()

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics for reporting."""
        return {
            "error_counts": self._error_counts.copy(),
            "last_errors": {
                component: {
                    "error_code": error.error_code,
                    "message": error.message,
                    "context": dict(error.context),
                }
                for component, error in self._last_errors.items()
            },
            "total_errors": sum(self._error_counts.values()),
        }

    def clear_error_stats(self) -> None:
        self._error_counts.clear()
        self._last_errors.clear()
