"""Tests for error codes, monitor exceptions and ErrorHandler bookkeeping."""

from __future__ import annotations

from services.error_handler import ConfigError, ErrorCodes, ErrorHandler, MonitorError


def test_describe_known_and_unknown_codes():
    assert ErrorCodes.describe(ErrorCodes.SENSOR_READ_FAILED) == "Failed to read gas sensor sample"
    assert ErrorCodes.describe(123) == "Unknown error (123)"


def test_monitor_error_formats_component_and_code():
    error = MonitorError(ErrorCodes.SENSOR_INVALID_DATA, component="analog_reader")

    assert error.message == "Invalid gas sensor sample"
    assert str(error) == "[analog_reader] Invalid gas sensor sample (code: 103)"
    assert not error.is_critical()


def test_config_error_is_critical_and_keeps_details():
    error = ConfigError("bad settings", ["capacity must be even"])

    assert error.error_code == ErrorCodes.CONFIG_INVALID
    assert error.errors == ["capacity must be even"]
    assert error.is_critical()


def test_handler_counts_and_logs_by_severity(log_records):
    handler = ErrorHandler()

    assert handler.handle_error(MonitorError(ErrorCodes.SENSOR_READ_FAILED, context={"pin": 34})) is True
    assert handler.handle_error(MonitorError(ErrorCodes.SENSOR_READ_FAILED)) is True
    assert handler.handle_error(ConfigError("broken")) is False

    stats = handler.get_error_stats()
    assert stats["error_counts"] == {ErrorCodes.SENSOR_READ_FAILED: 2, ErrorCodes.CONFIG_INVALID: 1}
    assert stats["total_errors"] == 3
    assert set(stats["last_errors"]) == {"monitor", "config"}

    levels = [r["level"] for r in log_records if r["component"] == "ErrorHandler"]
    assert levels == ["ERROR", "ERROR", "CRITICAL"]
    assert log_records[0]["pin"] == 34
    assert log_records[1]["count"] == 2


def test_clear_error_stats():
    handler = ErrorHandler()
    handler.handle_error(MonitorError(ErrorCodes.UNKNOWN_ERROR))

    handler.clear_error_stats()

    assert handler.get_error_stats() == {"error_counts": {}, "last_errors": {}, "total_errors": 0}
