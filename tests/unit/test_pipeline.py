"""Tests for AirQualityMonitor ticks with injected hardware doubles."""

from __future__ import annotations

import math

import pytest

from config.settings import MonitorSettings, ScanConfig, TrendConfig
from monitor import AirQualityMonitor, QualityTier, ScanState, TrendDirection
from services.error_handler import ErrorCodes, MonitorError

from tests.mock_interfaces import MockAnalogReader, MockClock


def _monitor(samples, clock=None, climate=None, settings=None):
    reader = MockAnalogReader(samples)
    return AirQualityMonitor(reader, clock or MockClock(), settings, climate_sensor=climate), reader


def test_first_tick_is_never_scanning(clock, climate):
    monitor, _ = _monitor([512], clock, climate)
    status = monitor.step()

    assert status.tick == 1
    assert status.raw_sample == 512
    assert status.concentration == pytest.approx(4123.71, abs=0.05)
    assert status.quality_tier is QualityTier.HARMFUL
    assert status.scan_state is ScanState.STABLE
    assert not status.scanning


def test_fresh_air_tick(clock, climate):
    monitor, _ = _monitor([200], clock, climate)
    status = monitor.step()

    assert status.concentration == pytest.approx(483.49, abs=0.05)
    assert status.quality_tier is QualityTier.GOOD
    assert status.trend.direction is TrendDirection.FLAT
    assert status.temperature_c == 24.0
    assert status.humidity == 50.0
    assert status.climate_ok


def test_jump_enters_scanning_and_trend_rises(clock, climate):
    monitor, _ = _monitor([200, 512], clock, climate)
    monitor.step()
    clock.advance(2000)
    status = monitor.step()

    assert status.scanning
    assert status.trend.direction is TrendDirection.RISING
    assert status.timestamp_ms == 2000
    assert monitor.scan_mode.last_scan_ms == 2000


def test_scanning_clears_after_quiet_cooldown(clock):
    monitor, _ = _monitor([200, 512], clock)
    monitor.step()
    clock.advance(2000)
    assert monitor.step().scanning

    clock.advance(30000)
    assert monitor.step().scanning

    clock.advance(1)
    assert not monitor.step().scanning


def test_history_receives_every_concentration(clock):
    monitor, _ = _monitor([200, 300, 400], clock)
    concentrations = [monitor.step().concentration for _ in range(3)]

    assert monitor.history.values()[-3:] == concentrations
    assert monitor.history.latest() == concentrations[-1]


def test_reader_failure_raises_and_leaves_state_untouched(clock):
    monitor, _ = _monitor([200, OSError("ADC bus timeout"), 200], clock)
    first = monitor.step()
    before = monitor.history.values()

    with pytest.raises(MonitorError) as exc_info:
        monitor.step()

    assert exc_info.value.error_code == ErrorCodes.SENSOR_READ_FAILED
    assert exc_info.value.component == "analog_reader"
    assert monitor.history.values() == before
    assert monitor.last_status is first

    # the next tick carries on from where the good one left off
    assert monitor.step().tick == 2


def test_non_integer_sample_is_invalid_data(clock):
    monitor, _ = _monitor(["abc"], clock)

    with pytest.raises(MonitorError) as exc_info:
        monitor.step()

    assert exc_info.value.error_code == ErrorCodes.SENSOR_INVALID_DATA


@pytest.mark.parametrize("sample", [float("inf"), float("-inf"), float("nan"), 2.7, None, True])
def test_unusable_sample_values_are_invalid_data(clock, sample):
    monitor, _ = _monitor([sample], clock)

    with pytest.raises(MonitorError) as exc_info:
        monitor.step()

    assert exc_info.value.error_code == ErrorCodes.SENSOR_INVALID_DATA
    assert exc_info.value.component == "analog_reader"
    assert monitor.last_status is None


def test_integral_float_sample_is_accepted(clock):
    monitor, _ = _monitor([512.0], clock)
    status = monitor.step()

    assert status.raw_sample == 512
    assert isinstance(status.raw_sample, int)


def test_out_of_range_sample_is_clamped_not_rejected(clock):
    monitor, _ = _monitor([2000], clock)
    status = monitor.step()

    assert status.raw_sample == 2000
    assert status.concentration == 5000.0


def test_climate_nan_falls_back_and_logs(clock, climate, log_records):
    climate.set_nan()
    monitor, _ = _monitor([200], clock, climate)
    status = monitor.step()

    assert status.temperature_c == 0.0
    assert status.humidity == 0.0
    assert not status.climate_ok
    assert status.concentration == pytest.approx(483.49, abs=0.05)

    warnings = [r for r in log_records if r["message"] == "climate_read_failed"]
    assert len(warnings) == 1
    assert warnings[0]["level"] == "WARNING"
    assert warnings[0]["error_code"] == ErrorCodes.CLIMATE_READ_FAILED
    # NaN is not valid JSON
    assert warnings[0]["temperature_c"] is None


def test_climate_exception_falls_back(clock, climate, log_records):
    climate.error = OSError("DHT checksum")
    monitor, _ = _monitor([200], clock, climate)
    status = monitor.step()

    assert not status.climate_ok
    assert not math.isnan(status.temperature_c)
    assert any(r["message"] == "climate_read_failed" for r in log_records)


def test_no_climate_sensor_uses_fallback_silently(clock, log_records):
    monitor, _ = _monitor([200], clock)
    status = monitor.step()

    assert status.temperature_c == 0.0
    assert not status.climate_ok
    assert not any(r["message"] == "climate_read_failed" for r in log_records)


def test_custom_settings_flow_into_stages(clock):
    settings = MonitorSettings(
        scan=ScanConfig(change_threshold_ppm=10.0, cooldown_ms=1000),
        trend=TrendConfig(capacity=4, deadband_ppm=5.0),
    )
    monitor, _ = _monitor([200, 220], clock, settings=settings)

    assert monitor.settings is settings
    assert monitor.history.capacity == 4

    monitor.step()
    clock.advance(2000)
    status = monitor.step()
    # 220 reads ~29 ppm above 200
    assert status.scanning


def test_last_status_tracks_latest_tick(clock):
    monitor, _ = _monitor([200, 300], clock)

    assert monitor.last_status is None
    monitor.step()
    second = monitor.step()

    assert monitor.last_status is second
    assert second.tick == 2


def test_reset_reseeds_history_and_scan_mode(clock):
    monitor, _ = _monitor([200, 512], clock)
    monitor.step()
    monitor.step()
    assert monitor.scan_mode.scanning

    monitor.reset()

    assert monitor.history.values() == [410.0] * 10
    assert monitor.scan_mode.state is ScanState.STABLE
    assert monitor.last_status is None


def test_close_releases_hardware(clock, climate):
    monitor, reader = _monitor([200], clock, climate)
    monitor.close()

    assert reader.closed
    assert climate.closed
