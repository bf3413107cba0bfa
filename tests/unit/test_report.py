"""Tests for status line and dict rendering."""

from __future__ import annotations

import json

from monitor import MonitorStatus, QualityTier, ScanState, TrendDirection, TrendSnapshot
from monitor.report import format_status_line, status_to_dict


def _status(**overrides):
    values = dict(
        tick=3,
        timestamp_ms=6000,
        raw_sample=301,
        concentration=812.44,
        quality_tier=QualityTier.MODERATE,
        scan_state=ScanState.STABLE,
        trend=TrendSnapshot(520.26, 430.0, TrendDirection.RISING),
        temperature_c=24.0,
        humidity=51.0,
        climate_ok=True,
    )
    values.update(overrides)
    return MonitorStatus(**values)


def test_status_line_layout():
    line = format_status_line(_status())

    assert line == (
        "CO2: 812.4 PPM | Temp: 24.0C | Humidity: 51.0% | ADC: 301 | "
        "Air Quality: MODERATE | Trend: RISING"
    )


def test_status_line_flags_scanning():
    line = format_status_line(_status(scan_state=ScanState.SCANNING))

    assert line.endswith(" | SCANNING")


def test_status_line_shows_climate_fallback():
    line = format_status_line(_status(temperature_c=0.0, humidity=0.0, climate_ok=False))

    assert "Temp: 0.0C | Humidity: 0.0%" in line


def test_status_dict_is_json_serialisable():
    data = status_to_dict(_status(scan_state=ScanState.SCANNING))

    assert data["co2_ppm"] == 812.4
    assert data["quality_tier"] == "MODERATE"
    assert data["scanning"] is True
    assert data["scan_state"] == "SCANNING"
    assert data["trend"] == {"direction": "RISING", "recent_avg": 520.3, "previous_avg": 430.0}
    assert data["climate_ok"] is True
    assert json.loads(json.dumps(data)) == data
