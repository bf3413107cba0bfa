# monitor/report.py
# Rendering of tick snapshots for the serial-style console and structured logs

from __future__ import annotations

from typing import Any, Dict

from .pipeline import MonitorStatus


def format_status_line(status: MonitorStatus) -> str:
    """
    One line per tick, e.g.
    ``CO2: 812.4 PPM | Temp: 24.0C | Humidity: 51.0% | ADC: 301 | Air Quality: MODERATE | Trend: RISING``
    with ``| SCANNING`` appended while scan mode is active.
    """
    parts = [
        f"CO2: {status.concentration:.1f} PPM",
        f"Temp: {status.temperature_c:.1f}C",
        f"Humidity: {status.humidity:.1f}%",
        f"ADC: {status.raw_sample}",
        f"Air Quality: {status.quality_tier.value}",
        f"Trend: {status.trend.direction.value}",
    ]
    if status.scanning:
        parts.append("SCANNING")
    return " | ".join(parts)


def status_to_dict(status: MonitorStatus) -> Dict[str, Any]:
    """JSON-serialisable view of a snapshot."""
    return {
        "tick": status.tick,
        "timestamp_ms": status.timestamp_ms,
        "raw_sample": status.raw_sample,
        "co2_ppm": round(status.concentration, 1),
        "quality_tier": status.quality_tier.value,
        "scanning": status.scanning,
        "scan_state": status.scan_state.value,
        "trend": {
            "direction": status.trend.direction.value,
            "recent_avg": round(status.trend.recent_avg, 1),
            "previous_avg": round(status.trend.previous_avg, 1),
        },
        "temperature_c": status.temperature_c,
        "humidity": status.humidity,
        "climate_ok": status.climate_ok,
    }
