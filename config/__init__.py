"""Monitor configuration."""

from .settings import (
    CalibrationConfig,
    MonitorSettings,
    QualityThresholds,
    ScanConfig,
    TrendConfig,
    load_settings,
)

__all__ = [
    "CalibrationConfig",
    "MonitorSettings",
    "QualityThresholds",
    "ScanConfig",
    "TrendConfig",
    "load_settings",
]
