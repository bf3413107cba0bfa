"""Gas monitor core: estimation, history/trend, quality tiers and scan mode."""

from .estimator import EstimateBreakdown, GasEstimator, estimate
from .history import HistoryBuffer, TrendDirection, TrendSnapshot
from .pipeline import AirQualityMonitor, MonitorStatus
from .quality import QualityClassifier, QualityTier, classify
from .report import format_status_line, status_to_dict
from .scan_mode import ScanModeMachine, ScanState

__all__ = [
    "AirQualityMonitor",
    "EstimateBreakdown",
    "GasEstimator",
    "HistoryBuffer",
    "MonitorStatus",
    "QualityClassifier",
    "QualityTier",
    "ScanModeMachine",
    "ScanState",
    "TrendDirection",
    "TrendSnapshot",
    "classify",
    "estimate",
    "format_status_line",
    "status_to_dict",
]
