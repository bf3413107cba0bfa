# monitor/quality.py
# Air quality tier lookup from the latest concentration

from __future__ import annotations

from enum import Enum

from config.settings import QualityThresholds


class QualityTier(str, Enum):
    GOOD = "GOOD"
    MODERATE = "MODERATE"
    HARMFUL = "HARMFUL"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    QualityTier.GOOD: 0,
    QualityTier.MODERATE: 1,
    QualityTier.HARMFUL: 2,
}


def classify(concentration: float, good_max: float = 750.0, moderate_max: float = 1200.0) -> QualityTier:
    """GOOD up to ``good_max`` inclusive, MODERATE up to ``moderate_max`` inclusive, else HARMFUL."""
    if concentration <= good_max:
        return QualityTier.GOOD
    if concentration <= moderate_max:
        return QualityTier.MODERATE
    return QualityTier.HARMFUL


class QualityClassifier:
    """Binds configured thresholds to :func:`classify`."""

    def __init__(self, thresholds: QualityThresholds | None = None):
        self._thresholds = thresholds or QualityThresholds()

    @property
    def thresholds(self) -> QualityThresholds:
        return self._thresholds

    def classify(self, concentration: float) -> QualityTier:
        return classify(concentration, self._thresholds.good_max, self._thresholds.moderate_max)
