# monitor/pipeline.py
# One monitoring tick: read -> estimate -> record -> classify -> scan-mode transition

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Optional

from config.settings import MonitorSettings
from interfaces import AnalogReader, ClimateReading, ClimateSensor, Clock
from logging_lib import get_logger
from services.error_handler import ErrorCodes, MonitorError

from .estimator import GasEstimator
from .history import HistoryBuffer, TrendSnapshot
from .quality import QualityClassifier, QualityTier
from .scan_mode import ScanModeMachine, ScanState

# Substituted for temperature/humidity when the climate sensor fails
CLIMATE_FALLBACK = 0.0


@dataclass(frozen=True)
class MonitorStatus:
    """Immutable snapshot of one tick, handed to display/logging consumers."""

    tick: int
    timestamp_ms: int
    raw_sample: int
    concentration: float
    quality_tier: QualityTier
    scan_state: ScanState
    trend: TrendSnapshot
    temperature_c: float = CLIMATE_FALLBACK
    humidity: float = CLIMATE_FALLBACK
    climate_ok: bool = False

    @property
    def scanning(self) -> bool:
        return self.scan_state is ScanState.SCANNING


class AirQualityMonitor:
    """
    Gas monitor core with dependency injection.

    Owns the history buffer and the scan-mode machine; the analog reader,
    optional climate sensor and clock are injected so no hardware or OS
    call happens inside the core.
    """

    def __init__(
        self,
        analog_reader: AnalogReader,
        clock: Clock,
        settings: Optional[MonitorSettings] = None,
        climate_sensor: Optional[ClimateSensor] = None,
    ):
        # Dependencies (injected)
        self._reader = analog_reader
        self._clock = clock
        self._climate = climate_sensor
        self._settings = settings or MonitorSettings()
        self._logger = get_logger("AirQualityMonitor")

        # Pipeline stages
        s = self._settings
        self._estimator = GasEstimator(s.calibration)
        self._history = HistoryBuffer(
            capacity=s.trend.capacity,
            baseline=s.calibration.atmospheric_baseline_ppm,
            deadband_ppm=s.trend.deadband_ppm,
        )
        self._classifier = QualityClassifier(s.quality)
        self._scan = ScanModeMachine(
            change_threshold_ppm=s.scan.change_threshold_ppm,
            cooldown_ms=s.scan.cooldown_ms,
        )

        # State
        self._tick = 0
        self._last_status: Optional[MonitorStatus] = None

    # ---------- Public API ----------

    @property
    def settings(self) -> MonitorSettings:
        return self._settings

    @property
    def estimator(self) -> GasEstimator:
        return self._estimator

    @property
    def history(self) -> HistoryBuffer:
        return self._history

    @property
    def scan_mode(self) -> ScanModeMachine:
        return self._scan

    @property
    def last_status(self) -> Optional[MonitorStatus]:
        """Return last status for external access (display, reports)."""
        return self._last_status

    def step(self) -> MonitorStatus:
        """
        Execute one tick and return its snapshot.

        Raises MonitorError(SENSOR_READ_FAILED) when the analog reader fails;
        history and scan state are left untouched in that case.
        """
        now = self._clock.now_ms()
        sample = self._read_sample()
        climate = self._read_climate()

        concentration = self._estimator.estimate(sample)
        trend = self._history.record(concentration)
        tier = self._classifier.classify(concentration)
        scan_state = self._scan.update(concentration, now)

        self._tick += 1
        status = MonitorStatus(
            tick=self._tick,
            timestamp_ms=now,
            raw_sample=sample,
            concentration=concentration,
            quality_tier=tier,
            scan_state=scan_state,
            trend=trend,
            temperature_c=climate.temperature_c,
            humidity=climate.humidity,
            climate_ok=climate.ok,
        )
        self._last_status = status
        return status

    def reset(self) -> None:
        """Re-seed the history and return scan mode to its start condition."""
        self._history.reset(self._settings.calibration.atmospheric_baseline_ppm)
        self._scan.reset()
        self._last_status = None

    def close(self) -> None:
        self._reader.close()
        if self._climate is not None:
            self._climate.close()

    # ---------- helpers ----------

    def _read_sample(self) -> int:
        try:
            raw = self._reader.read_sample()
        except OSError as exc:
            raise MonitorError(
                ErrorCodes.SENSOR_READ_FAILED,
                f"Analog read failed: {exc}",
                component="analog_reader",
            ) from exc

        # integral floats (512.0) are accepted; NaN, inf and 2.7 are not
        if isinstance(raw, numbers.Integral) and not isinstance(raw, bool):
            return int(raw)
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)

        raise MonitorError(
            ErrorCodes.SENSOR_INVALID_DATA,
            f"Analog reader returned a non-integer sample: {raw!r}",
            component="analog_reader",
        )

    def _read_climate(self) -> ClimateReading:
        if self._climate is None:
            return ClimateReading(CLIMATE_FALLBACK, CLIMATE_FALLBACK, ok=False)

        try:
            reading = self._climate.read()
        except OSError as exc:
            self._logger.warning(
                "climate_read_failed",
                error_code=ErrorCodes.CLIMATE_READ_FAILED,
                error=str(exc),
            )
            return ClimateReading(CLIMATE_FALLBACK, CLIMATE_FALLBACK, ok=False)

        if not reading.is_valid():
            self._logger.warning(
                "climate_read_failed",
                error_code=ErrorCodes.CLIMATE_READ_FAILED,
                temperature_c=reading.temperature_c,
                humidity=reading.humidity,
            )
            return ClimateReading(CLIMATE_FALLBACK, CLIMATE_FALLBACK, ok=False)

        return reading
