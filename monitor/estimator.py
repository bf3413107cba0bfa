# monitor/estimator.py
# MQ135 raw sample -> CO2 concentration (PPM) via the calibrated power-law curve

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from config.settings import CalibrationConfig


@dataclass(frozen=True)
class EstimateBreakdown:
    """Intermediate values of one conversion, for diagnostics and calibration."""

    sample: int
    voltage: float
    resistance_kohm: float   # inf when the voltage is zero
    ratio: float             # Rs / R0; inf when the voltage is zero
    ppm: float


class GasEstimator:
    """
    Converts raw ADC samples to an estimated CO2 concentration.

    voltage = sample / max_adc * supply_voltage
    Rs      = (supply_voltage - voltage) / voltage * RLOAD
    ratio   = Rs / RZERO
    ppm     = A * ratio^B + ATMOCO2, clamped to [min_ppm, max_ppm]

    Pure and total: out-of-range samples are clamped to [0, max_adc], a zero
    voltage yields min_ppm and a full-scale sample (Rs = 0) yields max_ppm.
    """

    def __init__(self, calibration: CalibrationConfig | None = None):
        self._cal = calibration or CalibrationConfig()

    @property
    def calibration(self) -> CalibrationConfig:
        return self._cal

    def estimate(self, sample: int) -> float:
        """Return the clamped concentration in PPM for ``sample``."""
        return self.breakdown(sample).ppm

    def breakdown(self, sample: int) -> EstimateBreakdown:
        cal = self._cal
        sample = self._clamp_sample(sample)
        voltage = sample / cal.max_adc * cal.supply_voltage

        if voltage <= 0:
            return EstimateBreakdown(sample, 0.0, math.inf, math.inf, cal.min_ppm)

        resistance = self._sensor_resistance(voltage)
        ratio = resistance / cal.calibration_resistance

        if ratio <= 0:
            return EstimateBreakdown(sample, voltage, resistance, ratio, cal.max_ppm)

        ppm = cal.curve_a * ratio ** cal.curve_b + cal.atmospheric_baseline_ppm
        return EstimateBreakdown(sample, voltage, resistance, ratio, self._clamp_ppm(ppm))

    def derive_calibration_resistance(self, samples: Iterable[int], reference_ppm: float) -> float:
        """
        Compute RZERO from samples taken at a known concentration.

        ``reference_ppm`` is what a reference meter reads next to the sensor.
        The curve term has to supply everything above the additive baseline,
        so R0 = Rs * ((reference_ppm - ATMOCO2) / A) ^ (-1 / B) and
        ``estimate`` of the calibration sample returns ``reference_ppm``.
        Fresh air at exactly the baseline cannot be calibrated against: the
        curve term would have to vanish. Samples at zero voltage carry no
        resistance information and are skipped.
        """
        cal = self._cal
        offset = reference_ppm - cal.atmospheric_baseline_ppm
        if offset <= 0:
            raise ValueError(
                f"reference_ppm must exceed the atmospheric baseline "
                f"{cal.atmospheric_baseline_ppm} (got {reference_ppm})"
            )
        if not (cal.min_ppm <= reference_ppm <= cal.max_ppm):
            raise ValueError(f"reference_ppm must lie within {cal.min_ppm}..{cal.max_ppm} (got {reference_ppm})")

        resistances = []
        for sample in samples:
            voltage = self._clamp_sample(sample) / cal.max_adc * cal.supply_voltage
            if voltage > 0:
                resistances.append(self._sensor_resistance(voltage))

        if not resistances:
            raise ValueError("no usable calibration samples (need at least one non-zero sample)")

        mean_rs = sum(resistances) / len(resistances)
        if mean_rs <= 0:
            raise ValueError("calibration samples saturate the ADC; sensor resistance is zero")

        return mean_rs * (offset / cal.curve_a) ** (-1.0 / cal.curve_b)

    # ---------- helpers ----------

    def _sensor_resistance(self, voltage: float) -> float:
        cal = self._cal
        return (cal.supply_voltage - voltage) / voltage * cal.load_resistance_kohm

    def _clamp_sample(self, sample: int) -> int:
        return max(0, min(self._cal.max_adc, int(sample)))

    def _clamp_ppm(self, ppm: float) -> float:
        return max(self._cal.min_ppm, min(self._cal.max_ppm, ppm))


def estimate(sample: int, calibration: CalibrationConfig | None = None) -> float:
    """Convenience wrapper: ``GasEstimator(calibration).estimate(sample)``."""
    return GasEstimator(calibration).estimate(sample)
