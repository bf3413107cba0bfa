"""Monitor settings: calibration constants, thresholds and loop timing.

Every tunable of the pipeline lives here so nothing in ``monitor/`` hardcodes
sensor constants. Settings are immutable; build variants with
:meth:`MonitorSettings.with_overrides` or the section ``replace`` helpers.

Resolution order used by :func:`load_settings`: defaults, then the optional
JSON file, then ``MONITOR_*`` environment variables.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Tuple

from services.error_handler import ConfigError


@dataclass(frozen=True)
class CalibrationConfig:
    """MQ135 conversion constants (see GasEstimator)."""

    load_resistance_kohm: float = 22.0        # RLOAD on the breakout board
    calibration_resistance: float = 76.63     # RZERO measured at the atmospheric baseline
    atmospheric_baseline_ppm: float = 410.0   # ATMOCO2
    curve_a: float = 116.6020682              # characteristic curve ppm = A * ratio^B
    curve_b: float = -2.769034857
    supply_voltage: float = 5.0
    max_adc: int = 1023
    min_ppm: float = 300.0
    max_ppm: float = 5000.0


@dataclass(frozen=True)
class QualityThresholds:
    good_max: float = 750.0
    moderate_max: float = 1200.0


@dataclass(frozen=True)
class ScanConfig:
    change_threshold_ppm: float = 50.0
    cooldown_ms: int = 30000


@dataclass(frozen=True)
class TrendConfig:
    capacity: int = 10
    deadband_ppm: float = 20.0


# (section, field) -> (env var, parser)
_ENV_FIELDS: Dict[Tuple[str | None, str], Tuple[str, Callable[[str], Any]]] = {
    ("calibration", "load_resistance_kohm"): ("MONITOR_RLOAD_KOHM", float),
    ("calibration", "calibration_resistance"): ("MONITOR_RZERO", float),
    ("calibration", "atmospheric_baseline_ppm"): ("MONITOR_ATMO_PPM", float),
    ("calibration", "curve_a"): ("MONITOR_CURVE_A", float),
    ("calibration", "curve_b"): ("MONITOR_CURVE_B", float),
    ("calibration", "supply_voltage"): ("MONITOR_SUPPLY_V", float),
    ("calibration", "max_adc"): ("MONITOR_MAX_ADC", int),
    ("calibration", "min_ppm"): ("MONITOR_MIN_PPM", float),
    ("calibration", "max_ppm"): ("MONITOR_MAX_PPM", float),
    ("quality", "good_max"): ("MONITOR_GOOD_MAX", float),
    ("quality", "moderate_max"): ("MONITOR_MODERATE_MAX", float),
    ("scan", "change_threshold_ppm"): ("MONITOR_SCAN_THRESHOLD_PPM", float),
    ("scan", "cooldown_ms"): ("MONITOR_SCAN_COOLDOWN_MS", int),
    ("trend", "capacity"): ("MONITOR_HISTORY_SIZE", int),
    ("trend", "deadband_ppm"): ("MONITOR_TREND_DEADBAND_PPM", float),
    (None, "tick_interval_ms"): ("MONITOR_TICK_MS", int),
    (None, "warmup_ms"): ("MONITOR_WARMUP_MS", int),
}

_SECTIONS = ("calibration", "quality", "scan", "trend")


def _coerce(value: Any, target: Any) -> Any:
    """Coerce a JSON/env value to the type of the dataclass default ``target``."""

    if isinstance(target, int):
        return int(value)
    if isinstance(target, float):
        return float(value)
    return value


@dataclass(frozen=True)
class MonitorSettings:
    """Complete configuration surface of the monitor."""

    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    quality: QualityThresholds = field(default_factory=QualityThresholds)
    scan: ScanConfig = field(default_factory=ScanConfig)
    trend: TrendConfig = field(default_factory=TrendConfig)
    tick_interval_ms: int = 2000
    warmup_ms: int = 30000

    def with_overrides(self, **kwargs: Any) -> "MonitorSettings":
        return replace(self, **kwargs)

    def validate(self) -> "MonitorSettings":
        """Raise ConfigError listing every invalid parameter; returns self when valid."""
        errors = []
        cal = self.calibration

        if cal.load_resistance_kohm <= 0:
            errors.append(f"load_resistance_kohm must be > 0 (got {cal.load_resistance_kohm})")
        if cal.calibration_resistance <= 0:
            errors.append(f"calibration_resistance must be > 0 (got {cal.calibration_resistance})")
        if cal.curve_a <= 0:
            errors.append(f"curve_a must be > 0 (got {cal.curve_a})")
        # zero voltage maps to min_ppm and Rs = 0 to max_ppm only for a falling curve
        if cal.curve_b >= 0:
            errors.append(f"curve_b must be < 0 (got {cal.curve_b})")
        if cal.supply_voltage <= 0:
            errors.append(f"supply_voltage must be > 0 (got {cal.supply_voltage})")
        if cal.max_adc <= 0:
            errors.append(f"max_adc must be > 0 (got {cal.max_adc})")
        if not (0 <= cal.min_ppm < cal.max_ppm):
            errors.append(f"ppm range invalid: {cal.min_ppm}..{cal.max_ppm}")
        # the history buffer is seeded with the baseline
        if not (cal.min_ppm <= cal.atmospheric_baseline_ppm <= cal.max_ppm):
            errors.append(
                f"atmospheric_baseline_ppm must lie within {cal.min_ppm}..{cal.max_ppm} "
                f"(got {cal.atmospheric_baseline_ppm})"
            )

        if not (0 < self.quality.good_max < self.quality.moderate_max):
            errors.append(
                f"quality thresholds must satisfy 0 < good_max < moderate_max "
                f"(got {self.quality.good_max}, {self.quality.moderate_max})"
            )

        if self.scan.change_threshold_ppm < 0:
            errors.append(f"change_threshold_ppm must be >= 0 (got {self.scan.change_threshold_ppm})")
        if self.scan.cooldown_ms < 0:
            errors.append(f"cooldown_ms must be >= 0 (got {self.scan.cooldown_ms})")

        if self.trend.capacity < 2 or self.trend.capacity % 2:
            errors.append(f"history capacity must be an even number >= 2 (got {self.trend.capacity})")
        if self.trend.deadband_ppm < 0:
            errors.append(f"trend deadband must be >= 0 (got {self.trend.deadband_ppm})")

        if self.tick_interval_ms < 0:
            errors.append(f"tick_interval_ms must be >= 0 (got {self.tick_interval_ms})")
        if self.warmup_ms < 0:
            errors.append(f"warmup_ms must be >= 0 (got {self.warmup_ms})")

        if errors:
            raise ConfigError(f"Configuration validation failed: {'; '.join(errors)}", errors)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: "MonitorSettings | None" = None) -> "MonitorSettings":
        """Overlay ``data`` (nested sections as produced by to_dict) onto ``base``.

        Unknown keys are ignored. Values that cannot be converted raise ConfigError.
        """
        settings = base or cls()
        updates: Dict[str, Any] = {}

        try:
            for section in _SECTIONS:
                section_data = data.get(section)
                if not isinstance(section_data, Mapping):
                    continue
                current = getattr(settings, section)
                changes = {
                    f.name: _coerce(section_data[f.name], getattr(current, f.name))
                    for f in fields(current)
                    if f.name in section_data
                }
                updates[section] = replace(current, **changes)

            for name in ("tick_interval_ms", "warmup_ms"):
                if name in data:
                    updates[name] = _coerce(data[name], getattr(settings, name))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid configuration value: {exc}") from exc

        return replace(settings, **updates)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, base: "MonitorSettings | None" = None) -> "MonitorSettings":
        """Overlay ``MONITOR_*`` variables onto ``base``.

        Blank variables count as unset. Values that do not parse raise
        ConfigError naming every offending variable.
        """
        source = os.environ if env is None else env
        nested: Dict[str, Dict[str, Any]] = {}
        flat: Dict[str, Any] = {}
        errors = []

        for (section, name), (var, parser) in _ENV_FIELDS.items():
            raw = source.get(var)
            if raw is None or raw.strip() == "":
                continue
            try:
                value = parser(raw.strip())
            except ValueError:
                errors.append(f"{var}={raw!r} is not a valid {parser.__name__}")
                continue
            if section is None:
                flat[name] = value
            else:
                nested.setdefault(section, {})[name] = value

        if errors:
            raise ConfigError(f"Invalid environment configuration: {'; '.join(errors)}", errors)
        return cls.from_dict({**nested, **flat}, base=base)


def load_settings(path: str | os.PathLike | None = None, env: Mapping[str, str] | None = None) -> MonitorSettings:
    """Resolve and validate settings from defaults, an optional JSON file and the environment."""

    settings = MonitorSettings()

    if path is not None:
        try:
            data = json.loads(Path(path).read_text())
        except OSError as exc:
            raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, Mapping):
            raise ConfigError(f"Config file {path} must contain a JSON object")
        settings = MonitorSettings.from_dict(data, base=settings)

    settings = MonitorSettings.from_env(env, base=settings)
    return settings.validate()
