# monitor/scan_mode.py
# STABLE/SCANNING hysteresis: a magnitude trigger to enter, a timed cooldown to leave

from __future__ import annotations

from enum import Enum
from typing import Optional

from logging_lib import get_logger


class ScanState(str, Enum):
    STABLE = "STABLE"
    SCANNING = "SCANNING"


class ScanModeMachine:
    """
    Scan-mode state machine driven once per tick with (concentration, now_ms).

    - Change of more than ``change_threshold_ppm`` against the last stable
      reading enters (or refreshes) SCANNING and re-anchors the stable reading.
    - While SCANNING, more than ``cooldown_ms`` without a qualifying change
      returns to STABLE.
    - The first update anchors the stable reading to itself, so the machine
      always starts STABLE.
    """

    def __init__(self, change_threshold_ppm: float = 50.0, cooldown_ms: int = 30000):
        self._threshold = float(change_threshold_ppm)
        self._cooldown_ms = int(cooldown_ms)
        self._logger = get_logger("ScanModeMachine")
        self.reset()

    def reset(self) -> None:
        self._state = ScanState.STABLE
        self._last_stable_reading: Optional[float] = None
        self._last_scan_ms: Optional[int] = None
        self._last_change_ms: Optional[int] = None

    # ---------- Public API ----------

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def scanning(self) -> bool:
        return self._state is ScanState.SCANNING

    @property
    def last_stable_reading(self) -> Optional[float]:
        return self._last_stable_reading

    @property
    def last_scan_ms(self) -> Optional[int]:
        return self._last_scan_ms

    @property
    def last_change_ms(self) -> Optional[int]:
        return self._last_change_ms

    def update(self, concentration: float, now_ms: int) -> ScanState:
        """Evaluate the transition rules for one tick and return the resulting state."""
        if self._last_stable_reading is None:
            self._last_stable_reading = concentration

        change = abs(concentration - self._last_stable_reading)

        if change > self._threshold:
            self._enter_scanning(concentration, change, now_ms)
        elif self._state is ScanState.SCANNING and now_ms - self._last_scan_ms > self._cooldown_ms:
            self._transition_stable(now_ms)

        return self._state

    # ---------- State transitions ----------

    def _enter_scanning(self, concentration: float, change: float, now_ms: int) -> None:
        if self._state is not ScanState.SCANNING:
            self._logger.info(
                "scan_mode_entered",
                ppm=round(concentration, 1),
                change_ppm=round(change, 1),
                now_ms=now_ms,
            )
        self._state = ScanState.SCANNING
        self._last_scan_ms = now_ms
        self._last_change_ms = now_ms
        self._last_stable_reading = concentration

    def _transition_stable(self, now_ms: int) -> None:
        self._logger.info(
            "scan_mode_cleared",
            stable_ppm=round(self._last_stable_reading, 1),
            scanning_for_ms=now_ms - self._last_change_ms,
        )
        self._state = ScanState.STABLE
