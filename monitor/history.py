# monitor/history.py
# Fixed-capacity ring of recent concentrations with short-term trend detection

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List


class TrendDirection(str, Enum):
    RISING = "RISING"
    FALLING = "FALLING"
    FLAT = "FLAT"


@dataclass(frozen=True)
class TrendSnapshot:
    """Means of the most recent half-window and the half-window before it."""

    recent_avg: float
    previous_avg: float
    direction: TrendDirection

    @property
    def delta(self) -> float:
        return self.recent_avg - self.previous_avg


class HistoryBuffer:
    """
    Ring buffer of the last ``capacity`` concentrations.

    - Pre-seeded with ``baseline`` so it is always full and the trend is
      defined before ``capacity`` real readings have arrived.
    - ``record`` overwrites the oldest slot and advances the cursor.
    - The trend compares the mean of the ``capacity // 2`` newest entries with
      the mean of the ``capacity // 2`` entries before them, reading backward
      from the cursor. A difference within ``deadband_ppm`` is FLAT.
    """

    def __init__(self, capacity: int = 10, baseline: float = 410.0, deadband_ppm: float = 20.0):
        if capacity < 2 or capacity % 2:
            raise ValueError(f"capacity must be an even number >= 2 (got {capacity})")
        if deadband_ppm < 0:
            raise ValueError(f"deadband_ppm must be >= 0 (got {deadband_ppm})")

        self._capacity = capacity
        self._window = capacity // 2
        self._deadband = float(deadband_ppm)
        self._baseline = float(baseline)
        self._slots: List[float] = [self._baseline] * capacity
        self._cursor = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def window(self) -> int:
        return self._window

    def __len__(self) -> int:
        return self._capacity

    def record(self, concentration: float) -> TrendSnapshot:
        """Store ``concentration`` in the oldest slot and return the updated trend."""
        self._slots[self._cursor] = float(concentration)
        self._cursor = (self._cursor + 1) % self._capacity
        return self.snapshot()

    def snapshot(self) -> TrendSnapshot:
        recent = self._mean_back(0)
        previous = self._mean_back(self._window)
        return TrendSnapshot(recent, previous, self._classify(recent - previous))

    def latest(self) -> float:
        return self._slots[(self._cursor - 1) % self._capacity]

    def values(self) -> List[float]:
        """Entries oldest-first."""
        return self._slots[self._cursor:] + self._slots[:self._cursor]

    def reset(self, baseline: float | None = None) -> None:
        if baseline is not None:
            self._baseline = float(baseline)
        self._slots = [self._baseline] * self._capacity
        self._cursor = 0

    # ---------- helpers ----------

    def _mean_back(self, offset: int) -> float:
        # offset 0 starts at the newest entry (cursor - 1)
        total = 0.0
        for i in range(self._window):
            total += self._slots[(self._cursor - 1 - offset - i) % self._capacity]
        return total / self._window

    def _classify(self, delta: float) -> TrendDirection:
        if delta > self._deadband:
            return TrendDirection.RISING
        if delta < -self._deadband:
            return TrendDirection.FALLING
        return TrendDirection.FLAT
