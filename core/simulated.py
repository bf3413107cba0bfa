# core/simulated.py
# Simulated MQ135 / DHT11 hardware for running the monitor on a host

import random

from interfaces import AnalogReader, ClimateReading, ClimateSensor


class SimulatedAnalogReader(AnalogReader):
    """
    Random-walk ADC source around a resting sample.

    - Each read drifts by at most ``step`` counts and is pulled back towards
      ``baseline_sample`` so the walk stays near fresh-air levels.
    - With probability ``spike_chance`` a read jumps by ``spike_size`` counts
      (someone breathing on the sensor), which is what drives scan mode.
    """

    def __init__(self, baseline_sample: int = 200, max_adc: int = 1023, step: int = 4,
                 spike_chance: float = 0.05, spike_size: int = 120, seed=None):
        self._baseline = int(baseline_sample)
        self._max_adc = int(max_adc)
        self._step = max(0, int(step))
        self._spike_chance = spike_chance
        self._spike_size = int(spike_size)
        self._rng = random.Random(seed)
        self._value = self._baseline

    def read_sample(self) -> int:
        drift = self._rng.randint(-self._step, self._step)
        pull = (self._baseline - self._value) // 8
        self._value += drift + pull

        if self._rng.random() < self._spike_chance:
            self._value += self._rng.choice((-1, 1)) * self._spike_size

        self._value = max(0, min(self._max_adc, self._value))
        return self._value


class SimulatedClimateSensor(ClimateSensor):
    """DHT11-like sensor; ``failure_chance`` of reads come back as NaN like a failed DHT read."""

    def __init__(self, temperature_c: float = 24.0, humidity: float = 50.0,
                 failure_chance: float = 0.0, seed=None):
        self._temperature_c = temperature_c
        self._humidity = humidity
        self._failure_chance = failure_chance
        self._rng = random.Random(seed)

    def read(self) -> ClimateReading:
        if self._rng.random() < self._failure_chance:
            return ClimateReading(float("nan"), float("nan"), ok=False)

        self._temperature_c += self._rng.uniform(-0.1, 0.1)
        self._humidity = max(0.0, min(100.0, self._humidity + self._rng.uniform(-0.5, 0.5)))
        return ClimateReading(round(self._temperature_c, 1), round(self._humidity, 1))
