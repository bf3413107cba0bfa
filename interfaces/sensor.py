# interfaces/sensor.py
# Abstract sensor interfaces: analog gas sample source and climate sensor

import math


class AnalogReader:
    """Abstract source of raw ADC samples (e.g. the MQ135 analog pin)."""

    def read_sample(self) -> int:
        """Return one raw sample. Must be non-blocking; may raise OSError."""
        raise NotImplementedError

    def close(self) -> None:
        """Clean up resources."""
        pass


class ClimateReading:
    """Immutable temperature/humidity reading."""
    __slots__ = ("temperature_c", "humidity", "ok")

    def __init__(self, temperature_c: float, humidity: float, ok: bool = True):
        self.temperature_c = temperature_c
        self.humidity = humidity
        self.ok = ok

    def is_valid(self) -> bool:
        """False for failed reads or NaN values (DHT-style sensors report NaN on failure)."""
        if not self.ok:
            return False
        return not (math.isnan(self.temperature_c) or math.isnan(self.humidity))

    def __repr__(self) -> str:
        return f"ClimateReading(temperature_c={self.temperature_c}, humidity={self.humidity}, ok={self.ok})"


class ClimateSensor:
    """Abstract interface for temperature/humidity sensors."""

    def read(self) -> ClimateReading:
        """Read current temperature and humidity. Must be non-blocking."""
        raise NotImplementedError

    def close(self) -> None:
        """Clean up resources."""
        pass
