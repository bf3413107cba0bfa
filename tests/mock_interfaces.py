# tests/mock_interfaces.py
# Mock implementations of interfaces for testing

from interfaces import AnalogReader, ClimateReading, ClimateSensor, Clock, StatusConsumer


class MockClock(Clock):
    """Mock clock for deterministic testing."""

    def __init__(self, initial_time_ms: int = 0):
        self._time_ms = initial_time_ms
        self.sleeps = []

    def now_ms(self) -> int:
        return self._time_ms

    def advance(self, ms: int) -> None:
        """Advance time by specified milliseconds."""
        self._time_ms += ms

    def sleep_ms(self, ms: int) -> None:
        # In tests, we don't actually sleep
        self.sleeps.append(ms)
        self.advance(ms)


class MockAnalogReader(AnalogReader):
    """
    Returns queued samples in order, repeating the last one when exhausted.
    Queue an exception instance to make that read raise it.
    """

    def __init__(self, samples=(512,)):
        self._queue = list(samples)
        self._last = 512
        self.read_count = 0
        self.closed = False

    def push(self, *samples) -> None:
        self._queue.extend(samples)

    def read_sample(self):
        self.read_count += 1
        if self._queue:
            item = self._queue.pop(0)
            if isinstance(item, BaseException):
                raise item
            self._last = item
        return self._last

    def close(self) -> None:
        self.closed = True


class MockClimateSensor(ClimateSensor):
    """Climate sensor double; set ``reading`` or ``error`` between steps."""

    def __init__(self, temperature_c: float = 24.0, humidity: float = 50.0):
        self.reading = ClimateReading(temperature_c, humidity)
        self.error = None
        self.closed = False

    def set_nan(self) -> None:
        self.reading = ClimateReading(float("nan"), float("nan"), ok=False)

    def read(self) -> ClimateReading:
        if self.error is not None:
            raise self.error
        return self.reading

    def close(self) -> None:
        self.closed = True


class RecordingConsumer(StatusConsumer):
    """Collects every published status."""

    def __init__(self):
        self.statuses = []
        self.closed = False

    def publish(self, status) -> None:
        self.statuses.append(status)

    def close(self) -> None:
        self.closed = True


class FailingConsumer(StatusConsumer):
    def publish(self, status) -> None:
        raise RuntimeError("display unplugged")
