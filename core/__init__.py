# core/__init__.py
# Host implementations of the monitor interfaces

from .clock import SystemClock
from .simulated import SimulatedAnalogReader, SimulatedClimateSensor

__all__ = ['SystemClock', 'SimulatedAnalogReader', 'SimulatedClimateSensor']
