# interfaces/__init__.py
# Abstract interfaces injected into the monitor core

from .clock import Clock
from .consumer import StatusConsumer
from .sensor import AnalogReader, ClimateReading, ClimateSensor

__all__ = ['AnalogReader', 'ClimateReading', 'ClimateSensor', 'Clock', 'StatusConsumer']
