"""
Sensor Domain
=============
Sensor readings and the validity rules the engine applies to them.
"""

from .reading import SensorReading
from .validity import SensorValidity, SensorValidityCheck

__all__ = ["SensorReading", "SensorValidity", "SensorValidityCheck"]
