"""
Domain Value Objects Package
=============================
Value objects and domain services of the irrigation decision engine.

Value objects are immutable and validate their own invariants. The rule
evaluator lives in :mod:`smartolive.domain.rule_evaluator` and is imported
from there directly.
"""

from .exceptions import (
    ConfigurationError,
    ConflictError,
    InvalidInputError,
    InvalidRangeError,
    InvalidWindowError,
    NotFoundError,
    ParcelNotFoundError,
    SmartOliveError,
    ValidationError,
)
from .irrigation_event import IrrigationEvent
from .moisture import MoistureLevel, MoistureRange
from .parcel import ParcelConfig, TreeProfile
from .recommendation import Recommendation
from .time_window import TimeWindow
from .weather import WeatherSnapshot

__all__ = [
    # Errors
    "ConfigurationError",
    "ConflictError",
    "InvalidInputError",
    "InvalidRangeError",
    "InvalidWindowError",
    "NotFoundError",
    "ParcelNotFoundError",
    "SmartOliveError",
    "ValidationError",
    # Value objects
    "IrrigationEvent",
    "MoistureLevel",
    "MoistureRange",
    "ParcelConfig",
    "Recommendation",
    "TimeWindow",
    "TreeProfile",
    "WeatherSnapshot",
]
