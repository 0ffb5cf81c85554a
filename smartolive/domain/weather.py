"""
Weather Snapshot Value Object
=============================
Immutable weather conditions used for one evaluation cycle, plus the
rain/temperature/ET0 factors the engine derives from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from smartolive.constants import WeatherBounds
from smartolive.domain.exceptions import ValidationError
from smartolive.utils.time import ensure_aware

DEFAULT_RAIN_THRESHOLD_MM = 3.0
HIGH_RAIN_PROBABILITY_PCT = 70.0


@dataclass(frozen=True)
class WeatherSnapshot:
    """
    Weather conditions at a point in time.

    Attributes:
        timestamp: Observation or forecast time
        temperature_c: Air temperature in °C, -20..50
        precipitation_mm_24h: Rain over 24 hours in mm
        precipitation_probability: Rain probability in %
        humidity_pct: Relative humidity in %
        wind_speed_kmh: Wind speed in km/h
        et0_mm: Reference evapotranspiration in mm
    """

    timestamp: datetime
    temperature_c: float
    precipitation_mm_24h: float = 0.0
    precipitation_probability: float = 0.0
    humidity_pct: float = 50.0
    wind_speed_kmh: float = 0.0
    et0_mm: float = 0.0

    def __post_init__(self):
        if not isinstance(self.timestamp, datetime):
            raise ValidationError(f"Weather timestamp must be a datetime, got {self.timestamp!r}")
        if not (WeatherBounds.TEMPERATURE_MIN <= self.temperature_c <= WeatherBounds.TEMPERATURE_MAX):
            raise ValidationError(f"Temperature must be between -20 and 50°C, got {self.temperature_c}")
        if self.precipitation_mm_24h < 0:
            raise ValidationError(f"Precipitation must not be negative, got {self.precipitation_mm_24h}")
        if not (WeatherBounds.PERCENT_MIN <= self.precipitation_probability <= WeatherBounds.PERCENT_MAX):
            raise ValidationError(
                f"Precipitation probability must be between 0 and 100%, got {self.precipitation_probability}"
            )
        if not (WeatherBounds.PERCENT_MIN <= self.humidity_pct <= WeatherBounds.PERCENT_MAX):
            raise ValidationError(f"Humidity must be between 0 and 100%, got {self.humidity_pct}")
        if self.wind_speed_kmh < 0:
            raise ValidationError(f"Wind speed must not be negative, got {self.wind_speed_kmh}")
        if self.et0_mm < 0:
            raise ValidationError(f"ET0 must not be negative, got {self.et0_mm}")

    def is_rain_expected(
        self,
        threshold_mm: float = DEFAULT_RAIN_THRESHOLD_MM,
        high_probability_pct: float = HIGH_RAIN_PROBABILITY_PCT,
    ) -> bool:
        """Heavy rain above the threshold, or likely rain of any amount."""
        if self.precipitation_mm_24h > threshold_mm:
            return True
        return self.precipitation_probability > high_probability_pct and self.precipitation_mm_24h > 0

    @property
    def temperature_factor(self) -> float:
        if self.temperature_c <= WeatherBounds.NEUTRAL_TEMPERATURE_C:
            return 1.0
        return 1.0 + WeatherBounds.TEMPERATURE_SLOPE * (self.temperature_c - WeatherBounds.NEUTRAL_TEMPERATURE_C)

    @property
    def et0_factor(self) -> float:
        return min(self.et0_mm / WeatherBounds.REFERENCE_ET0_MM, WeatherBounds.MAX_ET0_FACTOR)

    @property
    def weather_factor(self) -> float:
        return self.temperature_factor * self.et0_factor

    def age_hours(self, now: datetime) -> float:
        return (ensure_aware(now) - ensure_aware(self.timestamp)).total_seconds() / 3600.0

    def is_outdated(self, now: datetime, max_age_hours: float = 2.0) -> bool:
        return self.age_hours(now) > max_age_hours

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "temperature_c": self.temperature_c,
            "precipitation_mm_24h": self.precipitation_mm_24h,
            "precipitation_probability": self.precipitation_probability,
            "humidity_pct": self.humidity_pct,
            "wind_speed_kmh": self.wind_speed_kmh,
            "et0_mm": self.et0_mm,
            "rain_expected": self.is_rain_expected(),
        }
