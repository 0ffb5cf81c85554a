"""
Application Constants
=====================

Centralized constants for the irrigation engine: physical sensor bounds,
staleness thresholds, soil and tree-age water factors.

Usage:
    from smartolive.constants import SoilTypeConfig, SensorBounds, Staleness
"""

from __future__ import annotations

from dataclasses import dataclass

from smartolive.enums.common import SoilType

# =============================================================================
# Sensor Constants
# =============================================================================


class SensorBounds:
    """Physically plausible ranges for soil sensor values."""

    MOISTURE_MIN = 0.0  # %
    MOISTURE_MAX = 100.0
    TEMPERATURE_MIN = -50.0  # °C
    TEMPERATURE_MAX = 80.0
    EC_MIN = 0.0  # µS/cm
    PH_MIN = 0.0
    PH_MAX = 14.0
    BATTERY_MIN = 0.0  # %
    BATTERY_MAX = 100.0
    SIGNAL_MIN = 0.0  # %
    SIGNAL_MAX = 100.0


class Staleness:
    """Reading age thresholds (minutes)."""

    USABLE = 30
    ATTENTION = 60
    CRITICAL_DATA = 120


class SensorQuality:
    """Data quality scoring thresholds."""

    MAX_SCORE = 100.0
    ATTENTION_BELOW = 50.0
    BATTERY_CRITICAL = 10.0
    BATTERY_LOW = 20.0
    BATTERY_MEDIUM = 50.0
    SIGNAL_WEAK = 50.0
    SIGNAL_FAIR = 80.0


class WaterStress:
    """Stress multipliers applied on top of the moisture deficit."""

    HOT_TEMPERATURE_C = 25.0
    HOT_MULTIPLIER = 1.5
    SALINE_EC = 2000.0
    SALINE_MULTIPLIER = 1.3
    PH_LOW = 5.5
    PH_HIGH = 7.5
    PH_MULTIPLIER = 1.2


# =============================================================================
# Weather Constants
# =============================================================================


class WeatherBounds:
    """Accepted ranges for weather snapshot values."""

    TEMPERATURE_MIN = -20.0  # °C
    TEMPERATURE_MAX = 50.0
    PERCENT_MIN = 0.0
    PERCENT_MAX = 100.0

    # Temperature factor: neutral up to this temperature, then +5% per degree
    NEUTRAL_TEMPERATURE_C = 20.0
    TEMPERATURE_SLOPE = 0.05

    # ET0 factor: reference value and cap
    REFERENCE_ET0_MM = 5.0
    MAX_ET0_FACTOR = 2.0


# =============================================================================
# Soil & Tree Constants
# =============================================================================


@dataclass(frozen=True)
class SoilProperties:
    """Water behaviour of a soil class."""

    name: str
    water_factor: float  # Multiplier on base water need
    description: str


class SoilTypeConfig:
    """Soil configurations for water-need calculations."""

    SANDY = SoilProperties(
        name="sandy",
        water_factor=1.3,  # Drains fast, holds little water
        description="Sandy soil",
    )

    LOAMY = SoilProperties(
        name="loamy",
        water_factor=1.0,
        description="Loamy soil",
    )

    CLAY = SoilProperties(
        name="clay",
        water_factor=0.8,  # High retention
        description="Clay soil",
    )

    LOESS = SoilProperties(
        name="loess",
        water_factor=1.1,
        description="Loess soil",
    )

    CALCAREOUS = SoilProperties(
        name="calcareous",
        water_factor=1.2,
        description="Calcareous soil",
    )

    _REGISTRY: dict[SoilType, SoilProperties] = {
        SoilType.SANDY: SANDY,
        SoilType.LOAMY: LOAMY,
        SoilType.CLAY: CLAY,
        SoilType.LOESS: LOESS,
        SoilType.CALCAREOUS: CALCAREOUS,
    }

    @classmethod
    def get(cls, soil_type: SoilType | str) -> SoilProperties:
        """Get properties for a soil type. Raises ValueError for unknown soils."""
        return cls._REGISTRY[SoilType(soil_type)]


# (upper bound in years, exclusive; factor). Evaluated in order, first match wins.
TREE_AGE_FACTOR_BANDS: tuple[tuple[float, float], ...] = (
    (3, 1.5),  # young trees, shallow roots
    (10, 1.2),
    (30, 1.0),
    (50, 0.9),
)
MATURE_TREE_AGE_FACTOR = 0.8

# Absolute moisture floor below which a recommendation is always critical
CRITICAL_MOISTURE_PCT = 20.0

# =============================================================================
# Scheduling Constants
# =============================================================================

DEFAULT_MAX_DAILY_DURATION_MINUTES = 60
