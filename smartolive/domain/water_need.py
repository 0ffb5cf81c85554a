"""
Water Need Calculator Domain Service
====================================
Estimates liters to apply on a parcel from its base daily need.

Formula:
    need = base × moisture_factor × weather_factor × soil_factor × age_factor

    moisture_factor:
        below range  -> 1 + (lower - current) / 10
        above range  -> max(0.1, 1 - (current - upper) / 20)
        within range -> 1.0
    weather_factor = temperature_factor × et0_factor
        temperature_factor = 1.0 up to 20 °C, then +5 % per degree
        et0_factor = min(ET0 / 5, 2.0)
    soil_factor = SoilTypeConfig water factor
    age_factor from TREE_AGE_FACTOR_BANDS

The result is rounded half up to 0.1 liter. Each factor contributes one reason
string so the final recommendation documents how it was derived.

Usage:
    calculator = WaterNeedCalculator()
    estimate = calculator.calculate(parcel, weather, current_moisture=25.0)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from smartolive.constants import MATURE_TREE_AGE_FACTOR, TREE_AGE_FACTOR_BANDS, SoilTypeConfig
from smartolive.domain.moisture import MoistureRange
from smartolive.domain.parcel import ParcelConfig
from smartolive.domain.weather import WeatherSnapshot
from smartolive.enums.common import SoilType

logger = logging.getLogger(__name__)

MOISTURE_DEFICIT_DIVISOR = 10.0
MOISTURE_EXCESS_DIVISOR = 20.0
MIN_MOISTURE_FACTOR = 0.1


@dataclass(frozen=True)
class WaterNeedEstimate:
    """Result of a water need calculation."""

    liters: float
    factors: dict[str, float] = field(default_factory=dict)
    reasons: tuple[str, ...] = field(default_factory=tuple)

    @property
    def reasoning(self) -> str:
        parts = [f"{name}={value:.2f}" for name, value in self.factors.items()]
        return " × ".join(parts) + f" = {self.liters:.1f}L"

    def to_dict(self) -> dict[str, Any]:
        return {
            "liters": self.liters,
            "factors": {name: round(value, 3) for name, value in self.factors.items()},
            "reasons": list(self.reasons),
        }


def round_liters(liters: float) -> float:
    """Round to 0.1 liter, halves away from zero (11.25 -> 11.3)."""
    return math.floor(liters * 10 + 0.5) / 10


def moisture_factor(current: float, target: MoistureRange) -> float:
    if target.is_below(current):
        return 1.0 + (target.lower - current) / MOISTURE_DEFICIT_DIVISOR
    if target.is_above(current):
        return max(MIN_MOISTURE_FACTOR, 1.0 - (current - target.upper) / MOISTURE_EXCESS_DIVISOR)
    return 1.0


def soil_factor(soil_type: SoilType) -> float:
    return SoilTypeConfig.get(soil_type).water_factor


def age_factor(age_years: float) -> float:
    for upper, factor in TREE_AGE_FACTOR_BANDS:
        if age_years < upper:
            return factor
    return MATURE_TREE_AGE_FACTOR


class WaterNeedCalculator:
    """Multi-factor water need estimation for olive parcels."""

    def calculate(
        self,
        parcel: ParcelConfig,
        weather: WeatherSnapshot,
        current_moisture: float,
        target: MoistureRange | None = None,
    ) -> WaterNeedEstimate:
        """
        Compute the liters a parcel needs today.

        Args:
            parcel: Parcel configuration (tree profile supplies base, soil and age)
            weather: Current weather snapshot
            current_moisture: Measured soil moisture in %
            target: Target band, defaults to the parcel's own

        Returns:
            WaterNeedEstimate with liters, individual factors and reasons
        """
        target = target or parcel.target_range
        profile = parcel.profile
        base = profile.base_water_need_liters
        reasons: list[str] = [f"Base water need: {base:g}L"]

        m_factor = moisture_factor(current_moisture, target)
        if target.is_below(current_moisture):
            reasons.append(
                f"Moisture factor: {m_factor:.2f} ({current_moisture:g}% below target {target})"
            )
        elif target.is_above(current_moisture):
            reasons.append(
                f"Moisture factor: {m_factor:.2f} ({current_moisture:g}% above target {target})"
            )
        else:
            reasons.append(f"Moisture factor: {m_factor:.2f} ({current_moisture:g}% within target {target})")

        w_factor = weather.weather_factor
        reasons.append(
            f"Weather factor: {w_factor:.2f} (temperature {weather.temperature_c:g}°C "
            f"-> {weather.temperature_factor:.2f}, ET0 {weather.et0_mm:g}mm -> {weather.et0_factor:.2f})"
        )

        s_factor = soil_factor(profile.soil_type)
        reasons.append(f"Soil factor: {s_factor:.2f} ({profile.soil_type.value})")

        a_factor = age_factor(profile.age_years)
        reasons.append(f"Age factor: {a_factor:.2f} ({profile.age_years:g} years)")

        liters = round_liters(base * m_factor * w_factor * s_factor * a_factor)
        factors = {
            "base": base,
            "moisture": m_factor,
            "weather": w_factor,
            "soil": s_factor,
            "age": a_factor,
        }
        logger.debug("Water need for parcel %s: %.1fL", parcel.parcel_id, liters)
        return WaterNeedEstimate(liters=liters, factors=factors, reasons=tuple(reasons))
