"""
Irrigation Rule Evaluator
=========================
Turns (parcel, weather, latest reading, today's events) into one
recommendation by running a fixed sequence of gates. Each gate may end the
evaluation early:

1. Input validation      parcel and weather are required; old weather warns
2. Sensor validity       unusable reading -> fallback path (terminal)
3. Weather skip          rain, frost or strong wind -> no irrigation
4. Time window           outside every configured window -> no irrigation
5. Daily limit           today's liters >= duration budget × liters/minute
6. Range                 moisture already within target -> no irrigation
7. Compute               water need + level classification

The evaluator holds no state between calls; the only ambient input is the
injected clock.

Usage:
    evaluator = IrrigationRuleEvaluator(EngineSettings(), clock=local_now)
    recommendation = evaluator.evaluate(parcel, weather, reading, todays_events)
"""

from __future__ import annotations

import logging
from typing import Iterable

from smartolive.config import EngineSettings
from smartolive.domain.decision_level import classify_level
from smartolive.domain.exceptions import InvalidInputError
from smartolive.domain.irrigation_event import IrrigationEvent
from smartolive.domain.parcel import ParcelConfig
from smartolive.domain.recommendation import Recommendation
from smartolive.domain.sensors.reading import SensorReading
from smartolive.domain.sensors.validity import SensorValidityCheck
from smartolive.domain.water_need import WaterNeedCalculator
from smartolive.domain.weather import WeatherSnapshot
from smartolive.utils.time import Clock, local_now, start_of_day

logger = logging.getLogger(__name__)


class IrrigationRuleEvaluator:
    """Sequential gate evaluation producing a single recommendation."""

    def __init__(
        self,
        settings: EngineSettings | None = None,
        clock: Clock = local_now,
        calculator: WaterNeedCalculator | None = None,
    ):
        self.settings = settings or EngineSettings()
        self._clock = clock
        self._calculator = calculator or WaterNeedCalculator()
        self._validity = SensorValidityCheck(self.settings.max_stale_minutes)

    def evaluate(
        self,
        parcel: ParcelConfig,
        weather: WeatherSnapshot,
        reading: SensorReading | None,
        todays_events: Iterable[IrrigationEvent] = (),
    ) -> Recommendation:
        """
        Evaluate one parcel.

        Args:
            parcel: Parcel configuration
            weather: Current weather snapshot
            reading: Latest sensor reading, or None when the sensor is silent
            todays_events: Irrigation events of the parcel, any event started
                before local midnight is ignored

        Returns:
            Recommendation with reasons in evaluation order

        Raises:
            InvalidInputError: parcel or weather is missing
        """
        if parcel is None:
            raise InvalidInputError("Parcel configuration is required")
        if weather is None:
            raise InvalidInputError("Weather snapshot is required", detail={"parcel_id": parcel.parcel_id})

        now = self._clock()
        reasons: list[str] = []

        if weather.is_outdated(now, self.settings.weather_max_age_hours):
            reasons.append(f"Warning: weather data is {weather.age_hours(now):.1f}h old")

        validity = self._validity.check(reading, now)
        if not validity:
            reasons.extend(validity.reasons)
            return self._fallback(parcel, weather, now, reasons)

        skip_reasons = self._weather_skip_reasons(weather)
        if skip_reasons:
            reasons.extend(skip_reasons)
            logger.info("Parcel %s: irrigation skipped for weather", parcel.parcel_id)
            return Recommendation.skip(now, reasons)

        if parcel.allowed_windows and not parcel.is_irrigation_allowed_at(now):
            windows = ", ".join(str(w) for w in parcel.allowed_windows)
            reasons.append(f"Outside allowed irrigation windows ({windows})")
            return Recommendation.skip(now, reasons)

        used_today = self._liters_used_today(todays_events, now)
        daily_limit = self.settings.daily_volume_limit(parcel.max_daily_duration_minutes)
        if used_today >= daily_limit:
            reasons.append(f"Daily limit already reached: {used_today:.1f}L of {daily_limit:.1f}L")
            return Recommendation.skip(now, reasons)

        current = reading.moisture_pct
        if parcel.target_range.contains(current):
            reasons.append(f"Moisture {current:g}% within target range {parcel.target_range}")
            return Recommendation.skip(now, reasons)

        estimate = self._calculator.calculate(parcel, weather, current)
        reasons.extend(estimate.reasons)
        level = classify_level(
            current,
            estimate.liters,
            parcel.base_water_need_liters,
            critical_moisture_pct=self.settings.critical_moisture_pct,
            elevated_need_ratio=self.settings.elevated_need_ratio,
        )
        reasons.append(f"Recommended {estimate.liters:.1f}L at level {level.value}")
        logger.info(
            "Parcel %s: %s recommendation, %.1fL (%s)",
            parcel.parcel_id,
            level.value,
            estimate.liters,
            estimate.reasoning,
        )
        return Recommendation(now, estimate.liters, level, tuple(reasons))

    def _fallback(self, parcel, weather, now, reasons: list[str]) -> Recommendation:
        s = self.settings
        moment = now.time()
        daytime = s.fallback_day_start < moment < s.fallback_day_end
        rain = weather.is_rain_expected(s.rain_threshold_mm, s.high_rain_probability)

        if daytime and not rain:
            liters = parcel.base_water_need_liters * s.fallback_fraction
            reasons.append(f"Fallback: {s.fallback_fraction:.0%} of base need ({liters:.1f}L)")
        else:
            liters = 0.0
            if rain:
                reasons.append("Fallback: rain expected, no irrigation")
            else:
                reasons.append("Fallback: outside daytime hours, no irrigation")

        logger.warning("Parcel %s: sensor data unusable, fallback %.1fL", parcel.parcel_id, liters)
        return Recommendation.fallback(now, liters, reasons)

    def _weather_skip_reasons(self, weather: WeatherSnapshot) -> list[str]:
        s = self.settings
        reasons = []
        if weather.is_rain_expected(s.rain_threshold_mm, s.high_rain_probability):
            reasons.append(
                f"Rain expected: {weather.precipitation_mm_24h:g}mm "
                f"({weather.precipitation_probability:g}% probability)"
            )
        if weather.temperature_c < s.frost_temperature_c:
            reasons.append(f"Frost risk: {weather.temperature_c:g}°C")
        if weather.wind_speed_kmh > s.max_wind_kmh:
            reasons.append(f"Wind too strong: {weather.wind_speed_kmh:g}km/h")
        return reasons

    @staticmethod
    def _liters_used_today(events: Iterable[IrrigationEvent], now) -> float:
        midnight = start_of_day(now)
        return sum(event.liters for event in events or () if event.started_since(midnight))
