"""
Recommendation Service
======================
Applies the rule evaluator across parcels and derives planning views:

- Batch evaluation with per-parcel error isolation
- Optimal watering window for a forecast
- Seven-day watering plan
- Historical moisture and water use analysis

Usage:
    service = RecommendationService(evaluator, sensor_store, event_store, parcel_store=parcels)
    results = service.evaluate_all(parcels.list_parcels(), weather)
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date, time, timedelta
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from smartolive.domain.exceptions import ConfigurationError, ParcelNotFoundError
from smartolive.domain.irrigation_system import IrrigationSystem, SystemWaterNeed
from smartolive.domain.parcel import ParcelConfig
from smartolive.domain.recommendation import Recommendation
from smartolive.domain.rule_evaluator import IrrigationRuleEvaluator
from smartolive.domain.time_window import TimeWindow
from smartolive.domain.weather import WeatherSnapshot
from smartolive.utils.time import Clock, local_now, start_of_day

if TYPE_CHECKING:
    from infrastructure.logging.audit import AuditLogger
    from smartolive.services.protocols import (
        IrrigationEventStore,
        ParcelStore,
        SensorReadingStore,
        WeatherProvider,
    )

logger = logging.getLogger(__name__)

DEFAULT_MORNING_WINDOW = TimeWindow(time(6, 0), time(9, 0))
MIN_WINDOW_SCORE = 0.5
MORNING_SCORE = 0.3
NO_RAIN_SCORE = 0.4
MILD_TEMPERATURE_SCORE = 0.3
MILD_TEMPERATURE_RANGE = (15.0, 25.0)
MAX_PLAN_DAYS = 7
HEAVY_RAIN_MM = 5.0
HOT_DAY_C = 30.0
HIGH_ET0_MM = 6.0


@dataclass(frozen=True)
class OptimalWateringTime:
    """Best window to water a parcel given a forecast."""

    parcel_id: str
    window: TimeWindow
    score: float
    reasoning: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "parcel_id": self.parcel_id,
            "window": self.window.to_dict(),
            "score": round(self.score, 2),
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class DailyWateringPlan:
    """Planned liters for one forecast day."""

    day: date
    liters: float
    action: str
    reasoning: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "liters": round(self.liters, 1),
            "action": self.action,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class WeeklyWateringPlan:
    """Forward-looking plan built from daily forecasts."""

    parcel_id: str
    generated_on: date
    days: tuple[DailyWateringPlan, ...] = field(default_factory=tuple)

    @property
    def total_liters(self) -> float:
        return sum(day.liters for day in self.days)

    def to_dict(self) -> dict[str, Any]:
        return {
            "parcel_id": self.parcel_id,
            "generated_on": self.generated_on.isoformat(),
            "days": [day.to_dict() for day in self.days],
            "total_liters": round(self.total_liters, 1),
        }


@dataclass(frozen=True)
class HistoricalAnalysis:
    """Moisture and water use of a parcel over a past period."""

    parcel_id: str
    period_start: date
    period_end: date
    average_moisture: float
    total_liters: float
    reading_count: int
    event_count: int

    @property
    def average_liters_per_event(self) -> float:
        if self.event_count == 0:
            return 0.0
        return self.total_liters / self.event_count

    @property
    def water_efficiency(self) -> float:
        """Average moisture per average liters applied; 0 without irrigation."""
        per_event = self.average_liters_per_event
        if per_event == 0:
            return 0.0
        return self.average_moisture / per_event

    def to_dict(self) -> dict[str, Any]:
        return {
            "parcel_id": self.parcel_id,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "average_moisture": round(self.average_moisture, 1),
            "total_liters": round(self.total_liters, 1),
            "reading_count": self.reading_count,
            "event_count": self.event_count,
            "water_efficiency": round(self.water_efficiency, 3),
        }


class RecommendationService:
    """
    Orchestrates rule evaluation over stored parcels, readings and events.

    Stores are passed in as protocol-satisfying objects; the service never
    caches anything between calls.
    """

    def __init__(
        self,
        evaluator: IrrigationRuleEvaluator,
        sensor_store: "SensorReadingStore",
        event_store: "IrrigationEventStore",
        parcel_store: "ParcelStore | None" = None,
        weather_provider: "WeatherProvider | None" = None,
        audit_logger: "AuditLogger | None" = None,
        clock: Clock = local_now,
        max_workers: int = 0,
    ):
        """
        Args:
            evaluator: Rule evaluator applied to every parcel
            sensor_store: Source of latest and historical readings
            event_store: Source of irrigation events
            parcel_store: Source of parcel configurations (needed for lookups by id)
            weather_provider: Used when no weather snapshot is passed in
            audit_logger: Receives one record per issued recommendation
            clock: Time source
            max_workers: Thread pool size for batch evaluation, 0 = sequential
        """
        self._evaluator = evaluator
        self._sensor_store = sensor_store
        self._event_store = event_store
        self._parcel_store = parcel_store
        self._weather_provider = weather_provider
        self._audit = audit_logger
        self._clock = clock
        self._max_workers = max_workers

    @property
    def evaluator(self) -> IrrigationRuleEvaluator:
        return self._evaluator

    @property
    def audit_logger(self) -> "AuditLogger | None":
        return self._audit

    @property
    def max_workers(self) -> int:
        return self._max_workers

    # ==================== Evaluation ====================

    def evaluate_all(
        self,
        parcels: Iterable[ParcelConfig],
        weather: WeatherSnapshot,
        max_workers: int | None = None,
    ) -> dict[str, Recommendation]:
        """
        Evaluate every parcel; a failing parcel never aborts the batch.

        Returns:
            Mapping of parcel id to recommendation
        """
        parcels = list(parcels)
        workers = self._max_workers if max_workers is None else max_workers
        results: dict[str, Recommendation] = {}

        if workers and workers > 1 and len(parcels) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                future_to_id = {
                    executor.submit(self._evaluate_safely, parcel, weather): parcel.parcel_id
                    for parcel in parcels
                }
                for future in as_completed(future_to_id):
                    results[future_to_id[future]] = future.result()
        else:
            for parcel in parcels:
                results[parcel.parcel_id] = self._evaluate_safely(parcel, weather)

        logger.info(
            "Evaluated %d parcels, %d need irrigation",
            len(results),
            sum(1 for r in results.values() if r.should_irrigate),
        )
        return results

    def evaluate_all_stored(self, weather: WeatherSnapshot | None = None) -> dict[str, Recommendation]:
        """Evaluate every parcel known to the parcel store."""
        store = self._require_parcel_store()
        return self.evaluate_all(store.list_parcels(), self._resolve_weather(weather))

    def recommend(self, parcel_id: str, weather: WeatherSnapshot | None = None) -> Recommendation:
        """
        Evaluate a single stored parcel.

        Raises:
            ParcelNotFoundError: no parcel with this id exists
        """
        parcel = self.get_parcel(parcel_id)
        return self._evaluate_safely(parcel, self._resolve_weather(weather))

    def get_parcel(self, parcel_id: str) -> ParcelConfig:
        parcel = self._require_parcel_store().get_parcel(parcel_id)
        if parcel is None:
            raise ParcelNotFoundError(parcel_id)
        return parcel

    def _evaluate_safely(self, parcel: ParcelConfig, weather: WeatherSnapshot) -> Recommendation:
        try:
            recommendation = self._evaluate_parcel(parcel, weather)
        except Exception as exc:
            logger.error("Evaluation failed for parcel %s: %s", parcel.parcel_id, exc, exc_info=True)
            recommendation = Recommendation.fallback(self._clock(), 0.0, (f"Error: {exc}",))
        self._record(parcel.parcel_id, recommendation)
        return recommendation

    def _evaluate_parcel(self, parcel: ParcelConfig, weather: WeatherSnapshot) -> Recommendation:
        midnight = start_of_day(self._clock())
        reading = self._sensor_store.get_latest_reading(parcel.parcel_id)
        events = self._event_store.get_events_since(parcel.parcel_id, midnight)
        return self._evaluator.evaluate(parcel, weather, reading, events)

    def _record(self, parcel_id: str, recommendation: Recommendation) -> None:
        if self._audit is None:
            return
        try:
            self._audit.log_recommendation(parcel_id, recommendation)
        except OSError as exc:
            logger.warning("Could not write audit record for parcel %s: %s", parcel_id, exc)

    # ==================== Planning ====================

    def optimal_window(self, parcel: ParcelConfig, forecast: WeatherSnapshot) -> OptimalWateringTime:
        """
        Pick a watering window for the forecast.

        Windows are scanned in declaration order and the first one scoring
        above 0.5 wins; otherwise the first candidate is returned.
        """
        candidates = list(parcel.allowed_windows) or [DEFAULT_MORNING_WINDOW]
        scored = [(window, self._score_window(window, forecast)) for window in candidates]

        chosen, score = next(((w, s) for w, s in scored if s > MIN_WINDOW_SCORE), scored[0])
        if score > MIN_WINDOW_SCORE:
            reasoning = "Optimal: low evaporation, no rain forecast"
        else:
            reasoning = "No window meets the minimum score, using first allowed window"
        return OptimalWateringTime(parcel.parcel_id, chosen, score, reasoning)

    def _score_window(self, window: TimeWindow, forecast: WeatherSnapshot) -> float:
        settings = self._evaluator.settings
        score = 0.0
        if window.is_within(DEFAULT_MORNING_WINDOW):
            score += MORNING_SCORE
        if not forecast.is_rain_expected(settings.rain_threshold_mm, settings.high_rain_probability):
            score += NO_RAIN_SCORE
        low, high = MILD_TEMPERATURE_RANGE
        if low <= forecast.temperature_c <= high:
            score += MILD_TEMPERATURE_SCORE
        return score

    def weekly_plan(self, parcel: ParcelConfig, daily_forecasts: Sequence[WeatherSnapshot]) -> WeeklyWateringPlan:
        """
        Plan up to seven days from daily forecasts.

        Without future moisture readings only the weather factor is applied
        to the base need.
        """
        today = self._clock().date()
        days = []
        for offset, forecast in enumerate(daily_forecasts[:MAX_PLAN_DAYS]):
            liters = parcel.base_water_need_liters * forecast.weather_factor
            days.append(
                DailyWateringPlan(
                    day=today + timedelta(days=offset),
                    liters=liters,
                    action="irrigate" if liters > 0 else "no irrigation",
                    reasoning=self._daily_reasoning(forecast),
                )
            )
        plan = WeeklyWateringPlan(parcel.parcel_id, today, tuple(days))
        logger.debug("Weekly plan for parcel %s: %.1fL over %d days", parcel.parcel_id, plan.total_liters, len(days))
        return plan

    @staticmethod
    def _daily_reasoning(forecast: WeatherSnapshot) -> str:
        reasons = []
        if forecast.is_rain_expected(HEAVY_RAIN_MM):
            reasons.append("Heavy rain expected")
        elif forecast.precipitation_mm_24h > 0:
            reasons.append("Light rain expected")
        if forecast.temperature_c > HOT_DAY_C:
            reasons.append("High temperatures increase water need")
        if forecast.et0_mm > HIGH_ET0_MM:
            reasons.append(f"High evaporation (ET0={forecast.et0_mm:g}mm)")
        return ", ".join(reasons) if reasons else "Optimal conditions"

    # ==================== History ====================

    def historical_analysis(self, parcel: ParcelConfig | str, days_back: int) -> HistoricalAnalysis:
        """Summarize readings and irrigation events of the last ``days_back`` days."""
        if days_back < 0:
            raise ValueError(f"days_back must not be negative, got {days_back}")
        parcel_id = parcel if isinstance(parcel, str) else parcel.parcel_id
        now = self._clock()
        since = now - timedelta(days=days_back)

        readings = list(self._sensor_store.get_readings_since(parcel_id, since))
        events = list(self._event_store.get_events_since(parcel_id, since))

        moistures = [r.moisture_pct for r in readings if r.moisture_pct is not None]
        average = sum(moistures) / len(moistures) if moistures else 0.0
        total = sum(event.liters for event in events)

        return HistoricalAnalysis(
            parcel_id=parcel_id,
            period_start=since.date(),
            period_end=now.date(),
            average_moisture=average,
            total_liters=total,
            reading_count=len(readings),
            event_count=len(events),
        )

    # ==================== System ====================

    def system_water_need(
        self, system: IrrigationSystem, recommendations: Mapping[str, Recommendation]
    ) -> SystemWaterNeed:
        return system.total_water_need({pid: rec.liters for pid, rec in recommendations.items()})

    # ==================== Helpers ====================

    def _require_parcel_store(self) -> "ParcelStore":
        if self._parcel_store is None:
            raise ConfigurationError("No parcel store configured")
        return self._parcel_store

    def _resolve_weather(self, weather: WeatherSnapshot | None) -> WeatherSnapshot:
        if weather is not None:
            return weather
        if self._weather_provider is None:
            raise ConfigurationError("No weather snapshot given and no weather provider configured")
        return self._weather_provider.get_current_snapshot()
