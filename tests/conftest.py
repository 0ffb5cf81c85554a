"""
Shared test fixtures for the SmartOlive test suite.

Provides:
- A fixed clock so time-of-day gates are deterministic
- Builders for parcels, weather snapshots, readings and events
- Mock stores satisfying the service protocols

Usage:
    def test_example(make_parcel, make_weather):
        parcel = make_parcel(base=20.0)
        assert parcel.base_water_need_liters == 20.0
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, timezone
from unittest.mock import Mock

import pytest

from smartolive.config import EngineSettings
from smartolive.domain.irrigation_event import IrrigationEvent
from smartolive.domain.moisture import MoistureRange
from smartolive.domain.parcel import ParcelConfig, TreeProfile
from smartolive.domain.rule_evaluator import IrrigationRuleEvaluator
from smartolive.domain.sensors.reading import SensorReading
from smartolive.domain.time_window import TimeWindow
from smartolive.domain.weather import WeatherSnapshot
from smartolive.enums.common import IrrigationType, SensorStatus, SoilType

# ---------------------------------------------------------------------------
# Logging: keep test output quiet
# ---------------------------------------------------------------------------
logging.getLogger("smartolive").setLevel(logging.WARNING)

# Saturday morning, 10:00 wall-clock time
FIXED_NOW = datetime(2024, 6, 15, 10, 0, tzinfo=timezone.utc)


class MutableClock:
    """Callable clock whose current time tests can move."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set_time(self, hour: int, minute: int = 0) -> None:
        self.now = self.now.replace(hour=hour, minute=minute)


# ========================== Clock Fixtures ================================


@pytest.fixture()
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def clock() -> MutableClock:
    """Fresh clock per test, starting at FIXED_NOW."""
    return MutableClock()


# ========================== Domain Builders ===============================


@pytest.fixture()
def make_parcel():
    """Factory for parcels with loamy soil and mature-but-young trees (factor 1.0)."""

    def _make(
        parcel_id: str = "P-1",
        base: float = 20.0,
        lower: float = 30.0,
        upper: float = 60.0,
        soil: SoilType = SoilType.LOAMY,
        age: float = 15,
        windows: tuple[TimeWindow, ...] = (),
        max_minutes: int = 60,
    ) -> ParcelConfig:
        return ParcelConfig(
            parcel_id=parcel_id,
            name=f"Parcel {parcel_id}",
            profile=TreeProfile(
                variety="Arbequina",
                soil_type=soil,
                age_years=age,
                base_water_need_liters=base,
            ),
            target_range=MoistureRange(lower, upper),
            allowed_windows=windows,
            max_daily_duration_minutes=max_minutes,
        )

    return _make


@pytest.fixture()
def make_weather(now):
    """Factory for dry, mild weather with ET0 5 mm (weather factor 1.0)."""

    def _make(
        temperature: float = 20.0,
        precipitation: float = 0.0,
        probability: float = 10.0,
        wind: float = 10.0,
        et0: float = 5.0,
        timestamp: datetime | None = None,
    ) -> WeatherSnapshot:
        return WeatherSnapshot(
            timestamp=timestamp or now,
            temperature_c=temperature,
            precipitation_mm_24h=precipitation,
            precipitation_probability=probability,
            humidity_pct=55.0,
            wind_speed_kmh=wind,
            et0_mm=et0,
        )

    return _make


@pytest.fixture()
def make_reading(now, clock):
    """Factory for fresh, complete sensor readings."""

    def _make(
        moisture: float | None = 25.0,
        parcel_id: str = "P-1",
        age_minutes: float = 5,
        status: SensorStatus = SensorStatus.ONLINE,
        **extra,
    ) -> SensorReading:
        values = {
            "temperature_c": 18.0,
            "ec_us_cm": 800.0,
            "ph": 6.8,
            "battery_pct": 90.0,
            "signal_strength": 95.0,
        }
        values.update(extra)
        return SensorReading(
            parcel_id=parcel_id,
            moisture_pct=moisture,
            timestamp=now - timedelta(minutes=age_minutes),
            status=status,
            clock=clock,
            **values,
        )

    return _make


@pytest.fixture()
def make_event(now):
    """Factory for completed irrigation events."""

    def _make(
        liters: float,
        hours_ago: float = 1,
        parcel_id: str = "P-1",
        trigger: IrrigationType = IrrigationType.AUTOMATIC,
    ) -> IrrigationEvent:
        start = now - timedelta(hours=hours_ago)
        return IrrigationEvent(
            parcel_id=parcel_id,
            start_time=start,
            end_time=start + timedelta(minutes=10),
            liters=liters,
            trigger=trigger,
        )

    return _make


@pytest.fixture()
def evaluator(clock):
    """Rule evaluator with default thresholds on the fixed clock."""
    return IrrigationRuleEvaluator(EngineSettings(), clock=clock)


# ========================== Store Mocks ===================================


@pytest.fixture()
def sensor_store():
    store = Mock()
    store.get_latest_reading.return_value = None
    store.get_readings_since.return_value = []
    return store


@pytest.fixture()
def event_store():
    store = Mock()
    store.get_events_since.return_value = []
    return store


@pytest.fixture()
def parcel_store():
    store = Mock()
    store.get_parcel.return_value = None
    store.list_parcels.return_value = []
    return store


@pytest.fixture()
def morning_window() -> TimeWindow:
    return TimeWindow(time(6, 0), time(9, 0))
