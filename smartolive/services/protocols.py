"""
Service protocols (structural typing interfaces).

The engine never talks to storage or weather APIs itself. Callers hand the
recommendation service objects satisfying these protocols; any object with
matching methods qualifies, no explicit inheritance needed, which keeps
tests trivially mockable.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence, runtime_checkable

from smartolive.domain.irrigation_event import IrrigationEvent
from smartolive.domain.parcel import ParcelConfig
from smartolive.domain.sensors.reading import SensorReading
from smartolive.domain.weather import WeatherSnapshot


@runtime_checkable
class ParcelStore(Protocol):
    """Read access to parcel configurations."""

    def get_parcel(self, parcel_id: str) -> ParcelConfig | None:
        """Return the parcel, or ``None`` if it does not exist."""
        ...

    def list_parcels(self) -> Sequence[ParcelConfig]:
        """Return every configured parcel."""
        ...


@runtime_checkable
class SensorReadingStore(Protocol):
    """Read access to sensor history."""

    def get_latest_reading(self, parcel_id: str) -> SensorReading | None:
        """Most recent reading of a parcel, or ``None``."""
        ...

    def get_readings_since(self, parcel_id: str, since: datetime) -> Sequence[SensorReading]:
        """Readings taken at or after ``since``, oldest first."""
        ...


@runtime_checkable
class IrrigationEventStore(Protocol):
    """Read access to irrigation history."""

    def get_events_since(self, parcel_id: str, since: datetime) -> Sequence[IrrigationEvent]:
        """Events that started at or after ``since``."""
        ...


@runtime_checkable
class WeatherProvider(Protocol):
    """Source of weather snapshots."""

    def get_current_snapshot(self) -> WeatherSnapshot:
        ...

    def get_forecast_24h(self) -> WeatherSnapshot:
        ...
