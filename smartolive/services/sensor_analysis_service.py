"""
Sensor Analysis Service
=======================
Moisture statistics over a parcel's recent sensor history.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from smartolive.config import EngineSettings
from smartolive.utils.time import Clock, ensure_aware, local_now

if TYPE_CHECKING:
    from smartolive.domain.sensors.reading import SensorReading
    from smartolive.services.protocols import SensorReadingStore

logger = logging.getLogger(__name__)


class SensorAnalysisService:
    """Aggregates moisture readings for monitoring and alerting."""

    def __init__(
        self,
        sensor_store: "SensorReadingStore",
        settings: EngineSettings | None = None,
        clock: Clock = local_now,
    ):
        self._sensor_store = sensor_store
        self._settings = settings or EngineSettings()
        self._clock = clock

    def _moisture_since(self, parcel_id: str, hours: float) -> list["SensorReading"]:
        since = self._clock() - timedelta(hours=hours)
        readings = self._sensor_store.get_readings_since(parcel_id, since)
        return sorted(
            (r for r in readings if r.moisture_pct is not None),
            key=lambda r: ensure_aware(r.timestamp),
        )

    def average_moisture(self, parcel_id: str, hours: float) -> float | None:
        readings = self._moisture_since(parcel_id, hours)
        if not readings:
            return None
        return sum(r.moisture_pct for r in readings) / len(readings)

    def average_moisture_24h(self, parcel_id: str) -> float | None:
        """Average moisture over the last day, None without readings."""
        return self.average_moisture(parcel_id, 24)

    def is_moisture_critical(self, parcel_id: str, threshold: float | None = None) -> bool:
        """True when the last hour's average moisture is below the threshold."""
        limit = self._settings.critical_moisture_pct if threshold is None else threshold
        average = self.average_moisture(parcel_id, 1)
        if average is None:
            return False
        critical = average < limit
        if critical:
            logger.warning("Parcel %s moisture critical: %.1f%% < %.1f%%", parcel_id, average, limit)
        return critical

    def moisture_trend(self, parcel_id: str, hours: float = 24) -> float:
        """Change in moisture points from the earliest to the latest reading."""
        readings = self._moisture_since(parcel_id, hours)
        if len(readings) < 2:
            return 0.0
        return readings[-1].moisture_pct - readings[0].moisture_pct
