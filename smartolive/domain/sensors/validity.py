"""
Sensor Validity Check
=====================
Decides whether a reading may drive an irrigation decision.

A reading is usable when it is present, no older than the staleness
threshold, has a moisture value, every present value is physically plausible,
and the sensor is not in an error state. The reasons for rejection are
returned verbatim so they can be copied into the recommendation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from smartolive.constants import Staleness
from smartolive.domain.sensors.reading import SensorReading


@dataclass(frozen=True)
class SensorValidity:
    """Outcome of a validity check."""

    usable: bool
    reasons: tuple[str, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return self.usable


class SensorValidityCheck:
    """Checks readings against a configurable staleness threshold."""

    def __init__(self, max_age_minutes: float = Staleness.USABLE):
        self.max_age_minutes = max_age_minutes

    def check(self, reading: SensorReading | None, now: datetime) -> SensorValidity:
        if reading is None:
            return SensorValidity(False, ("No sensor data available",))

        reasons: list[str] = []
        if reading.is_stale(self.max_age_minutes, now):
            reasons.append(
                f"Sensor data stale ({reading.age_minutes(now):.0f} min old, limit {self.max_age_minutes:g} min)"
            )
        if reading.moisture_pct is None:
            reasons.append("Sensor reading has no moisture value")
        reasons.extend(reading.bound_violations())
        if reading.status.is_error_state:
            reasons.append(f"Sensor reports error state: {reading.status.value}")

        return SensorValidity(not reasons, tuple(reasons))
