"""
Sensor Reading Entity
=====================
A soil sensor measurement for one parcel.

Unlike the engine's value objects this is a mutable entity owned by the
sensor history store: values arrive raw from hardware, so out-of-range
numbers are accepted here and reported by :meth:`SensorReading.bound_violations`
instead of being rejected. The data quality score is recomputed whenever a
field changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from smartolive.constants import SensorBounds, SensorQuality, Staleness, WaterStress
from smartolive.domain.exceptions import ConflictError, ValidationError
from smartolive.enums.common import SensorStatus
from smartolive.utils.time import Clock, ensure_aware, local_now

logger = logging.getLogger(__name__)

_FORBIDDEN_TRANSITIONS = {
    (SensorStatus.ERROR, SensorStatus.ONLINE),
    (SensorStatus.OFFLINE, SensorStatus.CALIBRATING),
}


@dataclass
class SensorReading:
    """
    Latest or historical reading from a parcel's soil sensor.

    Attributes:
        parcel_id: Parcel the sensor belongs to
        moisture_pct: Volumetric soil moisture in % (None when the probe failed)
        timestamp: Measurement time
        status: Sensor operating status
        temperature_c: Soil temperature in °C
        ec_us_cm: Electrical conductivity in µS/cm
        ph: Soil pH
        battery_pct: Battery charge in %
        signal_strength: Radio signal strength in %
        data_quality_score: Derived 0-100 score, read only
    """

    parcel_id: str
    moisture_pct: float | None
    timestamp: datetime
    status: SensorStatus = SensorStatus.ONLINE
    sensor_id: str | None = None
    temperature_c: float | None = None
    ec_us_cm: float | None = None
    ph: float | None = None
    battery_pct: float | None = None
    signal_strength: float | None = None
    clock: Clock = field(default=local_now, repr=False, compare=False)
    data_quality_score: float = field(init=False, default=0.0)

    def __post_init__(self):
        if not self.parcel_id:
            raise ValidationError("Sensor reading requires a parcel id")
        if not isinstance(self.timestamp, datetime):
            raise ValidationError(f"Sensor reading timestamp must be a datetime, got {self.timestamp!r}")
        if not isinstance(self.status, SensorStatus):
            self.status = SensorStatus.from_string(self.status)
        object.__setattr__(self, "_initialized", True)
        self._refresh_quality()

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name != "data_quality_score" and self.__dict__.get("_initialized"):
            self._refresh_quality()

    # ── Staleness & validity ─────────────────────────────────────────

    def age_minutes(self, now: datetime | None = None) -> float:
        current = ensure_aware(now or self.clock())
        return (current - ensure_aware(self.timestamp)).total_seconds() / 60.0

    def is_stale(self, max_age_minutes: float, now: datetime | None = None) -> bool:
        current = ensure_aware(now or self.clock())
        return ensure_aware(self.timestamp) + timedelta(minutes=max_age_minutes) < current

    def bound_violations(self) -> list[str]:
        """Describe every present value outside its physical range."""
        problems: list[str] = []
        if self.moisture_pct is not None and not (
            SensorBounds.MOISTURE_MIN <= self.moisture_pct <= SensorBounds.MOISTURE_MAX
        ):
            problems.append(f"Moisture out of range: {self.moisture_pct}%")
        if self.temperature_c is not None and not (
            SensorBounds.TEMPERATURE_MIN <= self.temperature_c <= SensorBounds.TEMPERATURE_MAX
        ):
            problems.append(f"Soil temperature out of range: {self.temperature_c}°C")
        if self.ec_us_cm is not None and self.ec_us_cm < SensorBounds.EC_MIN:
            problems.append(f"EC out of range: {self.ec_us_cm}µS/cm")
        if self.ph is not None and not (SensorBounds.PH_MIN <= self.ph <= SensorBounds.PH_MAX):
            problems.append(f"pH out of range: {self.ph}")
        if self.battery_pct is not None and not (
            SensorBounds.BATTERY_MIN <= self.battery_pct <= SensorBounds.BATTERY_MAX
        ):
            problems.append(f"Battery out of range: {self.battery_pct}%")
        return problems

    def is_valid(self) -> bool:
        return not self.bound_violations() and self.status is not SensorStatus.ERROR

    def can_provide_data(self, now: datetime | None = None) -> bool:
        return self.status.is_operational and not self.is_stale(Staleness.USABLE, now) and self.is_valid()

    def has_critical_data(self, now: datetime | None = None) -> bool:
        return (
            self.moisture_pct is not None
            and self.status.is_operational
            and not self.is_stale(Staleness.CRITICAL_DATA, now)
        )

    def is_battery_critical(self) -> bool:
        return self.battery_pct is not None and self.battery_pct < SensorQuality.BATTERY_CRITICAL

    def requires_attention(self, now: datetime | None = None) -> bool:
        return (
            self.status.is_error_state
            or self.status is SensorStatus.LOW_BATTERY
            or self.is_battery_critical()
            or self.is_stale(Staleness.ATTENTION, now)
            or self.data_quality_score < SensorQuality.ATTENTION_BELOW
        )

    # ── Derived metrics ──────────────────────────────────────────────

    def calculate_quality_score(self, now: datetime | None = None) -> float:
        """Score 0-100 from battery, signal, status, age and completeness."""
        if self.status is SensorStatus.ERROR:
            return 0.0

        score = SensorQuality.MAX_SCORE

        if self.battery_pct is not None:
            if self.battery_pct < SensorQuality.BATTERY_LOW:
                score -= 20
            elif self.battery_pct < SensorQuality.BATTERY_MEDIUM:
                score -= 10

        if self.signal_strength is not None:
            if self.signal_strength < SensorQuality.SIGNAL_WEAK:
                score -= 15
            elif self.signal_strength < SensorQuality.SIGNAL_FAIR:
                score -= 5

        if self.status is SensorStatus.LOW_BATTERY:
            score -= 10
        elif self.status.is_maintenance_state:
            score -= 30

        if self.is_stale(Staleness.ATTENTION, now):
            score -= 40
        elif self.is_stale(Staleness.USABLE, now):
            score -= 20

        if self.moisture_pct is None:
            score -= 30
        if self.temperature_c is None:
            score -= 10
        if self.ec_us_cm is None:
            score -= 10
        if self.ph is None:
            score -= 10

        return max(0.0, min(SensorQuality.MAX_SCORE, score))

    def _refresh_quality(self) -> None:
        super().__setattr__("data_quality_score", self.calculate_quality_score())

    def water_stress_index(self) -> float | None:
        """0 (no stress) to 1 (maximum stress); None without a moisture value."""
        if self.moisture_pct is None:
            return None
        stress = (100.0 - self.moisture_pct) / 100.0
        if self.temperature_c is not None and self.temperature_c > WaterStress.HOT_TEMPERATURE_C:
            stress *= WaterStress.HOT_MULTIPLIER
        if self.ec_us_cm is not None and self.ec_us_cm > WaterStress.SALINE_EC:
            stress *= WaterStress.SALINE_MULTIPLIER
        if self.ph is not None and (self.ph < WaterStress.PH_LOW or self.ph > WaterStress.PH_HIGH):
            stress *= WaterStress.PH_MULTIPLIER
        return min(1.0, stress)

    # ── Mutations ────────────────────────────────────────────────────

    def correct_moisture(self, value: float) -> None:
        if value is None or not (SensorBounds.MOISTURE_MIN <= value <= SensorBounds.MOISTURE_MAX):
            raise ValidationError(f"Moisture must be between 0 and 100%, got {value}")
        logger.debug("Correcting moisture for parcel %s: %s -> %s", self.parcel_id, self.moisture_pct, value)
        self.moisture_pct = value

    def update_status(self, new_status: SensorStatus) -> None:
        if (self.status, new_status) in _FORBIDDEN_TRANSITIONS:
            raise ConflictError(
                f"Sensor status cannot change from {self.status.value} to {new_status.value}",
                detail={"from": self.status.value, "to": new_status.value},
            )
        self.status = new_status

    def mark_offline(self) -> None:
        self.status = SensorStatus.OFFLINE

    def mark_error(self) -> None:
        self.status = SensorStatus.ERROR

    def summary(self) -> str:
        moisture = "n/a" if self.moisture_pct is None else f"{self.moisture_pct:.1f}%"
        return (
            f"Parcel {self.parcel_id}: moisture {moisture}, status {self.status.value}, "
            f"quality {self.data_quality_score:.0f}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "parcel_id": self.parcel_id,
            "sensor_id": self.sensor_id,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "moisture_pct": self.moisture_pct,
            "temperature_c": self.temperature_c,
            "ec_us_cm": self.ec_us_cm,
            "ph": self.ph,
            "battery_pct": self.battery_pct,
            "signal_strength": self.signal_strength,
            "data_quality_score": self.data_quality_score,
        }
