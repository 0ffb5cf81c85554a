"""
Common Enumerations
====================

Enums shared by the domain model, the rule evaluator and the
recommendation service.
"""

from __future__ import annotations

from enum import Enum


class SoilType(str, Enum):
    """Soil classes found in olive groves."""

    SANDY = "sandy"
    LOAMY = "loamy"
    CLAY = "clay"
    LOESS = "loess"
    CALCAREOUS = "calcareous"

    def __str__(self) -> str:
        return self.value


class SensorStatus(str, Enum):
    """
    Operating status reported by a soil sensor.
    Used by: SensorReading, SensorValidityCheck
    """

    ONLINE = "online"
    OFFLINE = "offline"
    ERROR = "error"
    CALIBRATING = "calibrating"
    MAINTENANCE = "maintenance"
    LOW_BATTERY = "low_battery"
    CONFIGURING = "configuring"
    SLEEPING = "sleeping"

    def __str__(self) -> str:
        return self.value

    @property
    def is_operational(self) -> bool:
        return self in (SensorStatus.ONLINE, SensorStatus.LOW_BATTERY)

    @property
    def is_error_state(self) -> bool:
        return self in (SensorStatus.ERROR, SensorStatus.OFFLINE)

    @property
    def is_maintenance_state(self) -> bool:
        return self in (SensorStatus.CALIBRATING, SensorStatus.MAINTENANCE, SensorStatus.CONFIGURING)

    @classmethod
    def from_string(cls, value: str | None) -> "SensorStatus":
        """Parse a status label, treating unknown values as offline."""
        if not value:
            return cls.OFFLINE
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.OFFLINE


class IrrigationType(str, Enum):
    """What triggered an irrigation event."""

    AUTOMATIC = "automatic"
    MANUAL = "manual"
    SCHEDULED = "scheduled"
    FALLBACK = "fallback"
    TEST = "test"

    def __str__(self) -> str:
        return self.value


_SEVERITY = {
    "none": 0,
    "normal": 1,
    "elevated": 2,
    "critical": 3,
}


class RecommendationLevel(str, Enum):
    """
    Urgency of an irrigation recommendation.

    ``NONE < NORMAL < ELEVATED < CRITICAL`` form a total order.
    ``FALLBACK`` sits outside that order: it marks decisions made without
    usable sensor data and has no severity.
    """

    NONE = "none"
    NORMAL = "normal"
    ELEVATED = "elevated"
    CRITICAL = "critical"
    FALLBACK = "fallback"

    def __str__(self) -> str:
        return self.value

    @property
    def severity(self) -> int | None:
        return _SEVERITY.get(self.value)

    @property
    def is_fallback(self) -> bool:
        return self is RecommendationLevel.FALLBACK

    def is_more_severe_than(self, other: "RecommendationLevel") -> bool:
        if self.severity is None or other.severity is None:
            raise TypeError("Fallback recommendations are not ordered by severity")
        return self.severity > other.severity


class ParcelStatus(str, Enum):
    """Operational status of a parcel."""

    IDLE = "idle"
    IRRIGATING = "irrigating"
    ERROR = "error"
    LOCKED = "locked"

    def __str__(self) -> str:
        return self.value


class MoistureCategory(str, Enum):
    """Qualitative soil moisture bands."""

    VERY_DRY = "very_dry"
    DRY = "dry"
    OPTIMAL = "optimal"
    MOIST = "moist"
    VERY_MOIST = "very_moist"

    def __str__(self) -> str:
        return self.value


class SystemHealth(str, Enum):
    """
    Overall health of an irrigation system.
    Used by: IrrigationSystem.status_report
    """

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class SystemStatus(str, Enum):
    """Lifecycle status of an irrigation system."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value
