"""
Irrigation System Aggregate
===========================
System-wide configuration and the set of parcels it manages.

The aggregate is a frozen dataclass; consistency rules such as the parcel
cap are enforced by builder methods that return a new instance.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Mapping

from smartolive.constants import CRITICAL_MOISTURE_PCT
from smartolive.domain.exceptions import ConflictError, ParcelNotFoundError, ValidationError
from smartolive.enums.common import SystemHealth, SystemStatus
from smartolive.utils.time import Clock, local_now

logger = logging.getLogger(__name__)

HEALTHY_ACTIVE_RATIO = 0.8

_HEALTH_ADVICE: dict[SystemHealth, tuple[str, ...]] = {
    SystemHealth.UNKNOWN: ("Add parcels to the system",),
    SystemHealth.CRITICAL: (
        "Inspect parcels reporting errors",
        "Check sensor connectivity and power supply",
    ),
    SystemHealth.WARNING: (
        "Review inactive parcels",
        "Verify sensor battery levels",
    ),
    SystemHealth.HEALTHY: ("System operating normally",),
}


@dataclass(frozen=True)
class SystemConfiguration:
    """
    System-wide settings.

    Attributes:
        automatic_mode: Whether recommendations may be executed automatically
        max_parcels: Parcel cap, 1-100
        daily_water_limit_liters: Volume budget for all parcels per day
        sensor_polling_minutes: Sensor polling interval, 1-60
        weather_update_hours: Weather refresh interval, 1-24
        email_alerts: Send alert emails
        sms_alerts: Send alert SMS
        critical_moisture_pct: System-wide critical moisture threshold
    """

    automatic_mode: bool = True
    max_parcels: int = 50
    daily_water_limit_liters: float = 5000.0
    sensor_polling_minutes: int = 10
    weather_update_hours: int = 3
    email_alerts: bool = True
    sms_alerts: bool = False
    critical_moisture_pct: float = CRITICAL_MOISTURE_PCT

    def __post_init__(self):
        if not (1 <= self.max_parcels <= 100):
            raise ValidationError(f"Max parcels must be between 1 and 100, got {self.max_parcels}")
        if self.daily_water_limit_liters < 0:
            raise ValidationError(f"Daily water limit must not be negative, got {self.daily_water_limit_liters}")
        if not (1 <= self.sensor_polling_minutes <= 60):
            raise ValidationError(
                f"Sensor polling interval must be between 1 and 60 minutes, got {self.sensor_polling_minutes}"
            )
        if not (1 <= self.weather_update_hours <= 24):
            raise ValidationError(
                f"Weather update interval must be between 1 and 24 hours, got {self.weather_update_hours}"
            )
        if not (0 <= self.critical_moisture_pct <= 100):
            raise ValidationError(
                f"Critical moisture must be between 0 and 100%, got {self.critical_moisture_pct}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "automatic_mode": self.automatic_mode,
            "max_parcels": self.max_parcels,
            "daily_water_limit_liters": self.daily_water_limit_liters,
            "sensor_polling_minutes": self.sensor_polling_minutes,
            "weather_update_hours": self.weather_update_hours,
            "email_alerts": self.email_alerts,
            "sms_alerts": self.sms_alerts,
            "critical_moisture_pct": self.critical_moisture_pct,
        }


@dataclass(frozen=True)
class SystemWaterNeed:
    """Summed water need of all parcels against the system's daily limit."""

    total_liters: float
    daily_limit_liters: float
    per_parcel: dict[str, float] = field(default_factory=dict)

    @property
    def within_limit(self) -> bool:
        return self.total_liters <= self.daily_limit_liters

    @property
    def utilization(self) -> float:
        if self.daily_limit_liters <= 0:
            return 0.0
        return self.total_liters / self.daily_limit_liters

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_liters": round(self.total_liters, 1),
            "daily_limit_liters": self.daily_limit_liters,
            "within_limit": self.within_limit,
            "utilization": round(self.utilization, 3),
            "per_parcel": self.per_parcel,
        }


@dataclass(frozen=True)
class SystemStatusReport:
    """Snapshot of system health."""

    system_id: str
    health: SystemHealth
    total_parcels: int
    active_parcels: int
    error_parcels: int
    water_used_today_liters: float
    daily_limit_liters: float
    recommendations: tuple[str, ...]
    generated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "system_id": self.system_id,
            "health": self.health.value,
            "total_parcels": self.total_parcels,
            "active_parcels": self.active_parcels,
            "error_parcels": self.error_parcels,
            "water_used_today_liters": self.water_used_today_liters,
            "daily_limit_liters": self.daily_limit_liters,
            "recommendations": list(self.recommendations),
            "generated_at": self.generated_at.isoformat(),
        }


@dataclass(frozen=True)
class IrrigationSystem:
    """Aggregate root over the parcels of one installation."""

    system_id: str
    name: str
    config: SystemConfiguration = field(default_factory=SystemConfiguration)
    parcel_ids: tuple[str, ...] = ()
    status: SystemStatus = SystemStatus.ACTIVE
    created_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationError("System name must not be empty")
        if len(self.parcel_ids) > self.config.max_parcels:
            raise ValidationError(
                f"System holds {len(self.parcel_ids)} parcels, limit is {self.config.max_parcels}"
            )
        if len(set(self.parcel_ids)) != len(self.parcel_ids):
            raise ValidationError("Parcel ids must be unique within a system")

    @classmethod
    def create(
        cls,
        name: str,
        config: SystemConfiguration | None = None,
        clock: Clock = local_now,
    ) -> "IrrigationSystem":
        return cls(
            system_id=f"SYS-{uuid.uuid4().hex[:8].upper()}",
            name=name,
            config=config or SystemConfiguration(),
            created_at=clock(),
        )

    def with_parcel(self, parcel_id: str) -> "IrrigationSystem":
        if parcel_id in self.parcel_ids:
            raise ConflictError(f"Parcel {parcel_id} already belongs to system {self.system_id}")
        if len(self.parcel_ids) >= self.config.max_parcels:
            raise ValidationError(
                f"Maximum number of parcels reached: {self.config.max_parcels}",
                detail={"system_id": self.system_id, "parcel_id": parcel_id},
            )
        return replace(self, parcel_ids=self.parcel_ids + (parcel_id,))

    def without_parcel(self, parcel_id: str) -> "IrrigationSystem":
        if parcel_id not in self.parcel_ids:
            raise ParcelNotFoundError(parcel_id)
        return replace(self, parcel_ids=tuple(p for p in self.parcel_ids if p != parcel_id))

    def with_configuration(self, config: SystemConfiguration) -> "IrrigationSystem":
        return replace(self, config=config)

    def with_status(self, status: SystemStatus) -> "IrrigationSystem":
        return replace(self, status=SystemStatus(status))

    @property
    def can_run_automatic_mode(self) -> bool:
        return self.config.automatic_mode and self.status is SystemStatus.ACTIVE and bool(self.parcel_ids)

    def total_water_need(self, needs: Mapping[str, float]) -> SystemWaterNeed:
        """Sum the liters of parcels belonging to this system."""
        per_parcel = {pid: liters for pid, liters in needs.items() if pid in self.parcel_ids}
        ignored = set(needs) - set(per_parcel)
        if ignored:
            logger.debug("Ignoring needs of parcels outside system %s: %s", self.system_id, sorted(ignored))
        total = sum(per_parcel.values())
        result = SystemWaterNeed(total, self.config.daily_water_limit_liters, per_parcel)
        if not result.within_limit:
            logger.warning(
                "System %s water need %.1fL exceeds daily limit %.1fL",
                self.system_id,
                total,
                self.config.daily_water_limit_liters,
            )
        return result

    def status_report(
        self,
        active_parcels: int,
        error_parcels: int,
        water_used_today_liters: float = 0.0,
        clock: Clock = local_now,
    ) -> SystemStatusReport:
        total = len(self.parcel_ids)
        if total == 0:
            health = SystemHealth.UNKNOWN
        elif error_parcels > 0:
            health = SystemHealth.CRITICAL
        elif active_parcels / total < HEALTHY_ACTIVE_RATIO:
            health = SystemHealth.WARNING
        else:
            health = SystemHealth.HEALTHY

        advice = list(_HEALTH_ADVICE[health])
        if water_used_today_liters > self.config.daily_water_limit_liters:
            advice.append("Daily water limit exceeded")

        return SystemStatusReport(
            system_id=self.system_id,
            health=health,
            total_parcels=total,
            active_parcels=active_parcels,
            error_parcels=error_parcels,
            water_used_today_liters=water_used_today_liters,
            daily_limit_liters=self.config.daily_water_limit_liters,
            recommendations=tuple(advice),
            generated_at=clock(),
        )
