"""
Irrigation Event
================
A single watering run on a parcel. Running while ``end_time`` is None.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from smartolive.domain.exceptions import ConflictError, ValidationError
from smartolive.enums.common import IrrigationType
from smartolive.utils.time import ensure_aware, local_now


@dataclass
class IrrigationEvent:
    """Irrigation run with its volume and trigger."""

    parcel_id: str
    start_time: datetime
    liters: float
    trigger: IrrigationType = IrrigationType.AUTOMATIC
    triggered_by: str = "system"
    end_time: datetime | None = None
    remark: str | None = None

    def __post_init__(self):
        if not self.parcel_id:
            raise ValidationError("Irrigation event requires a parcel id")
        if self.liters is None or self.liters < 0:
            raise ValidationError(f"Irrigation liters must not be negative, got {self.liters}")
        if not isinstance(self.trigger, IrrigationType):
            self.trigger = IrrigationType(self.trigger)
        if self.end_time is not None and ensure_aware(self.end_time) < ensure_aware(self.start_time):
            raise ValidationError("Irrigation end time must not precede start time")

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    @property
    def duration_minutes(self) -> float | None:
        if self.end_time is None:
            return None
        return (ensure_aware(self.end_time) - ensure_aware(self.start_time)).total_seconds() / 60.0

    def complete(self, remark: str | None = None, at: datetime | None = None) -> None:
        """Close the event; a remark replaces any earlier one."""
        if self.end_time is not None:
            raise ConflictError("Irrigation event is already completed", detail={"parcel_id": self.parcel_id})
        end = at or local_now()
        if ensure_aware(end) < ensure_aware(self.start_time):
            raise ValidationError("Irrigation end time must not precede start time")
        self.end_time = end
        if remark is not None:
            self.remark = remark

    def started_since(self, moment: datetime) -> bool:
        return ensure_aware(self.start_time) >= ensure_aware(moment)

    def to_dict(self) -> dict[str, Any]:
        return {
            "parcel_id": self.parcel_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "liters": self.liters,
            "trigger": self.trigger.value,
            "triggered_by": self.triggered_by,
            "remark": self.remark,
            "duration_minutes": self.duration_minutes,
        }
