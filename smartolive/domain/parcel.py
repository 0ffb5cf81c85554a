"""
Parcel Configuration
====================
Immutable configuration of an olive parcel: tree profile, target moisture
band, allowed irrigation windows and daily duration budget.

Following Domain-Driven Design (DDD), instances are built through
:meth:`ParcelConfig.create`, which validates every invariant. The only
field that changes over a parcel's life is its status, and that produces
a new instance via :meth:`ParcelConfig.with_status`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Iterable

from smartolive.constants import DEFAULT_MAX_DAILY_DURATION_MINUTES
from smartolive.domain.exceptions import ValidationError
from smartolive.domain.moisture import MoistureRange
from smartolive.domain.time_window import TimeWindow
from smartolive.enums.common import ParcelStatus, SoilType
from smartolive.utils.time import Clock, local_now


@dataclass(frozen=True)
class TreeProfile:
    """
    Olive trees growing on a parcel.

    Attributes:
        variety: Cultivar name (e.g. "Arbequina")
        soil_type: Soil class of the parcel
        age_years: Tree age in years
        organic_certified: Whether the parcel is certified organic
        base_water_need_liters: Daily water need under reference conditions
    """

    variety: str
    soil_type: SoilType
    age_years: float
    base_water_need_liters: float
    organic_certified: bool = False

    def __post_init__(self):
        if not self.variety or not self.variety.strip():
            raise ValidationError("Tree variety must not be empty")
        if not isinstance(self.soil_type, SoilType):
            try:
                object.__setattr__(self, "soil_type", SoilType(self.soil_type))
            except ValueError:
                raise ValidationError(f"Unknown soil type: {self.soil_type!r}") from None
        if self.age_years is None or self.age_years < 0:
            raise ValidationError(f"Tree age must not be negative, got {self.age_years}")
        if self.base_water_need_liters is None or self.base_water_need_liters <= 0:
            raise ValidationError(f"Base water need must be positive, got {self.base_water_need_liters}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "variety": self.variety,
            "soil_type": self.soil_type.value,
            "age_years": self.age_years,
            "organic_certified": self.organic_certified,
            "base_water_need_liters": self.base_water_need_liters,
        }


@dataclass(frozen=True)
class ParcelConfig:
    """Read-only parcel snapshot handed to the engine."""

    parcel_id: str
    name: str
    profile: TreeProfile
    target_range: MoistureRange
    allowed_windows: tuple[TimeWindow, ...] = ()
    max_daily_duration_minutes: int = DEFAULT_MAX_DAILY_DURATION_MINUTES
    status: ParcelStatus = ParcelStatus.IDLE
    created_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self):
        if not self.parcel_id:
            raise ValidationError("Parcel id must not be empty")
        if not self.name or not self.name.strip():
            raise ValidationError("Parcel name must not be empty")
        if not isinstance(self.profile, TreeProfile):
            raise ValidationError("Parcel requires a tree profile")
        if not isinstance(self.target_range, MoistureRange):
            raise ValidationError("Parcel requires a target moisture range")
        if self.max_daily_duration_minutes is None or self.max_daily_duration_minutes <= 0:
            raise ValidationError(
                f"Max daily duration must be positive, got {self.max_daily_duration_minutes}"
            )
        if not isinstance(self.allowed_windows, tuple):
            object.__setattr__(self, "allowed_windows", tuple(self.allowed_windows))

    @classmethod
    def create(
        cls,
        name: str,
        profile: TreeProfile,
        target_range: MoistureRange,
        *,
        parcel_id: str | None = None,
        allowed_windows: Iterable[TimeWindow] = (),
        max_daily_duration_minutes: int = DEFAULT_MAX_DAILY_DURATION_MINUTES,
        clock: Clock = local_now,
    ) -> "ParcelConfig":
        """Validated builder; generates an id when none is given."""
        return cls(
            parcel_id=parcel_id or f"P-{uuid.uuid4().hex[:8].upper()}",
            name=name.strip() if isinstance(name, str) else name,
            profile=profile,
            target_range=target_range,
            allowed_windows=tuple(allowed_windows),
            max_daily_duration_minutes=max_daily_duration_minutes,
            created_at=clock(),
        )

    @property
    def base_water_need_liters(self) -> float:
        return self.profile.base_water_need_liters

    @property
    def is_time_restricted(self) -> bool:
        return bool(self.allowed_windows)

    def with_status(self, status: ParcelStatus) -> "ParcelConfig":
        return replace(self, status=ParcelStatus(status))

    def with_window(self, window: TimeWindow) -> "ParcelConfig":
        return replace(self, allowed_windows=self.allowed_windows + (window,))

    def is_irrigation_allowed_at(self, moment: datetime) -> bool:
        if not self.allowed_windows:
            return True
        return any(window.contains_datetime(moment) for window in self.allowed_windows)

    def is_irrigation_allowed_now(self, clock: Clock = local_now) -> bool:
        return self.is_irrigation_allowed_at(clock())

    def to_dict(self) -> dict[str, Any]:
        return {
            "parcel_id": self.parcel_id,
            "name": self.name,
            "profile": self.profile.to_dict(),
            "target_range": self.target_range.to_dict(),
            "allowed_windows": [w.to_dict() for w in self.allowed_windows],
            "max_daily_duration_minutes": self.max_daily_duration_minutes,
            "status": self.status.value,
        }
