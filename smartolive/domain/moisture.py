"""
Moisture Value Objects
======================
Target moisture band of a parcel and qualitative moisture levels.

Both are frozen dataclasses that validate their own invariants; invalid
values are rejected, never clamped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from smartolive.constants import SensorBounds
from smartolive.domain.exceptions import InvalidRangeError, ValidationError
from smartolive.enums.common import MoistureCategory


def _in_percent_scale(value: float) -> bool:
    return SensorBounds.MOISTURE_MIN <= value <= SensorBounds.MOISTURE_MAX


@dataclass(frozen=True)
class MoistureRange:
    """
    Closed target interval ``[lower, upper]`` on the 0-100 % moisture scale.

    Exactly one of :meth:`contains`, :meth:`is_below`, :meth:`is_above`
    holds for any value.
    """

    lower: float
    upper: float

    def __post_init__(self):
        if self.lower is None or self.upper is None:
            raise InvalidRangeError("Moisture range bounds must not be None")
        if not _in_percent_scale(self.lower) or not _in_percent_scale(self.upper):
            raise InvalidRangeError(
                f"Moisture range bounds must be within 0-100%, got {self.lower}-{self.upper}",
                detail={"lower": self.lower, "upper": self.upper},
            )
        if self.lower >= self.upper:
            raise InvalidRangeError(
                f"Lower bound must be below upper bound, got {self.lower}-{self.upper}",
                detail={"lower": self.lower, "upper": self.upper},
            )

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    def is_below(self, value: float) -> bool:
        return value < self.lower

    def is_above(self, value: float) -> bool:
        return value > self.upper

    @property
    def midpoint(self) -> float:
        return (self.lower + self.upper) / 2

    def __str__(self) -> str:
        return f"{self.lower:g}-{self.upper:g}%"

    def to_dict(self) -> dict[str, float]:
        return {"lower": self.lower, "upper": self.upper}


# (upper bound exclusive, category, advice)
_CATEGORY_BANDS: tuple[tuple[float, MoistureCategory, str], ...] = (
    (20.0, MoistureCategory.VERY_DRY, "Irrigate immediately"),
    (40.0, MoistureCategory.DRY, "Irrigation recommended"),
    (60.0, MoistureCategory.OPTIMAL, "No action required"),
    (80.0, MoistureCategory.MOIST, "Pause irrigation"),
)
_WET_ADVICE = "Check drainage, soil is waterlogged"


@dataclass(frozen=True)
class MoistureLevel:
    """A single moisture measurement classified into a qualitative band."""

    percent: float

    def __post_init__(self):
        if self.percent is None or not _in_percent_scale(self.percent):
            raise ValidationError(f"Moisture must be between 0 and 100%, got {self.percent}")

    @property
    def category(self) -> MoistureCategory:
        for upper, category, _ in _CATEGORY_BANDS:
            if self.percent < upper:
                return category
        return MoistureCategory.VERY_MOIST

    @property
    def recommendation(self) -> str:
        for upper, _, advice in _CATEGORY_BANDS:
            if self.percent < upper:
                return advice
        return _WET_ADVICE

    def is_too_dry(self) -> bool:
        return self.category in (MoistureCategory.VERY_DRY, MoistureCategory.DRY)

    def is_too_wet(self) -> bool:
        return self.category in (MoistureCategory.MOIST, MoistureCategory.VERY_MOIST)

    def is_optimal(self) -> bool:
        return self.category is MoistureCategory.OPTIMAL

    def to_dict(self) -> dict[str, Any]:
        return {
            "percent": self.percent,
            "category": self.category.value,
            "recommendation": self.recommendation,
        }
