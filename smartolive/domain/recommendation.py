"""
Recommendation Value Object
===========================
Output of one rule evaluation: liters to apply, urgency level and the
reasons collected along the way, in evaluation order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from smartolive.domain.exceptions import ValidationError
from smartolive.enums.common import RecommendationLevel


@dataclass(frozen=True)
class Recommendation:
    """Immutable irrigation decision for one parcel."""

    created_at: datetime
    liters: float
    level: RecommendationLevel
    reasons: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.liters is None or self.liters < 0:
            raise ValidationError(f"Recommended liters must not be negative, got {self.liters}")
        if not isinstance(self.level, RecommendationLevel):
            object.__setattr__(self, "level", RecommendationLevel(self.level))
        if not isinstance(self.reasons, tuple):
            object.__setattr__(self, "reasons", tuple(self.reasons))

    @classmethod
    def skip(cls, created_at: datetime, reasons: Iterable[str]) -> "Recommendation":
        return cls(created_at, 0.0, RecommendationLevel.NONE, tuple(reasons))

    @classmethod
    def fallback(cls, created_at: datetime, liters: float, reasons: Iterable[str]) -> "Recommendation":
        return cls(created_at, liters, RecommendationLevel.FALLBACK, tuple(reasons))

    @property
    def should_irrigate(self) -> bool:
        return self.liters > 0

    @property
    def reasoning(self) -> str:
        return "; ".join(self.reasons)

    def to_dict(self) -> dict[str, Any]:
        return {
            "created_at": self.created_at.isoformat(),
            "liters": self.liters,
            "level": self.level.value,
            "should_irrigate": self.should_irrigate,
            "reasons": list(self.reasons),
        }
