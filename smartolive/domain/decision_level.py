"""
Decision Level Classifier
=========================
Maps current moisture and computed need to a recommendation level.
"""

from __future__ import annotations

from smartolive.constants import CRITICAL_MOISTURE_PCT
from smartolive.enums.common import RecommendationLevel

ELEVATED_NEED_RATIO = 1.5


def classify_level(
    current_moisture: float,
    need_liters: float,
    base_liters: float,
    *,
    critical_moisture_pct: float = CRITICAL_MOISTURE_PCT,
    elevated_need_ratio: float = ELEVATED_NEED_RATIO,
) -> RecommendationLevel:
    """
    Classify an irrigation need.

    The critical floor is absolute: any moisture below it is critical
    regardless of the computed need. Never returns FALLBACK.
    """
    if current_moisture < critical_moisture_pct:
        return RecommendationLevel.CRITICAL
    if need_liters > elevated_need_ratio * base_liters:
        return RecommendationLevel.ELEVATED
    if need_liters > 0:
        return RecommendationLevel.NORMAL
    return RecommendationLevel.NONE
