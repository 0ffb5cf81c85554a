"""
Services Package
================
Orchestration over the domain layer: batch evaluation, planning and
sensor analytics.
"""

from smartolive.services.container import EngineContainer, EngineContainerBuilder
from smartolive.services.recommendation_service import (
    DailyWateringPlan,
    HistoricalAnalysis,
    OptimalWateringTime,
    RecommendationService,
    WeeklyWateringPlan,
)
from smartolive.services.sensor_analysis_service import SensorAnalysisService

__all__ = [
    "DailyWateringPlan",
    "EngineContainer",
    "EngineContainerBuilder",
    "HistoricalAnalysis",
    "OptimalWateringTime",
    "RecommendationService",
    "SensorAnalysisService",
    "WeeklyWateringPlan",
]
