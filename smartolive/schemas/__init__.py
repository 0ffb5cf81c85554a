"""
Schemas Package
===============
Pydantic models for validating collaborator payloads and serializing
engine results.
"""

from smartolive.schemas.irrigation import (
    DailyPlanResponse,
    HistoricalAnalysisResponse,
    IrrigationEventSchema,
    OptimalWindowResponse,
    ParcelConfigSchema,
    RecommendationResponse,
    SensorReadingSchema,
    TimeWindowSchema,
    TreeProfileSchema,
    WeatherSnapshotSchema,
    WeeklyPlanResponse,
)

__all__ = [
    "DailyPlanResponse",
    "HistoricalAnalysisResponse",
    "IrrigationEventSchema",
    "OptimalWindowResponse",
    "ParcelConfigSchema",
    "RecommendationResponse",
    "SensorReadingSchema",
    "TimeWindowSchema",
    "TreeProfileSchema",
    "WeatherSnapshotSchema",
    "WeeklyPlanResponse",
]
