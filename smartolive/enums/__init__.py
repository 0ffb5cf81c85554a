"""
Enums Module
============

Enumeration types for the SmartOlive irrigation engine.
"""

from smartolive.enums.common import (
    IrrigationType,
    MoistureCategory,
    ParcelStatus,
    RecommendationLevel,
    SensorStatus,
    SoilType,
    SystemHealth,
    SystemStatus,
)

__all__ = [
    "IrrigationType",
    "MoistureCategory",
    "ParcelStatus",
    "RecommendationLevel",
    "SensorStatus",
    "SoilType",
    "SystemHealth",
    "SystemStatus",
]
