"""
Irrigation Schemas
==================

Pydantic models at the engine boundary. Request models validate payloads
coming from stores or providers and convert them to domain objects;
response models serialize engine output.
"""

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from smartolive.domain.irrigation_event import IrrigationEvent
from smartolive.domain.moisture import MoistureRange
from smartolive.domain.parcel import ParcelConfig, TreeProfile
from smartolive.domain.recommendation import Recommendation
from smartolive.domain.sensors.reading import SensorReading
from smartolive.domain.time_window import TimeWindow
from smartolive.domain.weather import WeatherSnapshot
from smartolive.enums.common import (
    IrrigationType,
    ParcelStatus,
    RecommendationLevel,
    SensorStatus,
    SoilType,
)
from smartolive.services.recommendation_service import (
    HistoricalAnalysis,
    OptimalWateringTime,
    WeeklyWateringPlan,
)
from smartolive.utils.time import parse_time_of_day


class TimeWindowSchema(BaseModel):
    """Allowed irrigation window, ``start == end`` means all day."""
    start: time
    end: time

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_time(cls, v):
        """Accept ``HH:MM`` strings."""
        if isinstance(v, str):
            parsed = parse_time_of_day(v)
            if parsed is None:
                raise ValueError(f"Invalid time of day: {v!r}")
            return parsed
        return v

    def to_domain(self) -> TimeWindow:
        return TimeWindow(self.start, self.end)


class TreeProfileSchema(BaseModel):
    """Olive tree profile of a parcel."""
    variety: str = Field(..., min_length=1, description="Cultivar name")
    soil_type: SoilType = Field(..., description="sandy, loamy, clay, loess, calcareous")
    age_years: float = Field(..., ge=0, description="Tree age in years")
    organic_certified: bool = Field(default=False)
    base_water_need_liters: float = Field(..., gt=0, description="Daily base water need in liters")

    @field_validator("soil_type", mode="before")
    @classmethod
    def normalize_soil(cls, v):
        """Normalize soil type string to enum."""
        if isinstance(v, str):
            return SoilType(v.lower())
        return v

    def to_domain(self) -> TreeProfile:
        return TreeProfile(
            variety=self.variety,
            soil_type=self.soil_type,
            age_years=self.age_years,
            base_water_need_liters=self.base_water_need_liters,
            organic_certified=self.organic_certified,
        )


class ParcelConfigSchema(BaseModel):
    """Parcel configuration payload."""
    model_config = ConfigDict(extra="ignore")

    parcel_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    profile: TreeProfileSchema
    moisture_min: float = Field(..., ge=0, le=100, description="Lower target moisture (%)")
    moisture_max: float = Field(..., ge=0, le=100, description="Upper target moisture (%)")
    allowed_windows: List[TimeWindowSchema] = Field(default_factory=list)
    max_daily_duration_minutes: int = Field(default=60, ge=1, le=1440)
    status: ParcelStatus = Field(default=ParcelStatus.IDLE)

    @model_validator(mode="after")
    def check_range(self):
        if self.moisture_min >= self.moisture_max:
            raise ValueError("moisture_min must be below moisture_max")
        return self

    def to_domain(self) -> ParcelConfig:
        return ParcelConfig(
            parcel_id=self.parcel_id,
            name=self.name,
            profile=self.profile.to_domain(),
            target_range=MoistureRange(self.moisture_min, self.moisture_max),
            allowed_windows=tuple(w.to_domain() for w in self.allowed_windows),
            max_daily_duration_minutes=self.max_daily_duration_minutes,
            status=self.status,
        )


class WeatherSnapshotSchema(BaseModel):
    """Weather snapshot from a provider."""
    model_config = ConfigDict(extra="ignore")

    timestamp: datetime
    temperature_c: float = Field(..., ge=-20, le=50)
    precipitation_mm_24h: float = Field(default=0.0, ge=0)
    precipitation_probability: float = Field(default=0.0, ge=0, le=100)
    humidity_pct: float = Field(default=50.0, ge=0, le=100)
    wind_speed_kmh: float = Field(default=0.0, ge=0)
    et0_mm: float = Field(default=0.0, ge=0)

    def to_domain(self) -> WeatherSnapshot:
        return WeatherSnapshot(**self.model_dump())


class SensorReadingSchema(BaseModel):
    """Raw sensor reading. Range checks are left to the validity check."""
    model_config = ConfigDict(extra="ignore")

    parcel_id: str = Field(..., min_length=1)
    timestamp: datetime
    moisture_pct: Optional[float] = None
    status: SensorStatus = Field(default=SensorStatus.ONLINE)
    sensor_id: Optional[str] = None
    temperature_c: Optional[float] = None
    ec_us_cm: Optional[float] = None
    ph: Optional[float] = None
    battery_pct: Optional[float] = None
    signal_strength: Optional[float] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        """Unknown status labels are treated as offline."""
        if isinstance(v, str):
            return SensorStatus.from_string(v)
        return v

    def to_domain(self) -> SensorReading:
        return SensorReading(**self.model_dump())


class IrrigationEventSchema(BaseModel):
    """Past or running irrigation event."""
    model_config = ConfigDict(extra="ignore")

    parcel_id: str = Field(..., min_length=1)
    start_time: datetime
    end_time: Optional[datetime] = None
    liters: float = Field(..., ge=0)
    trigger: IrrigationType = Field(default=IrrigationType.AUTOMATIC)
    triggered_by: str = Field(default="system")
    remark: Optional[str] = None

    @field_validator("trigger", mode="before")
    @classmethod
    def normalize_trigger(cls, v):
        if isinstance(v, str):
            return IrrigationType(v.lower())
        return v

    def to_domain(self) -> IrrigationEvent:
        return IrrigationEvent(**self.model_dump())


class RecommendationResponse(BaseModel):
    """Response schema for a single recommendation."""
    parcel_id: str
    created_at: datetime
    liters: float
    level: RecommendationLevel
    should_irrigate: bool
    reasons: List[str]

    @classmethod
    def from_domain(cls, parcel_id: str, recommendation: Recommendation) -> "RecommendationResponse":
        return cls(
            parcel_id=parcel_id,
            created_at=recommendation.created_at,
            liters=recommendation.liters,
            level=recommendation.level,
            should_irrigate=recommendation.should_irrigate,
            reasons=list(recommendation.reasons),
        )


class OptimalWindowResponse(BaseModel):
    """Response schema for the optimal watering window."""
    parcel_id: str
    start: time
    end: time
    score: float
    reasoning: str

    @classmethod
    def from_domain(cls, result: OptimalWateringTime) -> "OptimalWindowResponse":
        return cls(
            parcel_id=result.parcel_id,
            start=result.window.start,
            end=result.window.end,
            score=round(result.score, 2),
            reasoning=result.reasoning,
        )


class DailyPlanResponse(BaseModel):
    day: date
    liters: float
    action: str
    reasoning: str


class WeeklyPlanResponse(BaseModel):
    """Response schema for a weekly watering plan."""
    parcel_id: str
    generated_on: date
    days: List[DailyPlanResponse]
    total_liters: float

    @classmethod
    def from_domain(cls, plan: WeeklyWateringPlan) -> "WeeklyPlanResponse":
        return cls(
            parcel_id=plan.parcel_id,
            generated_on=plan.generated_on,
            days=[
                DailyPlanResponse(day=d.day, liters=round(d.liters, 1), action=d.action, reasoning=d.reasoning)
                for d in plan.days
            ],
            total_liters=round(plan.total_liters, 1),
        )


class HistoricalAnalysisResponse(BaseModel):
    """Response schema for historical analysis."""
    parcel_id: str
    period_start: date
    period_end: date
    average_moisture: float
    total_liters: float
    reading_count: int
    event_count: int
    water_efficiency: float

    @classmethod
    def from_domain(cls, analysis: HistoricalAnalysis) -> "HistoricalAnalysisResponse":
        return cls(
            parcel_id=analysis.parcel_id,
            period_start=analysis.period_start,
            period_end=analysis.period_end,
            average_moisture=round(analysis.average_moisture, 1),
            total_liters=round(analysis.total_liters, 1),
            reading_count=analysis.reading_count,
            event_count=analysis.event_count,
            water_efficiency=round(analysis.water_efficiency, 3),
        )
