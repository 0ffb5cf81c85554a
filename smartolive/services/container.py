"""
Engine Container
================
Wires the engine from an :class:`~smartolive.config.AppConfig`: thresholds,
rule evaluator, audit trail and the two services.

Stores and the weather provider are supplied by the caller; everything
else is derived from configuration.

Usage:
    config = load_config()
    setup_logging(config)
    container = EngineContainerBuilder(config).build(sensor_store, event_store, parcel_store)
    recommendations = container.recommendation_service.evaluate_all_stored(weather)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from infrastructure.logging.audit import AuditLogger
from smartolive.config import AppConfig, EngineSettings
from smartolive.domain.rule_evaluator import IrrigationRuleEvaluator
from smartolive.services.recommendation_service import RecommendationService
from smartolive.services.sensor_analysis_service import SensorAnalysisService
from smartolive.utils.time import Clock, local_now

if TYPE_CHECKING:
    from smartolive.services.protocols import (
        IrrigationEventStore,
        ParcelStore,
        SensorReadingStore,
        WeatherProvider,
    )

logger = logging.getLogger(__name__)


@dataclass
class EngineContainer:
    """Configured engine components."""

    config: AppConfig
    settings: EngineSettings
    evaluator: IrrigationRuleEvaluator
    recommendation_service: RecommendationService
    sensor_analysis_service: SensorAnalysisService
    audit_logger: AuditLogger | None = None

    def shutdown(self) -> None:
        if self.audit_logger is not None:
            self.audit_logger.close()


class EngineContainerBuilder:
    """Builds an :class:`EngineContainer` one component at a time."""

    def __init__(self, config: AppConfig, clock: Clock = local_now):
        self.config = config
        self.clock = clock

    def build_settings(self) -> EngineSettings:
        return self.config.engine_settings()

    def build_audit_logger(self) -> AuditLogger | None:
        if not self.config.audit_enabled:
            return None
        return AuditLogger(self.config.audit_log_path, self.config.log_level)

    def build_evaluator(self, settings: EngineSettings) -> IrrigationRuleEvaluator:
        return IrrigationRuleEvaluator(settings, clock=self.clock)

    def build(
        self,
        sensor_store: "SensorReadingStore",
        event_store: "IrrigationEventStore",
        parcel_store: "ParcelStore | None" = None,
        weather_provider: "WeatherProvider | None" = None,
    ) -> EngineContainer:
        settings = self.build_settings()
        evaluator = self.build_evaluator(settings)
        audit_logger = self.build_audit_logger()

        recommendation_service = RecommendationService(
            evaluator,
            sensor_store,
            event_store,
            parcel_store=parcel_store,
            weather_provider=weather_provider,
            audit_logger=audit_logger,
            clock=self.clock,
            max_workers=self.config.evaluation_workers,
        )
        sensor_analysis_service = SensorAnalysisService(sensor_store, settings, clock=self.clock)

        logger.info(
            "Engine built for %s environment (workers=%d, audit=%s)",
            self.config.environment,
            self.config.evaluation_workers,
            "on" if audit_logger else "off",
        )
        return EngineContainer(
            config=self.config,
            settings=settings,
            evaluator=evaluator,
            recommendation_service=recommendation_service,
            sensor_analysis_service=sensor_analysis_service,
            audit_logger=audit_logger,
        )
