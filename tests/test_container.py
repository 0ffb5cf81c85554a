"""
Engine Container Tests
======================
Tests for wiring the engine from AppConfig.
"""

from pathlib import Path

import pytest

from infrastructure.logging.audit import AuditLogger
from smartolive.config import AppConfig
from smartolive.enums.common import RecommendationLevel
from smartolive.services.container import EngineContainerBuilder


@pytest.fixture
def config(tmp_path):
    return AppConfig(
        environment="test",
        audit_enabled=True,
        audit_log_path=str(tmp_path / "audit" / "decisions.log"),
        evaluation_workers=4,
        max_stale_minutes=45,
        frost_temperature_c=3.0,
    )


@pytest.fixture
def container(config, clock, sensor_store, event_store, parcel_store):
    built = EngineContainerBuilder(config, clock=clock).build(sensor_store, event_store, parcel_store)
    yield built
    built.shutdown()


class TestEngineContainerBuilder:
    """Tests for EngineContainerBuilder."""

    def test_settings_from_config(self, container):
        """Test that engine thresholds come from the configuration."""
        assert container.settings.max_stale_minutes == 45
        assert container.evaluator.settings is container.settings
        assert container.evaluator.settings.frost_temperature_c == 3.0

    def test_service_wiring(self, container):
        """Test worker count and audit trail on the recommendation service."""
        service = container.recommendation_service
        assert service.max_workers == 4
        assert service.evaluator is container.evaluator
        assert isinstance(container.audit_logger, AuditLogger)
        assert service.audit_logger is container.audit_logger
        assert container.audit_logger.log_path == Path(container.config.audit_log_path)

    def test_audit_disabled(self, config, clock, sensor_store, event_store):
        """Test that no audit trail is created when disabled."""
        config.audit_enabled = False
        container = EngineContainerBuilder(config, clock=clock).build(sensor_store, event_store)
        assert container.audit_logger is None
        assert container.recommendation_service.audit_logger is None
        container.shutdown()

    def test_recommendations_are_audited(
        self, container, parcel_store, sensor_store, make_parcel, make_weather, make_reading
    ):
        """Test that evaluations through the container reach the audit file."""
        parcel_store.get_parcel.return_value = make_parcel("A")
        sensor_store.get_latest_reading.return_value = make_reading(25, parcel_id="A")

        rec = container.recommendation_service.recommend("A", make_weather())

        assert rec.level is RecommendationLevel.NORMAL
        for handler in container.audit_logger.logger.handlers:
            handler.flush()
        assert "parcel:A" in Path(container.config.audit_log_path).read_text(encoding="utf-8")
