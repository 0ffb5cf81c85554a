"""
Configuration Tests
===================
Tests for AppConfig environment loading, EngineSettings validation and
logging setup.
"""

import logging
from datetime import time

import pytest

from smartolive.config import AppConfig, EngineSettings, load_config, setup_logging
from smartolive.domain.exceptions import ConfigurationError


class TestEngineSettings:
    """Tests for EngineSettings."""

    def test_defaults(self):
        """Test the default thresholds."""
        settings = EngineSettings()
        assert settings.max_stale_minutes == 30
        assert settings.rain_threshold_mm == 3.0
        assert settings.liters_per_minute == 10
        assert settings.fallback_day_start == time(6, 0)
        assert settings.daily_volume_limit(60) == 600

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"liters_per_minute": 0},
            {"fallback_fraction": 1.5},
            {"max_stale_minutes": 0},
            {"fallback_day_start": time(21, 0)},
        ],
    )
    def test_invalid(self, kwargs):
        """Test rejection of unusable thresholds."""
        with pytest.raises(ConfigurationError):
            EngineSettings(**kwargs)


class TestAppConfig:
    """Tests for environment-driven configuration."""

    def test_env_overrides(self, monkeypatch):
        """Test that SMARTOLIVE_* variables are read."""
        monkeypatch.setenv("SMARTOLIVE_LITERS_PER_MINUTE", "12.5")
        monkeypatch.setenv("SMARTOLIVE_MAX_STALE_MINUTES", "45")
        monkeypatch.setenv("SMARTOLIVE_AUDIT_ENABLED", "no")
        monkeypatch.setenv("SMARTOLIVE_FALLBACK_DAY_START", "07:30")
        config = load_config()
        settings = config.engine_settings()
        assert settings.liters_per_minute == 12.5
        assert settings.max_stale_minutes == 45
        assert settings.fallback_day_start == time(7, 30)
        assert config.audit_enabled is False

    def test_frost_and_elevated_overrides(self, monkeypatch):
        """Test that every engine threshold can be overridden."""
        monkeypatch.setenv("SMARTOLIVE_FROST_TEMPERATURE_C", "2.5")
        monkeypatch.setenv("SMARTOLIVE_ELEVATED_NEED_RATIO", "1.2")
        settings = load_config().engine_settings()
        assert settings.frost_temperature_c == 2.5
        assert settings.elevated_need_ratio == 1.2

    def test_malformed_integer(self, monkeypatch):
        """Test that malformed numbers fail loudly."""
        monkeypatch.setenv("SMARTOLIVE_EVALUATION_WORKERS", "many")
        with pytest.raises(ValueError, match="SMARTOLIVE_EVALUATION_WORKERS"):
            AppConfig()

    def test_malformed_time(self, monkeypatch):
        """Test that malformed times fail loudly."""
        monkeypatch.setenv("SMARTOLIVE_FALLBACK_DAY_END", "late")
        with pytest.raises(ValueError):
            AppConfig()

    def test_invalid_engine_values_fail_at_load(self, monkeypatch):
        """Test that load_config validates derived settings."""
        monkeypatch.setenv("SMARTOLIVE_FALLBACK_FRACTION", "2")
        with pytest.raises(ConfigurationError):
            load_config()


@pytest.fixture
def root_handlers():
    """Remove the handlers setup_logging installs on the root logger."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler.name in {"smartolive_console", "smartolive_file"}:
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def _named(self, root, name):
        return next(h for h in root.handlers if h.name == name)

    def test_applies_level_and_path(self, tmp_path, root_handlers):
        """Test that the configured level and log file are used."""
        log_path = tmp_path / "logs" / "engine.log"
        setup_logging(AppConfig(log_level="WARNING", log_path=str(log_path), DEBUG=False))
        file_handler = self._named(root_handlers, "smartolive_file")
        assert file_handler.baseFilename == str(log_path)
        assert file_handler.level == logging.WARNING
        assert root_handlers.level == logging.WARNING

    def test_debug_overrides_level(self, tmp_path, root_handlers):
        """Test that the debug flag wins over the log level."""
        setup_logging(AppConfig(log_level="ERROR", log_path=str(tmp_path / "engine.log"), DEBUG=True))
        assert self._named(root_handlers, "smartolive_console").level == logging.DEBUG

    def test_idempotent(self, tmp_path, root_handlers):
        """Test that repeated setup adds no duplicate handlers."""
        config = AppConfig(log_path=str(tmp_path / "engine.log"), DEBUG=False)
        setup_logging(config)
        setup_logging(config)
        names = [h.name for h in root_handlers.handlers if h.name in {"smartolive_console", "smartolive_file"}]
        assert sorted(names) == ["smartolive_console", "smartolive_file"]
