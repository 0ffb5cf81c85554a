"""
Configuration for SmartOlive
============================
Runtime settings loaded from ``SMARTOLIVE_*`` environment variables, the
engine thresholds derived from them, and the logging setup.
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import time
from logging.handlers import RotatingFileHandler
from pathlib import Path

from smartolive.constants import CRITICAL_MOISTURE_PCT, Staleness
from smartolive.domain.exceptions import ConfigurationError
from smartolive.utils.time import parse_time_of_day


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer.") from None


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number.") from None


def _env_time(name: str, default: str) -> time:
    value = os.getenv(name, default)
    parsed = parse_time_of_day(value)
    if parsed is None:
        raise ValueError(f"Environment variable {name} must be a time of day (HH:MM).")
    return parsed


@dataclass(frozen=True)
class EngineSettings:
    """Thresholds used by the rule evaluator and recommendation service."""

    max_stale_minutes: float = Staleness.USABLE
    rain_threshold_mm: float = 3.0
    high_rain_probability: float = 70.0
    critical_moisture_pct: float = CRITICAL_MOISTURE_PCT
    weather_max_age_hours: float = 2.0
    frost_temperature_c: float = 0.0
    max_wind_kmh: float = 40.0
    # Converts the daily duration budget (minutes) into a volume budget (liters)
    liters_per_minute: float = 10.0
    fallback_fraction: float = 0.5
    fallback_day_start: time = time(6, 0)
    fallback_day_end: time = time(20, 0)
    elevated_need_ratio: float = 1.5

    def __post_init__(self):
        if self.max_stale_minutes <= 0:
            raise ConfigurationError("max_stale_minutes must be positive")
        if self.liters_per_minute <= 0:
            raise ConfigurationError("liters_per_minute must be positive")
        if not (0 <= self.fallback_fraction <= 1):
            raise ConfigurationError("fallback_fraction must be between 0 and 1")
        if not (0 <= self.critical_moisture_pct <= 100):
            raise ConfigurationError("critical_moisture_pct must be between 0 and 100")
        if self.fallback_day_start >= self.fallback_day_end:
            raise ConfigurationError("fallback daytime must start before it ends")
        if self.elevated_need_ratio <= 0:
            raise ConfigurationError("elevated_need_ratio must be positive")

    def daily_volume_limit(self, max_daily_duration_minutes: float) -> float:
        return max_daily_duration_minutes * self.liters_per_minute


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("SMARTOLIVE_ENV", "development"))
    DEBUG: bool = field(default_factory=lambda: _env_bool("SMARTOLIVE_DEBUG", False))
    log_level: str = field(default_factory=lambda: os.getenv("SMARTOLIVE_LOG_LEVEL", "INFO"))
    log_path: str = field(default_factory=lambda: os.getenv("SMARTOLIVE_LOG_PATH", "logs/smartolive.log"))
    audit_enabled: bool = field(default_factory=lambda: _env_bool("SMARTOLIVE_AUDIT_ENABLED", True))
    audit_log_path: str = field(default_factory=lambda: os.getenv("SMARTOLIVE_AUDIT_LOG_PATH", "logs/audit.log"))

    # Batch evaluation; 0 evaluates parcels sequentially
    evaluation_workers: int = field(default_factory=lambda: _env_int("SMARTOLIVE_EVALUATION_WORKERS", 0))

    # Engine thresholds
    max_stale_minutes: int = field(default_factory=lambda: _env_int("SMARTOLIVE_MAX_STALE_MINUTES", 30))
    rain_threshold_mm: float = field(default_factory=lambda: _env_float("SMARTOLIVE_RAIN_THRESHOLD_MM", 3.0))
    high_rain_probability: float = field(
        default_factory=lambda: _env_float("SMARTOLIVE_HIGH_RAIN_PROBABILITY", 70.0)
    )
    critical_moisture_pct: float = field(
        default_factory=lambda: _env_float("SMARTOLIVE_CRITICAL_MOISTURE_PCT", CRITICAL_MOISTURE_PCT)
    )
    weather_max_age_hours: float = field(
        default_factory=lambda: _env_float("SMARTOLIVE_WEATHER_MAX_AGE_HOURS", 2.0)
    )
    frost_temperature_c: float = field(
        default_factory=lambda: _env_float("SMARTOLIVE_FROST_TEMPERATURE_C", 0.0)
    )
    max_wind_kmh: float = field(default_factory=lambda: _env_float("SMARTOLIVE_MAX_WIND_KMH", 40.0))
    liters_per_minute: float = field(default_factory=lambda: _env_float("SMARTOLIVE_LITERS_PER_MINUTE", 10.0))
    fallback_fraction: float = field(default_factory=lambda: _env_float("SMARTOLIVE_FALLBACK_FRACTION", 0.5))
    fallback_day_start: time = field(default_factory=lambda: _env_time("SMARTOLIVE_FALLBACK_DAY_START", "06:00"))
    fallback_day_end: time = field(default_factory=lambda: _env_time("SMARTOLIVE_FALLBACK_DAY_END", "20:00"))
    elevated_need_ratio: float = field(
        default_factory=lambda: _env_float("SMARTOLIVE_ELEVATED_NEED_RATIO", 1.5)
    )

    def __post_init__(self):
        if self.evaluation_workers < 0:
            raise ValueError("SMARTOLIVE_EVALUATION_WORKERS must not be negative.")
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {self.log_level}")

    def engine_settings(self) -> EngineSettings:
        return EngineSettings(
            max_stale_minutes=self.max_stale_minutes,
            rain_threshold_mm=self.rain_threshold_mm,
            high_rain_probability=self.high_rain_probability,
            critical_moisture_pct=self.critical_moisture_pct,
            weather_max_age_hours=self.weather_max_age_hours,
            frost_temperature_c=self.frost_temperature_c,
            max_wind_kmh=self.max_wind_kmh,
            liters_per_minute=self.liters_per_minute,
            fallback_fraction=self.fallback_fraction,
            fallback_day_start=self.fallback_day_start,
            fallback_day_end=self.fallback_day_end,
            elevated_need_ratio=self.elevated_need_ratio,
        )


def setup_logging(config: AppConfig | None = None) -> None:
    """Setup logging from the configured level and log file."""
    config = config or load_config()
    log_level = logging.DEBUG if config.DEBUG else getattr(logging, config.log_level.upper())

    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid adding duplicates when called more than once
    has_console = any(getattr(h, "name", "") == "smartolive_console" for h in root.handlers)
    has_file = any(getattr(h, "name", "") == "smartolive_file" for h in root.handlers)
    added_handler = False

    stream = sys.stdout
    with suppress(AttributeError, ValueError):
        stream.reconfigure(encoding="utf-8", errors="replace")
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not has_console:
        console_handler = logging.StreamHandler(stream=stream)
        console_handler.name = "smartolive_console"
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        added_handler = True

    if not has_file:
        Path(config.log_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.log_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.name = "smartolive_file"
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        added_handler = True

    for handler in root.handlers:
        if getattr(handler, "name", "") in {"smartolive_console", "smartolive_file"}:
            handler.setLevel(log_level)

    if added_handler:
        root.info(
            "Logging initialized at level %s (%s environment)",
            logging.getLevelName(log_level),
            config.environment,
        )

def load_config() -> AppConfig:
    """Helper for callers to load and validate configuration."""
    config = AppConfig()
    # Validate thresholds eagerly so a bad env var fails at startup
    config.engine_settings()
    return config
