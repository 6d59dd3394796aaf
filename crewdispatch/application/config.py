"""
Default configuration for the scheduling use cases. One place for weights, caps and
runtime settings so the API, use cases and engine never duplicate values.
"""

import os
from dataclasses import dataclass, field

from crewdispatch.domain.constraints import (
    MultiDayLimits,
    SchedulingConfig,
    ScoringWeights,
    TechDefaults,
)

DEFAULT_SCHEDULING_CONFIG = SchedulingConfig(
    weights=ScoringWeights(),
    tech_defaults=TechDefaults(),
    multi_day=MultiDayLimits(),
)


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime settings from CREWDISPATCH_* environment variables."""
    log_level: str = field(default_factory=lambda: os.getenv("CREWDISPATCH_LOG_LEVEL", "INFO").upper())
    cors_origins: list[str] = field(
        default_factory=lambda: _env_list("CREWDISPATCH_CORS_ORIGINS", "http://localhost:5173")
    )
    distance_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("CREWDISPATCH_DISTANCE_TIMEOUT_SECONDS", "2.0"))
    )
    scoring_workers: int = field(
        default_factory=lambda: int(os.getenv("CREWDISPATCH_SCORING_WORKERS", "1"))
    )
    default_timezone: str | None = field(
        default_factory=lambda: os.getenv("CREWDISPATCH_TIMEZONE") or None
    )
    host: str = field(default_factory=lambda: os.getenv("CREWDISPATCH_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("CREWDISPATCH_PORT", "8000")))


def get_settings() -> Settings:
    return Settings()
