"""
Score use case. Orchestrates domain. No FastAPI.
"""

from datetime import date
from typing import Optional

from crewdispatch.application.config import DEFAULT_SCHEDULING_CONFIG
from crewdispatch.core.travel_engine.distance_adapter import (
    BoundedDistanceEstimator,
    DistanceEstimator,
)
from crewdispatch.domain.availability import check_conflicts
from crewdispatch.domain.constraints import SchedulingConfig
from crewdispatch.domain.evaluation import score_tech_for_job, suggest_assignments
from crewdispatch.domain.models import ConflictReport, Job, ScoreResult, Technician, TimeOffEntry


def bounded_estimator(
    provider: Optional[DistanceEstimator],
    timeout_seconds: float,
) -> Optional[DistanceEstimator]:
    """Wrap an external provider with a timeout; None keeps the zip heuristic."""
    if provider is None:
        return None
    if isinstance(provider, BoundedDistanceEstimator):
        return provider
    return BoundedDistanceEstimator(provider, timeout_seconds=timeout_seconds)


def score_technician(
    tech: Technician,
    job: Job,
    jobs_for_day: list[Job],
    day: date,
    time_off_entries: list[TimeOffEntry] | None = None,
    config: Optional[SchedulingConfig] = None,
    distance_estimator: Optional[DistanceEstimator] = None,
    timezone: str | None = None,
) -> ScoreResult:
    if config is None:
        config = DEFAULT_SCHEDULING_CONFIG
    return score_tech_for_job(
        tech,
        job,
        jobs_for_day,
        day,
        time_off_entries or [],
        weights=config.weights,
        distance_estimator=distance_estimator,
        timezone=timezone,
    )


def rank_technicians(
    job: Job,
    techs: list[Technician],
    jobs_for_day: list[Job],
    day: date,
    time_off_entries: list[TimeOffEntry] | None = None,
    config: Optional[SchedulingConfig] = None,
    distance_estimator: Optional[DistanceEstimator] = None,
    timezone: str | None = None,
) -> list[ScoreResult]:
    if config is None:
        config = DEFAULT_SCHEDULING_CONFIG
    return suggest_assignments(
        job,
        techs,
        jobs_for_day,
        day,
        time_off_entries or [],
        weights=config.weights,
        distance_estimator=distance_estimator,
        timezone=timezone,
    )


def check_technician_conflicts(
    tech: Technician,
    job: Job,
    jobs_for_day: list[Job],
    day: date,
    time_off_entries: list[TimeOffEntry] | None = None,
    timezone: str | None = None,
) -> ConflictReport:
    return check_conflicts(tech, job, jobs_for_day, day, timezone, time_off_entries or [])
