"""
Auto-assign use case. Orchestrates domain. No FastAPI.

Flow: annotate crew requirements -> auto_assign_all -> AssignmentPlan.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Optional

from crewdispatch.application.config import DEFAULT_SCHEDULING_CONFIG
from crewdispatch.application.use_cases.score_technician import bounded_estimator
from crewdispatch.core.travel_engine.distance_adapter import BoundedDistanceEstimator, DistanceEstimator
from crewdispatch.domain.assignment import auto_assign_all, default_priority_key
from crewdispatch.domain.constraints import SchedulingConfig
from crewdispatch.domain.crew_requirements import extract_crew_requirements
from crewdispatch.domain.models import AssignmentPlan, Job, Technician, TimeOffEntry

logger = logging.getLogger(__name__)


def annotate_crew_requirements(jobs: list[Job]) -> list[Job]:
    """Jobs without a stored requirement get one derived from their line items."""
    return [
        j if j.crew_requirements is not None
        else replace(j, crew_requirements=extract_crew_requirements(j.line_items))
        for j in jobs
    ]


def plan_assignments(
    unassigned_jobs: list[Job],
    technicians: list[Technician],
    existing_jobs: list[Job],
    plan_date: date,
    time_off_entries: list[TimeOffEntry] | None = None,
    config: Optional[SchedulingConfig] = None,
    priority_key: Callable[[Job], object] = default_priority_key,
    distance_estimator: Optional[DistanceEstimator] = None,
    max_workers: int = 1,
    distance_timeout_seconds: float = 2.0,
    timezone: str | None = None,
) -> AssignmentPlan:
    if config is None:
        config = DEFAULT_SCHEDULING_CONFIG
    pending = [j for j in annotate_crew_requirements(unassigned_jobs) if not j.assigned_crew]
    skipped = [j.job_id for j in unassigned_jobs if j.assigned_crew]
    if skipped:
        logger.info("Skipping %d job(s) that already have a crew: %s", len(skipped), ", ".join(skipped))
    estimator = bounded_estimator(distance_estimator, distance_timeout_seconds)
    try:
        return auto_assign_all(
            pending,
            technicians,
            existing_jobs,
            plan_date,
            time_off_entries or [],
            weights=config.weights,
            priority_key=priority_key,
            distance_estimator=estimator,
            max_workers=max_workers,
            timezone=timezone,
        )
    finally:
        if isinstance(estimator, BoundedDistanceEstimator) and estimator is not distance_estimator:
            estimator.shutdown()
