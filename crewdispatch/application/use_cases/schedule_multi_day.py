"""
Multi-day schedule use case. Orchestrates domain. No FastAPI.
"""

from dataclasses import replace
from datetime import date
from typing import Optional

from crewdispatch.application.config import DEFAULT_SCHEDULING_CONFIG
from crewdispatch.domain.constraints import SchedulingConfig
from crewdispatch.domain.models import Job
from crewdispatch.domain.multi_day import MultiDayAnalysis, analyze_multi_day_conflicts


def schedule_multi_day(
    job: Job,
    start_date: date,
    working_hours: dict | None,
    existing_jobs: list[Job] | None = None,
    tech_id: str | None = None,
    config: Optional[SchedulingConfig] = None,
) -> tuple[Job, MultiDayAnalysis]:
    """
    Segment the job's duration over working days from start_date and check the
    (optionally tech-scoped) existing jobs. Returns the job with its schedule attached.
    """
    if config is None:
        config = DEFAULT_SCHEDULING_CONFIG
    others = [j for j in (existing_jobs or []) if j.job_id != job.job_id]
    analysis = analyze_multi_day_conflicts(
        start_date,
        job.estimated_duration_minutes,
        working_hours,
        others,
        tech_id=tech_id,
        limits=config.multi_day,
    )
    scheduled = replace(
        job,
        scheduled_date=analysis.schedule.start_date or start_date,
        multi_day_schedule=analysis.schedule,
    )
    return scheduled, analysis
