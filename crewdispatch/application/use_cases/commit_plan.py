"""
Commit use case. Writes a whole assignment plan or nothing.
"""

import logging

from crewdispatch.domain.assignment import plan_to_job_updates
from crewdispatch.domain.models import AssignmentPlan, Job
from crewdispatch.infrastructure.job_store import JobRepository

logger = logging.getLogger(__name__)


def commit_plan(plan: AssignmentPlan, repository: JobRepository, assigned_by: str = "auto") -> list[Job]:
    updates = plan_to_job_updates(plan, assigned_by=assigned_by)
    if not updates:
        logger.info("Plan for %s has no assignments to commit", plan.date.isoformat())
        return []
    return repository.apply_updates(updates)
