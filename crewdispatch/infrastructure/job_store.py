"""
Job store. In-memory implementation of the persistence seam; replace with a DB in production.

Writes arrive as JobUpdate batches and are applied all-or-nothing.
"""

import logging
import threading
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Protocol

from crewdispatch.domain.models import Job, JobUpdate

logger = logging.getLogger(__name__)


class JobRepository(Protocol):
    def get(self, job_id: str) -> Optional[Job]:
        ...

    def list_jobs(self, day: Optional[date] = None) -> list[Job]:
        ...

    def apply_updates(self, updates: Iterable[JobUpdate]) -> list[Job]:
        ...


class InMemoryJobStore:
    def __init__(self, jobs: Iterable[Job] = ()):
        self._jobs: dict[str, Job] = {j.job_id: j for j in jobs}
        self._lock = threading.Lock()

    def get(self, job_id: str) -> Optional[Job]:
        return self._jobs.get(job_id)

    def list_jobs(self, day: Optional[date] = None) -> list[Job]:
        jobs = list(self._jobs.values())
        if day is None:
            return jobs
        return [j for j in jobs if j.scheduled_date == day]

    def add(self, job: Job) -> None:
        with self._lock:
            self._jobs[job.job_id] = job

    def apply_updates(self, updates: Iterable[JobUpdate]) -> list[Job]:
        """
        Validate the whole batch, then swap in a new mapping.
        Raises KeyError for an unknown job id; nothing is written in that case.
        """
        updates = list(updates)
        with self._lock:
            missing = [u.job_id for u in updates if u.job_id not in self._jobs]
            if missing:
                raise KeyError(f"Unknown job id(s): {', '.join(missing)}")
            staged = dict(self._jobs)
            changed = []
            for u in updates:
                current = staged[u.job_id]
                job = replace(
                    current,
                    assigned_crew=u.assigned_crew,
                    scheduled_date=current.scheduled_date or u.scheduled_date,
                    status="scheduled",
                )
                staged[u.job_id] = job
                changed.append(job)
            self._jobs = staged
        logger.info("Committed %d job update(s)", len(changed))
        return changed
