"""
Auto-assignment. Greedy, single pass, order-sensitive. No solver.

Jobs are processed one at a time against a growing working set, so a different
job order can legitimately yield a different plan. Only the per-tech scoring
inside one job is parallelized.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date
from typing import Callable, Iterable, List, Optional

from crewdispatch.core.travel_engine.distance_adapter import DistanceEstimator
from crewdispatch.domain.availability import job_occurs_on
from crewdispatch.domain.constraints import ScoringWeights
from crewdispatch.domain.crew_requirements import required_crew_size
from crewdispatch.domain.evaluation import DEFAULT_WEIGHTS, score_tech_for_job
from crewdispatch.domain.models import (
    AssignmentEntry,
    AssignmentPlan,
    AssignmentSummary,
    CrewMember,
    Job,
    JobUpdate,
    ScoreResult,
    Technician,
    TimeOffEntry,
)

logger = logging.getLogger(__name__)

NO_CANDIDATE_WARNING = "No suitable tech available"


def default_priority_key(job: Job):
    """Multi-tech jobs first, then longer jobs."""
    return (-required_crew_size(job), -job.estimated_duration_minutes)


def _is_candidate(result: ScoreResult, weights: ScoringWeights) -> bool:
    if result.is_blocked:
        return False
    return result.score > weights.candidate_cutoff


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def auto_assign_all(
    unassigned_jobs: Iterable[Job],
    technicians: Iterable[Technician],
    existing_assignments: Iterable[Job],
    day: date,
    time_off_entries: Iterable[TimeOffEntry] = (),
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    priority_key: Callable[[Job], object] = default_priority_key,
    distance_estimator: Optional[DistanceEstimator] = None,
    max_workers: int = 1,
    timezone: Optional[str] = None,
) -> AssignmentPlan:
    """
    1. Sort jobs by priority_key.
    2. For each job: score every tech against the working set, drop blocked and
       low scorers, take the top required_crew_size, commit to the working set.
    3. Summarize.
    """
    techs = list(technicians)
    time_off_entries = list(time_off_entries)
    working_set: List[Job] = [j for j in existing_assignments if job_occurs_on(j, day)]
    ordered = sorted(unassigned_jobs, key=priority_key)
    entries: List[AssignmentEntry] = []

    executor = ThreadPoolExecutor(max_workers=max_workers) if max_workers > 1 else None
    try:
        for job in ordered:
            required = required_crew_size(job)
            snapshot = list(working_set)

            def score(tech: Technician) -> ScoreResult:
                return score_tech_for_job(
                    tech, job, snapshot, day, time_off_entries,
                    weights=weights, distance_estimator=distance_estimator, timezone=timezone,
                )

            results = list(executor.map(score, techs)) if executor else [score(t) for t in techs]
            candidates = sorted(
                (r for r in results if _is_candidate(r, weights)),
                key=lambda r: -r.score,
            )
            chosen = candidates[:min(required, len(candidates))]

            if not chosen:
                entries.append(
                    AssignmentEntry(
                        job_id=job.job_id,
                        tech_ids=[],
                        tech_names=[],
                        required_crew_size=required,
                        assigned_crew_size=0,
                        is_fully_staffed=False,
                        warnings=[NO_CANDIDATE_WARNING],
                        failed=True,
                    )
                )
                continue

            warnings = _dedupe(w for r in chosen for w in r.warnings)
            if len(chosen) < required:
                warnings.append(
                    f"Needs {required} techs, only {len(chosen)} available without conflicts"
                )
            entries.append(
                AssignmentEntry(
                    job_id=job.job_id,
                    tech_ids=[r.tech_id for r in chosen],
                    tech_names=[r.tech_name for r in chosen],
                    required_crew_size=required,
                    assigned_crew_size=len(chosen),
                    is_fully_staffed=len(chosen) >= required,
                    warnings=warnings,
                    score=chosen[0].score,
                    reasons=list(chosen[0].reasons),
                )
            )
            for r in chosen:
                working_set.append(
                    replace(
                        job,
                        assigned_crew=(CrewMember(tech_id=r.tech_id, name=r.tech_name),),
                        scheduled_date=job.scheduled_date or day,
                    )
                )
    finally:
        if executor is not None:
            executor.shutdown(wait=True)

    assigned = [e for e in entries if not e.failed]
    summary = AssignmentSummary(
        total=len(entries),
        assigned=len(assigned),
        unassigned=len(entries) - len(assigned),
        fully_staffed=sum(1 for e in assigned if e.is_fully_staffed),
        understaffed=sum(1 for e in assigned if not e.is_fully_staffed),
    )
    logger.info(
        "Auto-assign %s: %d jobs, %d assigned, %d unassigned, %d understaffed",
        day.isoformat(), summary.total, summary.assigned, summary.unassigned, summary.understaffed,
    )
    return AssignmentPlan(date=day, entries=entries, summary=summary)


def plan_to_job_updates(plan: AssignmentPlan, assigned_by: str = "auto") -> List[JobUpdate]:
    """One write command per assigned job. First tech is lead; undated jobs take the plan date."""
    updates = []
    for entry in plan.successful:
        crew = tuple(
            CrewMember(tech_id=tid, name=name, role="lead" if i == 0 else "helper")
            for i, (tid, name) in enumerate(zip(entry.tech_ids, entry.tech_names))
        )
        updates.append(
            JobUpdate(
                job_id=entry.job_id,
                assigned_crew=crew,
                assigned_tech_id=entry.tech_ids[0] if entry.tech_ids else None,
                assigned_by=assigned_by,
                scheduled_date=plan.date,
            )
        )
    return updates
