"""
Tech-for-job scoring. Deterministic weighted sum. Only time off short-circuits.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional

from crewdispatch.core.travel_engine.distance_adapter import (
    DEFAULT_DISTANCE_ESTIMATOR,
    DistanceEstimator,
    estimate_travel_time_minutes,
    extract_zip,
    zip_prefix_distance,
)
from crewdispatch.domain.availability import (
    booked_hours,
    find_overlapping_job,
    is_date_blocked_by_time_off,
    is_tech_working_on_day,
    job_window_on,
    jobs_for_tech_on_day,
)
from crewdispatch.domain.constraints import ScoringWeights
from crewdispatch.domain.crew_requirements import required_crew_size
from crewdispatch.domain.models import Job, ScoreResult, Technician, TimeOffEntry
from crewdispatch.domain.skills import required_skills_for, tech_has_skills
from crewdispatch.domain.timeutils import clock_to_minutes, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS = ScoringWeights()


def job_zip(job: Job) -> Optional[str]:
    return extract_zip(job.zip_code) or extract_zip(job.address)


def _distance(estimator: DistanceEstimator, a: str, b: str) -> float:
    try:
        return float(estimator(a, b))
    except Exception as e:
        logger.warning("Distance estimate %s -> %s failed (%s); using zip fallback", a, b, e)
        return zip_prefix_distance(a, b)


def _travel_minutes(estimator: DistanceEstimator, zip_a: Optional[str], zip_b: Optional[str]) -> int:
    if zip_a and zip_b:
        return estimate_travel_time_minutes(_distance(estimator, zip_a, zip_b))
    return estimate_travel_time_minutes(zip_prefix_distance(zip_a, zip_b))


def score_tech_for_job(
    tech: Technician,
    job: Job,
    other_jobs_same_day: Iterable[Job],
    day: date,
    time_off_entries: Iterable[TimeOffEntry] = (),
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    distance_estimator: Optional[DistanceEstimator] = None,
    timezone: Optional[str] = None,
) -> ScoreResult:
    """
    1. Time off -> blocked, return.
    2. Crew shortfall penalty (non-blocking).
    3. Skills. 4. Certifications. 5. Working day.
    6. Job-count capacity. 7. Hour capacity. 8. Workload balance.
    9. Proximity (+ near other jobs). 10. Preferred zone.
    Then, for a job with a start time: hard overlap check, travel feasibility
    against each of the tech's timed jobs, and a penalty for the longest trip.
    """
    estimator = distance_estimator or DEFAULT_DISTANCE_ESTIMATOR
    other_jobs_same_day = list(other_jobs_same_day)
    result = ScoreResult(tech_id=tech.tech_id, tech_name=tech.name, score=0)
    score = 0.0

    time_off = is_date_blocked_by_time_off(day, time_off_entries, tech.tech_id)
    if time_off.blocked:
        result.score = round_half_up(weights.time_off)
        result.is_blocked = True
        result.block_reason = time_off.reason
        result.warnings.append(f"On {time_off.reason}")
        return result

    required = required_crew_size(job)
    if required > 1:
        penalty = weights.crew_shortfall * (required - 1)
        score += penalty
        result.crew_shortfall_penalty = penalty
        result.reasons.append(f"Multi-tech job (needs {required})")

    skills = required_skills_for(job)
    if tech_has_skills(tech, skills):
        score += weights.skill_match
        if skills:
            result.reasons.append(f"Has {skills[0]} skills")
    else:
        result.warnings.append(f"May lack {skills[0]} skills")

    if not job.required_certifications or (job.required_certifications & tech.certifications):
        score += weights.certification_match
        if job.required_certifications:
            result.reasons.append("Has required certification")
    else:
        result.warnings.append("Missing required certification")

    working = is_tech_working_on_day(tech, day)
    day_label = working.day_name.capitalize()
    if working.reason == "default":
        score += weights.availability * weights.unconfigured_day_factor
        result.reasons.append(f"Available {day_label}s")
    elif working.working:
        score += weights.availability
        result.reasons.append(f"Works {day_label}s")
    else:
        score += weights.day_off
        result.warnings.append(f"Normally off on {day_label}s")

    tech_jobs = jobs_for_tech_on_day(other_jobs_same_day, tech.tech_id, day, exclude_job_id=job.job_id)
    job_count = len(tech_jobs)
    max_jobs = max(1, tech.max_jobs_per_day)
    if job_count < max_jobs:
        slots = max_jobs - job_count
        score += weights.capacity * (slots / max_jobs)
        result.reasons.append(f"{slots} slot{'s' if slots != 1 else ''} available")
    else:
        score += weights.max_jobs
        result.warnings.append("At max jobs for day")

    hours = booked_hours(tech_jobs)
    if hours + job.estimated_duration_minutes / 60.0 > tech.max_hours_per_day:
        score += weights.max_hours
        result.warnings.append("Would exceed daily hours")
    else:
        result.reasons.append(f"{tech.max_hours_per_day - hours:.1f}hrs available")

    score += weights.workload_balance * max(0.0, 1 - job_count / max_jobs)

    target_zip = job_zip(job)
    home_zip = extract_zip(tech.home_zip)
    if target_zip and home_zip:
        distance = _distance(estimator, home_zip, target_zip)
        if distance <= tech.max_travel_miles:
            score += weights.proximity
            if distance <= weights.close_to_home_radius:
                result.reasons.append("Close to home base")
            for other in tech_jobs:
                other_zip = job_zip(other)
                if other_zip and _distance(estimator, other_zip, target_zip) <= weights.near_other_jobs_radius:
                    score += weights.near_other_jobs
                    result.reasons.append("Near other jobs today")
                    break
        else:
            score += weights.travel_distance * (distance - tech.max_travel_miles)
            result.warnings.append(f"{distance:.0f}mi from home base")

    if job.zone and job.zone in tech.preferred_zones:
        score += weights.preferred_zone
        result.reasons.append("In preferred zone")

    if job.scheduled_time:
        start = clock_to_minutes(job.scheduled_time, timezone)
        end = start + job.estimated_duration_minutes
        clash = find_overlapping_job(tech, day, start, end, other_jobs_same_day, timezone, job.job_id)
        if clash is not None:
            score += weights.time_conflict
            result.is_blocked = True
            result.has_time_conflict = True
            result.block_reason = "time_conflict"
            result.warnings.append(f"Time conflict with {clash.title or clash.job_id}")

        worst_travel = 0
        for other in tech_jobs:
            window = job_window_on(other, day, timezone)
            if window is None:
                continue
            other_zip = job_zip(other)
            travel = _travel_minutes(estimator, other_zip, target_zip)
            if clash is None:
                gap = start - window[1] if window[0] <= start else window[0] - end
                if gap < travel + weights.travel_margin_minutes:
                    score += weights.travel_infeasible
                    result.has_travel_conflict = True
                    result.warnings.append(
                        f"Insufficient travel time: {gap} min gap around {other.title or other.job_id}, "
                        f"{travel}+ min travel needed"
                    )
            if other_zip and target_zip:
                worst_travel = max(worst_travel, travel)

        if worst_travel > weights.long_travel_minutes:
            score += weights.long_travel
            result.warnings.append(f"Long travel time ({worst_travel}+ min) between jobs")
        elif worst_travel > weights.moderate_travel_minutes:
            score += weights.moderate_travel
            result.warnings.append(f"Moderate travel time (~{worst_travel} min) between jobs")
        elif worst_travel > weights.slight_travel_minutes:
            score += weights.slight_travel

    result.score = round_half_up(score)
    result.is_recommended = (
        not result.is_blocked
        and result.score >= weights.recommended_threshold
        and not result.warnings
    )
    return result


def suggest_assignments(
    job: Job,
    techs: Iterable[Technician],
    jobs_for_day: Iterable[Job],
    day: date,
    time_off_entries: Iterable[TimeOffEntry] = (),
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    distance_estimator: Optional[DistanceEstimator] = None,
    timezone: Optional[str] = None,
) -> List[ScoreResult]:
    """All techs ranked for one job: unblocked first, then score descending."""
    jobs_for_day = list(jobs_for_day)
    time_off_entries = list(time_off_entries)
    scored = [
        score_tech_for_job(
            tech, job, jobs_for_day, day, time_off_entries,
            weights=weights, distance_estimator=distance_estimator, timezone=timezone,
        )
        for tech in techs
    ]
    return sorted(scored, key=lambda r: (r.is_blocked, -r.score))
