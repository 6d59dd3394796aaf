"""
Crew/vehicle validation for a proposed assignment. Errors block, warnings never do.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Sequence

from crewdispatch.domain.availability import (
    is_date_blocked_by_time_off,
    is_tech_working_on_day,
    jobs_for_tech_on_day,
)
from crewdispatch.domain.constraints import ScoringWeights
from crewdispatch.domain.crew_requirements import find_suitable_vehicles, requirements_for
from crewdispatch.domain.evaluation import DEFAULT_WEIGHTS, score_tech_for_job
from crewdispatch.domain.models import (
    CrewRequirements,
    Job,
    Technician,
    TimeOffEntry,
    ValidationIssue,
    ValidationResult,
    Vehicle,
)

MAX_VEHICLE_SUGGESTIONS = 3


@dataclass
class CrewAvailability:
    can_schedule: bool
    meets_ideal_crew: bool
    required_size: int
    minimum_size: int
    available_techs: List[Technician] = field(default_factory=list)
    message: str = ""

    @property
    def available_count(self) -> int:
        return len(self.available_techs)

    @property
    def shortfall(self) -> int:
        return max(0, self.minimum_size - self.available_count)


def validate_crew_availability(
    job: Job,
    day: date,
    techs: Iterable[Technician],
    existing_jobs: Iterable[Job],
    time_off_entries: Iterable[TimeOffEntry] = (),
) -> CrewAvailability:
    """Techs working that day, not on time off, and under their job cap."""
    req = requirements_for(job)
    required = max(1, req.required_crew_size)
    minimum = max(1, req.minimum_crew_size)
    existing_jobs = list(existing_jobs)
    time_off_entries = list(time_off_entries)

    available = []
    for tech in techs:
        if not is_tech_working_on_day(tech, day).working:
            continue
        if is_date_blocked_by_time_off(day, time_off_entries, tech.tech_id).blocked:
            continue
        booked = jobs_for_tech_on_day(existing_jobs, tech.tech_id, day, exclude_job_id=job.job_id)
        if len(booked) >= tech.max_jobs_per_day:
            continue
        available.append(tech)

    count = len(available)
    can_schedule = count >= minimum
    meets_ideal = count >= required
    if not can_schedule:
        message = f"Only {count} techs available, need at least {minimum}"
    elif meets_ideal:
        message = f"{count} techs available, meets requirement of {required}"
    else:
        message = f"{count} techs available, job ideally needs {required}"

    return CrewAvailability(
        can_schedule=can_schedule,
        meets_ideal_crew=meets_ideal,
        required_size=required,
        minimum_size=minimum,
        available_techs=available,
        message=message,
    )


def _vehicle_names(vehicles: Sequence[Vehicle]) -> str:
    return ", ".join(v.name or v.vehicle_id for v in vehicles)


def validate_scheduling_assignment(
    job: Job,
    day: date,
    assigned_crew: Sequence[Technician] = (),
    vehicle: Optional[Vehicle] = None,
    all_techs: Iterable[Technician] = (),
    existing_jobs: Iterable[Job] = (),
    time_off_entries: Iterable[TimeOffEntry] = (),
    vehicles: Iterable[Vehicle] = (),
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    timezone: Optional[str] = None,
) -> ValidationResult:
    """
    1. Crew size against the requirement (suggest free techs on a shortfall).
    2. Re-score each assigned tech for blocks and warnings only.
    3. Vehicle seats the crew, or warn when no vehicle is attached.
    4. Nobody assigned and the day cannot reach the minimum crew.
    """
    all_techs = list(all_techs)
    existing_jobs = [j for j in existing_jobs if j.job_id != job.job_id]
    time_off_entries = list(time_off_entries)
    vehicles = list(vehicles)

    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    suggestions: List[ValidationIssue] = []

    req = requirements_for(job)
    required = max(1, req.required_crew_size)
    crew_size = len(assigned_crew)
    assigned_ids = {t.tech_id for t in assigned_crew}

    availability = validate_crew_availability(job, day, all_techs, existing_jobs, time_off_entries)

    if crew_size == 0:
        errors.append(ValidationIssue("no_crew", f"Job requires {required} tech(s), none assigned"))
    elif crew_size < required:
        shortfall = required - crew_size
        errors.append(
            ValidationIssue(
                "crew_shortfall",
                f"Job requires {required} tech(s), only {crew_size} assigned (need {shortfall} more)",
            )
        )
        extra = [t for t in availability.available_techs if t.tech_id not in assigned_ids][:shortfall]
        if extra:
            suggestions.append(
                ValidationIssue(
                    "add_techs",
                    f"Consider adding: {', '.join(t.name for t in extra)}",
                    tech_ids=tuple(t.tech_id for t in extra),
                )
            )
    elif req.maximum_crew_size is not None and crew_size > req.maximum_crew_size:
        warnings.append(
            ValidationIssue(
                "crew_overstaffed",
                f"Job only needs {required} tech(s), {crew_size} assigned",
            )
        )

    for tech in assigned_crew:
        result = score_tech_for_job(
            tech, job, existing_jobs, day, time_off_entries, weights=weights, timezone=timezone,
        )
        if result.is_blocked:
            errors.append(
                ValidationIssue("tech_blocked", f"{tech.name}: {result.block_reason}", tech_id=tech.tech_id)
            )
        else:
            for w in result.warnings:
                warnings.append(ValidationIssue("tech_warning", f"{tech.name}: {w}", tech_id=tech.tech_id))

    if vehicle is not None:
        if vehicle.passenger_capacity < crew_size:
            errors.append(
                ValidationIssue(
                    "vehicle_capacity",
                    f'Vehicle "{vehicle.name or vehicle.vehicle_id}" seats {vehicle.passenger_capacity}, '
                    f"but {crew_size} techs assigned",
                )
            )
            better = [
                v for v in find_suitable_vehicles(vehicles, crew_size)
                if v.vehicle_id != vehicle.vehicle_id
            ][:MAX_VEHICLE_SUGGESTIONS]
            if better:
                suggestions.append(
                    ValidationIssue(
                        "change_vehicle",
                        f"Consider: {_vehicle_names(better)}",
                        vehicle_ids=tuple(v.vehicle_id for v in better),
                    )
                )
    elif crew_size > 0:
        warnings.append(ValidationIssue("no_vehicle", "No vehicle assigned for this job"))
        fits = find_suitable_vehicles(vehicles, crew_size)[:MAX_VEHICLE_SUGGESTIONS]
        if fits:
            suggestions.append(
                ValidationIssue(
                    "assign_vehicle",
                    f"Suggested vehicles: {_vehicle_names(fits)}",
                    vehicle_ids=tuple(v.vehicle_id for v in fits),
                )
            )

    if crew_size == 0 and not availability.can_schedule:
        errors.append(ValidationIssue("insufficient_availability", availability.message))

    return ValidationResult(
        is_valid=not errors,
        can_proceed_with_warnings=not errors and bool(warnings),
        errors=errors,
        warnings=warnings,
        suggestions=suggestions,
        crew_required=required,
        crew_assigned=crew_size,
    )


@dataclass(frozen=True)
class JobStaffing:
    job_id: str
    title: str
    required: int
    assigned: int

    @property
    def shortfall(self) -> int:
        return max(0, self.required - self.assigned)


@dataclass
class StaffingSummary:
    date: date
    total_crew_needed: int
    total_crew_assigned: int
    available_tech_count: int
    understaffed_jobs: List[JobStaffing] = field(default_factory=list)
    well_staffed_jobs: List[JobStaffing] = field(default_factory=list)

    @property
    def total_jobs(self) -> int:
        return len(self.understaffed_jobs) + len(self.well_staffed_jobs)

    @property
    def shortfall(self) -> int:
        return max(0, self.total_crew_needed - self.total_crew_assigned)

    @property
    def can_cover_all_jobs(self) -> bool:
        return self.available_tech_count >= self.total_crew_needed


def staffing_summary_for_date(
    jobs: Iterable[Job],
    techs: Iterable[Technician],
    day: date,
    time_off_entries: Iterable[TimeOffEntry] = (),
) -> StaffingSummary:
    """
    Crew needed vs. assigned across one day's jobs, and how many techs could still
    take a single-tech job that day.
    """
    jobs = list(jobs)
    understaffed, well_staffed = [], []
    for job in jobs:
        staffing = JobStaffing(
            job_id=job.job_id,
            title=job.title,
            required=max(1, requirements_for(job).required_crew_size),
            assigned=len(job.assigned_crew),
        )
        (understaffed if staffing.shortfall else well_staffed).append(staffing)

    solo = Job(job_id="", crew_requirements=CrewRequirements())
    availability = validate_crew_availability(solo, day, techs, jobs, time_off_entries)
    return StaffingSummary(
        date=day,
        total_crew_needed=sum(s.required for s in understaffed + well_staffed),
        total_crew_assigned=sum(s.assigned for s in understaffed + well_staffed),
        available_tech_count=availability.available_count,
        understaffed_jobs=understaffed,
        well_staffed_jobs=well_staffed,
    )
