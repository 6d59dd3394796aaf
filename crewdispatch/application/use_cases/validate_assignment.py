"""
Validate-assignment use case. Orchestrates domain. No FastAPI.
"""

from datetime import date
from typing import Optional

from crewdispatch.application.config import DEFAULT_SCHEDULING_CONFIG
from crewdispatch.domain.constraints import SchedulingConfig
from crewdispatch.domain.models import Job, Technician, TimeOffEntry, ValidationResult, Vehicle
from crewdispatch.domain.validation import validate_scheduling_assignment


def validate_assignment(
    job: Job,
    day: date,
    crew_ids: list[str],
    vehicle_id: str | None,
    techs: list[Technician],
    existing_jobs: list[Job],
    time_off_entries: list[TimeOffEntry] | None = None,
    vehicles: list[Vehicle] | None = None,
    config: Optional[SchedulingConfig] = None,
    timezone: str | None = None,
) -> ValidationResult:
    """Resolve crew and vehicle ids against the supplied records, then validate."""
    if config is None:
        config = DEFAULT_SCHEDULING_CONFIG
    vehicles = vehicles or []
    techs_by_id = {t.tech_id: t for t in techs}
    unknown = [tid for tid in crew_ids if tid not in techs_by_id]
    if unknown:
        raise ValueError(f"Unknown technician id(s): {', '.join(unknown)}")

    vehicle = None
    if vehicle_id:
        vehicle = next((v for v in vehicles if v.vehicle_id == vehicle_id), None)
        if vehicle is None:
            raise ValueError(f"Unknown vehicle id: {vehicle_id}")

    return validate_scheduling_assignment(
        job,
        day,
        [techs_by_id[tid] for tid in crew_ids],
        vehicle,
        techs,
        existing_jobs,
        time_off_entries or [],
        vehicles,
        weights=config.weights,
        timezone=timezone,
    )
