"""
Crew requirements. Derived from quote/job line items. Pure, idempotent.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from crewdispatch.domain.models import (
    CrewRequirements,
    Job,
    LaborItemSummary,
    LineItem,
    Vehicle,
)

# Labor-hour tiers used when no line item states a crew size
LARGE_JOB_LABOR_HOURS = 16
MEDIUM_JOB_LABOR_HOURS = 8

VEHICLE_ELIGIBLE_STATUSES = {"available", "in_use"}

DEFAULT_REQUIREMENTS = CrewRequirements(
    required_crew_size=1,
    minimum_crew_size=1,
    maximum_crew_size=None,
    source="default",
)


def _is_labor(item: LineItem) -> bool:
    return (
        item.item_type == "labor"
        or (item.category or "").lower() == "labor"
        or item.is_labor
    )


def _item_hours(item: LineItem) -> float:
    return float(item.hours or item.quantity or 0.0)


def extract_crew_requirements(line_items: Optional[Iterable[LineItem]]) -> CrewRequirements:
    """
    1. Keep labor items only.
    2. required = max declared crew_size (absent counts as 0).
    3. total_labor_hours = sum(hours * max(crew_size, 1)).
    4. Nothing declared: infer from hours (>=16h -> 3, >=8h -> 2, else 1).
    5. minimum = max(1, required - 1), maximum = required + 2.
    """
    items = list(line_items or [])
    if not items:
        return DEFAULT_REQUIREMENTS

    labor_items = [item for item in items if _is_labor(item)]

    max_specified = 0
    total_hours = 0.0
    notes: List[str] = []
    for item in labor_items:
        crew = item.crew_size or 0
        if crew > max_specified:
            max_specified = crew
        total_hours += _item_hours(item) * (crew or 1)
        if crew > 1:
            notes.append(f"{item.description or 'Labor'}: {crew} techs")

    if max_specified > 0:
        source = "specified"
        required = max_specified
    else:
        source = "inferred"
        if total_hours >= LARGE_JOB_LABOR_HOURS:
            required = 3
            notes.append(f"Inferred: Large job ({LARGE_JOB_LABOR_HOURS}+ labor hours) suggests 3 techs")
        elif total_hours >= MEDIUM_JOB_LABOR_HOURS:
            required = 2
            notes.append(f"Inferred: Medium job ({MEDIUM_JOB_LABOR_HOURS}+ labor hours) suggests 2 techs")
        else:
            required = 1
            notes.append(f"Inferred: Small job (under {MEDIUM_JOB_LABOR_HOURS} labor hours) needs 1 tech")

    return CrewRequirements(
        required_crew_size=required,
        minimum_crew_size=max(1, required - 1),
        maximum_crew_size=required + 2,
        source=source,
        total_labor_hours=total_hours,
        requires_multiple_techs=required > 1,
        notes=tuple(notes),
        labor_items=tuple(
            LaborItemSummary(
                description=item.description,
                crew_size=item.crew_size or 1,
                hours=_item_hours(item),
            )
            for item in labor_items
        ),
    )


def requirements_for(job: Job) -> CrewRequirements:
    """Stored requirement when present, otherwise derived from the job's line items."""
    if job.crew_requirements is not None:
        return job.crew_requirements
    return extract_crew_requirements(job.line_items)


def required_crew_size(job: Job) -> int:
    return max(1, requirements_for(job).required_crew_size)


@dataclass
class CrewAssignmentCheck:
    status: str  # "valid" | "understaffed" | "overstaffed" | "unassigned"
    is_valid: bool
    assigned_size: int
    required_size: int
    minimum_size: int
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def difference(self) -> int:
        return self.assigned_size - self.required_size


def validate_crew_assignment(job: Job) -> CrewAssignmentCheck:
    """Check the job's current crew against its requirement. Overstaffing warns, never blocks."""
    req = requirements_for(job)
    assigned = len(job.assigned_crew)
    required = max(1, req.required_crew_size)
    minimum = max(1, req.minimum_crew_size)
    check = CrewAssignmentCheck(
        status="unassigned",
        is_valid=False,
        assigned_size=assigned,
        required_size=required,
        minimum_size=minimum,
    )

    if assigned == 0:
        check.errors.append(f"Job requires {required} tech(s) but none assigned")
        return check
    if assigned < minimum:
        check.status = "understaffed"
        check.errors.append(f"Job requires minimum {minimum} tech(s), only {assigned} assigned")
        return check
    if assigned < required:
        check.status = "understaffed"
        check.is_valid = True
        check.warnings.append(f"Job ideally needs {required} tech(s), only {assigned} assigned")
        return check
    maximum = req.maximum_crew_size if req.maximum_crew_size is not None else required + 2
    if assigned > maximum:
        check.status = "overstaffed"
        check.is_valid = True
        check.warnings.append(f"Job only needs {required} tech(s), {assigned} assigned")
        return check

    check.status = "valid"
    check.is_valid = True
    return check


def find_suitable_vehicles(vehicles: Iterable[Vehicle], crew_size: int) -> List[Vehicle]:
    """Vehicles that seat the crew, closest fit (fewest spare seats) first."""
    fits = [
        v for v in vehicles
        if v.status in VEHICLE_ELIGIBLE_STATUSES and v.passenger_capacity >= crew_size
    ]
    return sorted(fits, key=lambda v: (v.passenger_capacity - crew_size, v.vehicle_id))
