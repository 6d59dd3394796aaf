"""
Domain models. Dataclasses only. No FastAPI, no external deps beyond dataclasses/typing.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class DayHours:
    enabled: bool = True
    start: Optional[str] = "08:00"  # "HH:MM"
    end: Optional[str] = "17:00"


@dataclass(frozen=True)
class Technician:
    tech_id: str
    name: str
    # None = hours never configured; every day is then assumed workable
    working_hours: Optional[dict] = None  # day name ("monday") -> DayHours
    skills: frozenset = frozenset()
    certifications: frozenset = frozenset()
    home_zip: Optional[str] = None
    max_travel_miles: int = 30
    max_jobs_per_day: int = 4
    max_hours_per_day: int = 8
    default_buffer_minutes: int = 30
    preferred_zones: frozenset = frozenset()


@dataclass(frozen=True)
class CrewMember:
    tech_id: str
    name: str = ""
    role: str = "helper"  # "lead" | "helper"


@dataclass(frozen=True)
class LineItem:
    description: str = ""
    item_type: Optional[str] = None
    category: Optional[str] = None
    is_labor: bool = False
    crew_size: Optional[int] = None
    hours: Optional[float] = None
    quantity: Optional[float] = None


@dataclass(frozen=True)
class LaborItemSummary:
    description: str
    crew_size: int
    hours: float


@dataclass(frozen=True)
class CrewRequirements:
    required_crew_size: int = 1
    minimum_crew_size: int = 1
    maximum_crew_size: Optional[int] = None
    source: str = "default"  # "specified" | "inferred" | "default"
    total_labor_hours: float = 0.0
    requires_multiple_techs: bool = False
    notes: Tuple[str, ...] = ()
    labor_items: Tuple[LaborItemSummary, ...] = ()


@dataclass(frozen=True)
class Segment:
    """One working day's slice of a multi-day job."""
    date: date
    day_number: int
    start_time: str
    end_time: str
    duration_minutes: int
    is_complete: bool = False


@dataclass(frozen=True)
class MultiDaySchedule:
    segments: Tuple[Segment, ...]
    total_duration_minutes: int
    scheduled_minutes: int
    is_multi_day: bool
    total_days: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    # True when the segment cap stopped the walk with minutes still unscheduled
    truncated: bool = False
    unscheduled_minutes: int = 0


@dataclass(frozen=True)
class Job:
    job_id: str
    title: str = ""
    category: str = "General"
    estimated_duration_minutes: int = 60
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None  # "HH:MM" or ISO-8601 timestamp
    crew_requirements: Optional[CrewRequirements] = None
    assigned_crew: Tuple[CrewMember, ...] = ()
    assigned_vehicle_id: Optional[str] = None
    line_items: Tuple[LineItem, ...] = ()
    multi_day_schedule: Optional[MultiDaySchedule] = None
    required_certifications: frozenset = frozenset()
    address: Optional[str] = None
    zip_code: Optional[str] = None
    zone: Optional[str] = None
    coordinates: Optional[Tuple[float, float]] = None  # (lat, lng)
    status: str = "pending"

    @property
    def assigned_tech_ids(self) -> List[str]:
        return [m.tech_id for m in self.assigned_crew if m.tech_id]

    def is_assigned_to(self, tech_id: str) -> bool:
        return tech_id in self.assigned_tech_ids


@dataclass(frozen=True)
class TimeOffEntry:
    tech_id: str
    start_date: date
    end_date: date  # inclusive
    reason: str = "time-off"
    status: str = "approved"


@dataclass(frozen=True)
class Vehicle:
    vehicle_id: str
    name: str = ""
    passenger_capacity: int = 2
    status: str = "available"


@dataclass
class ScoreResult:
    tech_id: str
    tech_name: str
    score: int
    reasons: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    is_blocked: bool = False
    is_recommended: bool = False
    block_reason: Optional[str] = None
    has_time_conflict: bool = False
    has_travel_conflict: bool = False
    # Uniform for every tech on the same job; kept apart so ranking cutoffs can ignore it
    crew_shortfall_penalty: float = 0.0
    learning_bonus: float = 0.0
    insights: List[dict] = field(default_factory=list)


@dataclass(frozen=True)
class Conflict:
    type: str
    severity: str  # "error" | "warning"
    message: str


@dataclass
class ConflictReport:
    conflicts: List[Conflict]

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def has_errors(self) -> bool:
        return any(c.severity == "error" for c in self.conflicts)

    @property
    def has_warnings(self) -> bool:
        return any(c.severity == "warning" for c in self.conflicts)


@dataclass
class AssignmentEntry:
    job_id: str
    tech_ids: List[str]
    tech_names: List[str]
    required_crew_size: int
    assigned_crew_size: int
    is_fully_staffed: bool
    warnings: List[str] = field(default_factory=list)
    failed: bool = False
    score: int = 0
    reasons: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AssignmentSummary:
    total: int
    assigned: int
    unassigned: int
    fully_staffed: int
    understaffed: int


@dataclass
class AssignmentPlan:
    date: date
    entries: List[AssignmentEntry]
    summary: AssignmentSummary

    @property
    def successful(self) -> List[AssignmentEntry]:
        return [e for e in self.entries if not e.failed]

    @property
    def failed(self) -> List[AssignmentEntry]:
        return [e for e in self.entries if e.failed]


@dataclass(frozen=True)
class JobUpdate:
    """Write command for the persistence layer. Applied as part of one atomic batch."""
    job_id: str
    assigned_crew: Tuple[CrewMember, ...]
    assigned_tech_id: Optional[str]
    assigned_by: str = "auto"
    scheduled_date: Optional[date] = None  # plan day; applied only to undated jobs


@dataclass(frozen=True)
class MultiDayConflict:
    date: date
    day_number: int
    job_ids: Tuple[str, ...]


@dataclass(frozen=True)
class ValidationIssue:
    type: str
    message: str
    tech_id: Optional[str] = None
    tech_ids: Tuple[str, ...] = ()
    vehicle_ids: Tuple[str, ...] = ()


@dataclass
class ValidationResult:
    is_valid: bool
    can_proceed_with_warnings: bool
    errors: List[ValidationIssue]
    warnings: List[ValidationIssue]
    suggestions: List[ValidationIssue]
    crew_required: int
    crew_assigned: int
