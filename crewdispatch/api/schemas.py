"""
API request/response schemas. Pydantic only in api layer.
"""

import datetime

from pydantic import BaseModel


class DayHoursSchema(BaseModel):
    enabled: bool = True
    start: str | None = "08:00"
    end: str | None = "17:00"


class CoordinatesSchema(BaseModel):
    lat: float
    lng: float


class TechnicianSchema(BaseModel):
    tech_id: str
    name: str = ""
    working_hours: dict[str, DayHoursSchema] | None = None  # "monday" -> hours; None = not configured
    skills: list[str] = []
    certifications: list[str] = []
    preferred_zones: list[str] = []
    home_zip: str | None = None
    max_travel_miles: int | None = None
    max_jobs_per_day: int | None = None
    max_hours_per_day: int | None = None
    default_buffer_minutes: int | None = None


class CrewMemberSchema(BaseModel):
    tech_id: str
    name: str = ""
    role: str = "helper"


class LineItemSchema(BaseModel):
    description: str = ""
    item_type: str | None = None  # "labor" | "material" | ...
    category: str | None = None
    is_labor: bool = False
    crew_size: int | None = None
    hours: float | None = None
    quantity: float | None = None


class CrewRequirementsInputSchema(BaseModel):
    required_crew_size: int = 1
    minimum_crew_size: int = 1
    maximum_crew_size: int | None = None
    source: str = "specified"


class JobSchema(BaseModel):
    job_id: str
    title: str = ""
    category: str = "General"
    estimated_duration_minutes: float | None = None
    estimated_duration: float | str | None = None  # free text ("2 hours") when minutes are absent
    scheduled_date: str | None = None  # "YYYY-MM-DD"
    scheduled_time: str | None = None  # "HH:MM" or ISO-8601
    crew_requirements: CrewRequirementsInputSchema | None = None
    assigned_crew: list[CrewMemberSchema] = []
    assigned_tech_id: str | None = None  # legacy single-tech assignment
    assigned_vehicle_id: str | None = None
    line_items: list[LineItemSchema] = []
    required_certifications: list[str] = []
    address: str | None = None
    zip_code: str | None = None
    zone: str | None = None
    coordinates: CoordinatesSchema | None = None
    status: str = "pending"
    multi_day_schedule: dict | None = None


class TimeOffSchema(BaseModel):
    tech_id: str
    start_date: str
    end_date: str | None = None
    reason: str = "time-off"
    status: str = "approved"


class VehicleSchema(BaseModel):
    vehicle_id: str
    name: str = ""
    passenger_capacity: int = 2
    status: str = "available"


# --- Requests ---


class ScoreRequest(BaseModel):
    tech: TechnicianSchema
    job: JobSchema
    jobs_for_day: list[JobSchema] = []
    date: str
    time_off: list[TimeOffSchema] = []
    timezone: str | None = None


class AutoAssignRequest(BaseModel):
    jobs: list[JobSchema]
    technicians: list[TechnicianSchema]
    existing_jobs: list[JobSchema] = []
    date: str
    time_off: list[TimeOffSchema] = []
    timezone: str | None = None


class ValidateAssignmentRequest(BaseModel):
    job: JobSchema
    date: str
    crew_ids: list[str] = []
    vehicle_id: str | None = None
    technicians: list[TechnicianSchema] = []
    existing_jobs: list[JobSchema] = []
    time_off: list[TimeOffSchema] = []
    vehicles: list[VehicleSchema] = []
    timezone: str | None = None


class MultiDayRequest(BaseModel):
    job: JobSchema
    start_date: str
    working_hours: dict[str, DayHoursSchema] | None = None
    existing_jobs: list[JobSchema] = []
    tech_id: str | None = None


class ConflictsRequest(BaseModel):
    tech: TechnicianSchema
    job: JobSchema
    jobs_for_day: list[JobSchema] = []
    date: str
    time_off: list[TimeOffSchema] = []
    timezone: str | None = None


class CrewRequirementsRequest(BaseModel):
    line_items: list[LineItemSchema] = []


class RouteOrderRequest(BaseModel):
    jobs: list[JobSchema]
    home_base: CoordinatesSchema | None = None


class StaffingSummaryRequest(BaseModel):
    jobs: list[JobSchema]
    technicians: list[TechnicianSchema] = []
    date: str
    time_off: list[TimeOffSchema] = []


# --- Responses ---


class ScoreResultSchema(BaseModel):
    tech_id: str
    tech_name: str
    score: int
    reasons: list[str]
    warnings: list[str]
    is_blocked: bool
    is_recommended: bool
    block_reason: str | None = None
    has_time_conflict: bool = False
    has_travel_conflict: bool = False
    crew_shortfall_penalty: float = 0.0
    learning_bonus: float = 0.0
    insights: list[dict] = []


class AssignmentEntrySchema(BaseModel):
    job_id: str
    tech_ids: list[str]
    tech_names: list[str]
    required_crew_size: int
    assigned_crew_size: int
    is_fully_staffed: bool
    warnings: list[str]
    failed: bool
    score: int
    reasons: list[str]


class AssignmentSummarySchema(BaseModel):
    total: int
    assigned: int
    unassigned: int
    fully_staffed: int
    understaffed: int


class JobUpdateSchema(BaseModel):
    job_id: str
    assigned_crew: list[CrewMemberSchema]
    assigned_tech_id: str | None = None
    assigned_by: str = "auto"
    scheduled_date: datetime.date | None = None


class AssignmentPlanSchema(BaseModel):
    date: datetime.date
    entries: list[AssignmentEntrySchema]
    summary: AssignmentSummarySchema
    updates: list[JobUpdateSchema] = []


class ValidationIssueSchema(BaseModel):
    type: str
    message: str
    tech_id: str | None = None
    tech_ids: list[str] = []
    vehicle_ids: list[str] = []


class ValidationResultSchema(BaseModel):
    is_valid: bool
    can_proceed_with_warnings: bool
    errors: list[ValidationIssueSchema]
    warnings: list[ValidationIssueSchema]
    suggestions: list[ValidationIssueSchema]
    crew_required: int
    crew_assigned: int


class SegmentSchema(BaseModel):
    date: datetime.date
    day_number: int
    start_time: str
    end_time: str
    duration_minutes: int
    is_complete: bool


class MultiDayScheduleSchema(BaseModel):
    segments: list[SegmentSchema]
    total_duration_minutes: int
    scheduled_minutes: int
    is_multi_day: bool
    total_days: int
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None
    truncated: bool = False
    unscheduled_minutes: int = 0


class MultiDayConflictSchema(BaseModel):
    date: datetime.date
    day_number: int
    job_ids: list[str]


class MultiDayResponse(BaseModel):
    job_id: str
    schedule: MultiDayScheduleSchema
    conflicts: list[MultiDayConflictSchema]
    summary: str


class ConflictSchema(BaseModel):
    type: str
    severity: str
    message: str


class ConflictReportSchema(BaseModel):
    has_conflicts: bool
    has_errors: bool
    has_warnings: bool
    conflicts: list[ConflictSchema]


class LaborItemSchema(BaseModel):
    description: str
    crew_size: int
    hours: float


class CrewRequirementsSchema(BaseModel):
    required_crew_size: int
    minimum_crew_size: int
    maximum_crew_size: int | None = None
    source: str
    total_labor_hours: float = 0.0
    requires_multiple_techs: bool = False
    notes: list[str] = []
    labor_items: list[LaborItemSchema] = []


class RouteOrderResponse(BaseModel):
    ordered_job_ids: list[str]
    total_distance: float
    total_duration: int
    fallback: bool


class JobStaffingSchema(BaseModel):
    job_id: str
    title: str
    required: int
    assigned: int
    shortfall: int


class StaffingSummarySchema(BaseModel):
    date: datetime.date
    total_jobs: int
    total_crew_needed: int
    total_crew_assigned: int
    shortfall: int
    available_tech_count: int
    can_cover_all_jobs: bool
    understaffed_jobs: list[JobStaffingSchema]
    well_staffed_jobs: list[JobStaffingSchema]
