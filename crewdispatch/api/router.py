"""
API router. Calls application only. No business logic.
"""

import logging
from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, HTTPException

from crewdispatch.api.schemas import (
    AssignmentPlanSchema,
    AutoAssignRequest,
    ConflictReportSchema,
    ConflictsRequest,
    CrewRequirementsRequest,
    CrewRequirementsSchema,
    MultiDayRequest,
    MultiDayResponse,
    RouteOrderRequest,
    RouteOrderResponse,
    ScoreRequest,
    ScoreResultSchema,
    StaffingSummaryRequest,
    StaffingSummarySchema,
    ValidateAssignmentRequest,
    ValidationResultSchema,
)
from crewdispatch.application.config import get_settings
from crewdispatch.application.use_cases.plan_assignments import plan_assignments
from crewdispatch.application.use_cases.schedule_multi_day import schedule_multi_day
from crewdispatch.application.use_cases.score_technician import (
    check_technician_conflicts,
    score_technician,
)
from crewdispatch.application.use_cases.validate_assignment import validate_assignment
from crewdispatch.core.travel_engine.route_engine import optimize_route
from crewdispatch.domain.assignment import plan_to_job_updates
from crewdispatch.domain.crew_requirements import extract_crew_requirements
from crewdispatch.domain.timeutils import coerce_date
from crewdispatch.domain.validation import staffing_summary_for_date
from crewdispatch.infrastructure.record_loader import (
    load_jobs,
    load_line_items,
    load_technicians,
    load_time_off,
    load_vehicles,
    load_working_hours,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_day(value: str, field: str = "date") -> date:
    day = coerce_date(value)
    if day is None:
        raise ValueError(f"Invalid {field}: {value!r} (expected YYYY-MM-DD)")
    return day


def _dump(items) -> list[dict]:
    return [i.model_dump() for i in items]


@router.post("/score", response_model=ScoreResultSchema)
def post_score(request: ScoreRequest) -> ScoreResultSchema:
    """
    POST /score
    Scores one technician for one job on a date.
    """
    try:
        day = _parse_day(request.date)
        tech = load_technicians([request.tech.model_dump()])[0]
        job = load_jobs([request.job.model_dump()])[0]
        result = score_technician(
            tech,
            job,
            load_jobs(_dump(request.jobs_for_day)),
            day,
            load_time_off(_dump(request.time_off)),
            timezone=request.timezone or get_settings().default_timezone,
        )
        return ScoreResultSchema.model_validate(asdict(result))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("POST /score failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/auto-assign", response_model=AssignmentPlanSchema)
def post_auto_assign(request: AutoAssignRequest) -> AssignmentPlanSchema:
    """
    POST /auto-assign
    Greedy crew assignment for a day's unassigned jobs. Returns the plan and the
    job updates a caller should commit as one batch.
    """
    try:
        day = _parse_day(request.date)
        settings = get_settings()
        plan = plan_assignments(
            load_jobs(_dump(request.jobs)),
            load_technicians(_dump(request.technicians)),
            load_jobs(_dump(request.existing_jobs)),
            day,
            load_time_off(_dump(request.time_off)),
            max_workers=settings.scoring_workers,
            distance_timeout_seconds=settings.distance_timeout_seconds,
            timezone=request.timezone or settings.default_timezone,
        )
        payload = asdict(plan)
        payload["updates"] = [asdict(u) for u in plan_to_job_updates(plan)]
        return AssignmentPlanSchema.model_validate(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("POST /auto-assign failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/validate-assignment", response_model=ValidationResultSchema)
def post_validate_assignment(request: ValidateAssignmentRequest) -> ValidationResultSchema:
    """
    POST /validate-assignment
    Checks a proposed crew + vehicle for a job. Errors block, warnings do not.
    """
    try:
        day = _parse_day(request.date)
        result = validate_assignment(
            load_jobs([request.job.model_dump()])[0],
            day,
            request.crew_ids,
            request.vehicle_id,
            load_technicians(_dump(request.technicians)),
            load_jobs(_dump(request.existing_jobs)),
            load_time_off(_dump(request.time_off)),
            load_vehicles(_dump(request.vehicles)),
            timezone=request.timezone or get_settings().default_timezone,
        )
        return ValidationResultSchema.model_validate(asdict(result))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("POST /validate-assignment failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/multi-day-schedule", response_model=MultiDayResponse)
def post_multi_day_schedule(request: MultiDayRequest) -> MultiDayResponse:
    """
    POST /multi-day-schedule
    Splits the job's duration into per-day segments from start_date.
    """
    try:
        start = _parse_day(request.start_date, "start_date")
        working_hours = None
        if request.working_hours is not None:
            working_hours = load_working_hours(
                {day: hours.model_dump() for day, hours in request.working_hours.items()}
            )
        job, analysis = schedule_multi_day(
            load_jobs([request.job.model_dump()])[0],
            start,
            working_hours,
            load_jobs(_dump(request.existing_jobs)),
            tech_id=request.tech_id,
        )
        return MultiDayResponse.model_validate(
            {
                "job_id": job.job_id,
                "schedule": asdict(analysis.schedule),
                "conflicts": [asdict(c) for c in analysis.conflicts],
                "summary": analysis.summary,
            }
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("POST /multi-day-schedule failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/conflicts", response_model=ConflictReportSchema)
def post_conflicts(request: ConflictsRequest) -> ConflictReportSchema:
    """
    POST /conflicts
    Structured conflict list for one technician and job.
    """
    try:
        day = _parse_day(request.date)
        report = check_technician_conflicts(
            load_technicians([request.tech.model_dump()])[0],
            load_jobs([request.job.model_dump()])[0],
            load_jobs(_dump(request.jobs_for_day)),
            day,
            load_time_off(_dump(request.time_off)),
            timezone=request.timezone or get_settings().default_timezone,
        )
        return ConflictReportSchema(
            has_conflicts=report.has_conflicts,
            has_errors=report.has_errors,
            has_warnings=report.has_warnings,
            conflicts=[asdict(c) for c in report.conflicts],
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("POST /conflicts failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/crew-requirements", response_model=CrewRequirementsSchema)
def post_crew_requirements(request: CrewRequirementsRequest) -> CrewRequirementsSchema:
    """
    POST /crew-requirements
    Crew size derived from quote line items.
    """
    try:
        requirements = extract_crew_requirements(load_line_items(_dump(request.line_items)))
        return CrewRequirementsSchema.model_validate(asdict(requirements))
    except Exception as e:
        logger.exception("POST /crew-requirements failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/route-order", response_model=RouteOrderResponse)
def post_route_order(request: RouteOrderRequest) -> RouteOrderResponse:
    """
    POST /route-order
    Nearest-neighbour visiting order for a day's jobs.
    """
    try:
        home = (request.home_base.lat, request.home_base.lng) if request.home_base else None
        result = optimize_route(load_jobs(_dump(request.jobs)), home)
        return RouteOrderResponse(
            ordered_job_ids=[j.job_id for j in result.ordered_jobs],
            total_distance=result.total_distance,
            total_duration=result.total_duration,
            fallback=result.fallback,
        )
    except Exception as e:
        logger.exception("POST /route-order failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/staffing-summary", response_model=StaffingSummarySchema)
def post_staffing_summary(request: StaffingSummaryRequest) -> StaffingSummarySchema:
    """
    POST /staffing-summary
    Crew needed vs. assigned for a day's jobs, with understaffed jobs listed.
    """
    try:
        summary = staffing_summary_for_date(
            load_jobs(_dump(request.jobs)),
            load_technicians(_dump(request.technicians)),
            _parse_day(request.date),
            load_time_off(_dump(request.time_off)),
        )
        return StaffingSummarySchema(
            date=summary.date,
            total_jobs=summary.total_jobs,
            total_crew_needed=summary.total_crew_needed,
            total_crew_assigned=summary.total_crew_assigned,
            shortfall=summary.shortfall,
            available_tech_count=summary.available_tech_count,
            can_cover_all_jobs=summary.can_cover_all_jobs,
            understaffed_jobs=[{**asdict(s), "shortfall": s.shortfall} for s in summary.understaffed_jobs],
            well_staffed_jobs=[{**asdict(s), "shortfall": s.shortfall} for s in summary.well_staffed_jobs],
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("POST /staffing-summary failed")
        raise HTTPException(status_code=500, detail=str(e))
