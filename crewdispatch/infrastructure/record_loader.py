"""
Record loader. Raw dict -> domain records. The only place legacy field names and
free-text values are resolved; the engine sees explicit optional fields only.
"""

import logging
from typing import Any, Optional

from crewdispatch.domain.constraints import TechDefaults
from crewdispatch.domain.models import (
    CrewMember,
    CrewRequirements,
    DayHours,
    Job,
    LineItem,
    MultiDaySchedule,
    Segment,
    Technician,
    TimeOffEntry,
    Vehicle,
)
from crewdispatch.domain.timeutils import WEEKDAY_NAMES, coerce_date, parse_duration_to_minutes

logger = logging.getLogger(__name__)

TECH_DEFAULTS = TechDefaults()


def _first(raw: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return default


def _str_set(values) -> frozenset:
    if not values:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    return frozenset(str(v) for v in values if v)


def _int_or(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def load_working_hours(raw: Optional[dict]) -> Optional[dict]:
    """{"monday": {"enabled", "start", "end"}} -> {"monday": DayHours}. None when not configured."""
    if not raw:
        return None
    hours = {}
    for day, value in raw.items():
        name = str(day).lower()
        if name not in WEEKDAY_NAMES or value is None:
            continue
        if isinstance(value, DayHours):
            hours[name] = value
            continue
        hours[name] = DayHours(
            enabled=bool(value.get("enabled", True)),
            start=value.get("start") or None,
            end=value.get("end") or None,
        )
    return hours or None


def load_technicians(raw_techs: list[dict]) -> list[Technician]:
    result: list[Technician] = []
    for raw in raw_techs:
        result.append(
            Technician(
                tech_id=str(_first(raw, "tech_id", "id", default="")),
                name=str(raw.get("name") or ""),
                working_hours=load_working_hours(raw.get("working_hours")),
                skills=_str_set(raw.get("skills")),
                certifications=_str_set(raw.get("certifications")),
                preferred_zones=_str_set(raw.get("preferred_zones")),
                home_zip=_first(raw, "home_zip", "zip_code"),
                max_travel_miles=_int_or(raw.get("max_travel_miles"), TECH_DEFAULTS.max_travel_miles),
                max_jobs_per_day=_int_or(raw.get("max_jobs_per_day"), TECH_DEFAULTS.max_jobs_per_day),
                max_hours_per_day=_int_or(raw.get("max_hours_per_day"), TECH_DEFAULTS.max_hours_per_day),
                default_buffer_minutes=_int_or(
                    raw.get("default_buffer_minutes"), TECH_DEFAULTS.default_buffer_minutes
                ),
            )
        )
    return result


def load_line_items(raw_items: Optional[list]) -> tuple[LineItem, ...]:
    items = []
    for raw in raw_items or []:
        crew = raw.get("crew_size")
        items.append(
            LineItem(
                description=str(raw.get("description") or ""),
                item_type=_first(raw, "item_type", "type"),
                category=raw.get("category"),
                is_labor=bool(raw.get("is_labor", False)),
                crew_size=int(crew) if crew else None,
                hours=raw.get("hours"),
                quantity=raw.get("quantity"),
            )
        )
    return tuple(items)


def load_crew_requirements(raw: Optional[dict]) -> Optional[CrewRequirements]:
    """Stored requirement; accepts the short keys (required/minimum/maximum) older records use."""
    if not raw:
        return None
    required = _int_or(_first(raw, "required_crew_size", "required"), 1)
    minimum = _int_or(_first(raw, "minimum_crew_size", "minimum"), 1)
    maximum = _first(raw, "maximum_crew_size", "maximum")
    return CrewRequirements(
        required_crew_size=required,
        minimum_crew_size=minimum,
        maximum_crew_size=int(maximum) if maximum is not None else None,
        source=str(raw.get("source") or "specified"),
        total_labor_hours=float(raw.get("total_labor_hours") or 0.0),
        requires_multiple_techs=required > 1,
        notes=tuple(raw.get("notes") or ()),
    )


def load_crew(raw: dict) -> tuple[CrewMember, ...]:
    """assigned_crew list, else the legacy single-tech assigned_tech_id / assigned_to."""
    crew = raw.get("assigned_crew")
    if crew:
        members = []
        for i, member in enumerate(crew):
            if isinstance(member, str):
                members.append(CrewMember(tech_id=member, role="lead" if i == 0 else "helper"))
                continue
            tech_id = _first(member, "tech_id", "id")
            if not tech_id:
                continue
            members.append(
                CrewMember(
                    tech_id=str(tech_id),
                    name=str(member.get("name") or ""),
                    role=str(member.get("role") or ("lead" if i == 0 else "helper")),
                )
            )
        return tuple(members)
    legacy = _first(raw, "assigned_tech_id", "assigned_to")
    if legacy:
        return (CrewMember(tech_id=str(legacy), name=str(raw.get("assigned_tech_name") or ""), role="lead"),)
    return ()


def load_multi_day_schedule(raw: Optional[dict]) -> Optional[MultiDaySchedule]:
    if not raw or not raw.get("segments"):
        return None
    segments = []
    for i, seg in enumerate(raw["segments"]):
        day = coerce_date(seg.get("date"))
        if day is None:
            logger.warning("Dropping multi-day segment without a valid date: %r", seg)
            continue
        segments.append(
            Segment(
                date=day,
                day_number=int(seg.get("day_number") or i + 1),
                start_time=str(seg.get("start_time") or "08:00"),
                end_time=str(seg.get("end_time") or "17:00"),
                duration_minutes=int(seg.get("duration_minutes") or 0),
                is_complete=bool(seg.get("is_complete", False)),
            )
        )
    if not segments:
        return None
    total = int(raw.get("total_duration_minutes") or sum(s.duration_minutes for s in segments))
    scheduled = sum(s.duration_minutes for s in segments)
    return MultiDaySchedule(
        segments=tuple(segments),
        total_duration_minutes=total,
        scheduled_minutes=scheduled,
        is_multi_day=len(segments) > 1,
        total_days=len(segments),
        start_date=segments[0].date,
        end_date=segments[-1].date,
        truncated=scheduled < total,
        unscheduled_minutes=max(0, total - scheduled),
    )


def _coordinates(raw: Any) -> Optional[tuple[float, float]]:
    if not raw:
        return None
    if isinstance(raw, dict):
        lat, lng = raw.get("lat"), raw.get("lng")
    else:
        lat, lng = raw[0], raw[1]
    if lat is None or lng is None:
        return None
    return float(lat), float(lng)


def load_jobs(raw_jobs: list[dict]) -> list[Job]:
    result: list[Job] = []
    for raw in raw_jobs:
        duration = raw.get("estimated_duration_minutes")
        if duration is None:
            duration = raw.get("estimated_duration")
        scheduled_time = raw.get("scheduled_time") or None
        scheduled_date = coerce_date(raw.get("scheduled_date"))
        if scheduled_date is None and isinstance(scheduled_time, str) and "T" in scheduled_time:
            scheduled_date = coerce_date(scheduled_time)
        result.append(
            Job(
                job_id=str(_first(raw, "job_id", "id", default="")),
                title=str(_first(raw, "title", "description", default="")),
                category=str(raw.get("category") or "General"),
                estimated_duration_minutes=parse_duration_to_minutes(duration),
                scheduled_date=scheduled_date,
                scheduled_time=scheduled_time,
                crew_requirements=load_crew_requirements(raw.get("crew_requirements")),
                assigned_crew=load_crew(raw),
                assigned_vehicle_id=raw.get("assigned_vehicle_id"),
                line_items=load_line_items(raw.get("line_items")),
                multi_day_schedule=load_multi_day_schedule(raw.get("multi_day_schedule")),
                required_certifications=_str_set(raw.get("required_certifications")),
                address=_first(raw, "address", "service_address"),
                zip_code=raw.get("zip_code"),
                zone=raw.get("zone"),
                coordinates=_coordinates(raw.get("coordinates")),
                status=str(raw.get("status") or "pending"),
            )
        )
    return result


def load_time_off(raw_entries: list[dict]) -> list[TimeOffEntry]:
    """Entries with an unparseable start or no tech id are dropped. A missing end date means a single day."""
    result: list[TimeOffEntry] = []
    for raw in raw_entries:
        start = coerce_date(raw.get("start_date"))
        if start is None:
            logger.warning("Dropping time-off entry without a valid start date: %r", raw)
            continue
        tech_id = _first(raw, "tech_id", "techId")
        if not tech_id:
            logger.warning("Dropping time-off entry without a tech id: %r", raw)
            continue
        end = coerce_date(raw.get("end_date")) or start
        result.append(
            TimeOffEntry(
                tech_id=str(tech_id),
                start_date=start,
                end_date=end,
                reason=str(_first(raw, "reason", "type", default="time-off")),
                status=str(raw.get("status") or "approved"),
            )
        )
    return result


def load_vehicles(raw_vehicles: list[dict]) -> list[Vehicle]:
    result: list[Vehicle] = []
    for raw in raw_vehicles:
        capacity = raw.get("passenger_capacity")
        if capacity is None and isinstance(raw.get("capacity"), dict):
            capacity = raw["capacity"].get("passengers")
        result.append(
            Vehicle(
                vehicle_id=str(_first(raw, "vehicle_id", "id", default="")),
                name=str(raw.get("name") or ""),
                passenger_capacity=_int_or(capacity, 2),
                status=str(raw.get("status") or "available"),
            )
        )
    return result
