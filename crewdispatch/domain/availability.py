"""
Availability and conflict checks. Pure, no I/O.

Intervals are minutes from midnight. Two jobs [a, b) and [c, d) are compatible when
b + buffer <= c or a >= d + buffer, with buffer = the tech's default_buffer_minutes.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from crewdispatch.domain.models import (
    Conflict,
    ConflictReport,
    DayHours,
    Job,
    Technician,
    TimeOffEntry,
)
from crewdispatch.domain.skills import required_skills_for, tech_has_skills
from crewdispatch.domain.timeutils import clock_to_minutes, minutes_to_clock, weekday_name

INACTIVE_JOB_STATUSES = {"cancelled", "completed"}
SLOT_STEP_MINUTES = 30
DEFAULT_DAY_START = "08:00"
DEFAULT_DAY_END = "17:00"


@dataclass(frozen=True)
class TimeOffCheck:
    blocked: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class WorkingDayCheck:
    working: bool
    reason: str  # "default" | "scheduled_on" | "scheduled_off"
    day_name: str
    hours: Optional[DayHours] = None


@dataclass(frozen=True)
class SlotSuggestion:
    date: date
    start_time: str
    end_time: str
    day_name: str


def is_date_blocked_by_time_off(
    day: date,
    entries: Iterable[TimeOffEntry],
    tech_id: Optional[str] = None,
) -> TimeOffCheck:
    """Approved entries only. Range is inclusive on both ends."""
    for entry in entries:
        if tech_id is not None and entry.tech_id != tech_id:
            continue
        if entry.status != "approved":
            continue
        if entry.start_date <= day <= entry.end_date:
            return TimeOffCheck(blocked=True, reason=entry.reason or "time-off")
    return TimeOffCheck(blocked=False)


def day_hours_for(tech: Technician, day: date) -> Optional[DayHours]:
    if not tech.working_hours:
        return None
    return tech.working_hours.get(weekday_name(day))


def is_tech_working_on_day(tech: Technician, day: date) -> WorkingDayCheck:
    """Unconfigured hours (or an unconfigured day) count as working."""
    name = weekday_name(day)
    hours = day_hours_for(tech, day)
    if hours is None:
        return WorkingDayCheck(working=True, reason="default", day_name=name)
    return WorkingDayCheck(
        working=hours.enabled,
        reason="scheduled_on" if hours.enabled else "scheduled_off",
        day_name=name,
        hours=hours,
    )


def _segment_on(job: Job, day: date):
    if job.multi_day_schedule is None:
        return None
    for segment in job.multi_day_schedule.segments:
        if segment.date == day:
            return segment
    return None


def job_occurs_on(job: Job, day: date) -> bool:
    """Undated jobs are taken as belonging to the day being evaluated."""
    if _segment_on(job, day) is not None:
        return True
    return job.scheduled_date is None or job.scheduled_date == day


def job_window_on(job: Job, day: date, timezone: Optional[str] = None) -> Optional[Tuple[int, int]]:
    """(start, end) in minutes for the job on `day`; None when it has no known start."""
    segment = _segment_on(job, day)
    if segment is not None:
        return clock_to_minutes(segment.start_time), clock_to_minutes(segment.end_time)
    if not job.scheduled_time:
        return None
    start = clock_to_minutes(job.scheduled_time, timezone)
    return start, start + job.estimated_duration_minutes


def jobs_for_tech_on_day(
    jobs: Iterable[Job],
    tech_id: str,
    day: date,
    exclude_job_id: Optional[str] = None,
) -> List[Job]:
    return [
        j for j in jobs
        if j.is_assigned_to(tech_id)
        and j.job_id != exclude_job_id
        and j.status not in INACTIVE_JOB_STATUSES
        and job_occurs_on(j, day)
    ]


def windows_overlap(start_a: int, end_a: int, start_b: int, end_b: int, buffer: int) -> bool:
    return not (end_a + buffer <= start_b or start_a >= end_b + buffer)


def find_overlapping_job(
    tech: Technician,
    day: date,
    start: int,
    end: int,
    jobs: Iterable[Job],
    timezone: Optional[str] = None,
    exclude_job_id: Optional[str] = None,
) -> Optional[Job]:
    """First of the tech's same-day jobs whose buffered window collides with [start, end)."""
    buffer = tech.default_buffer_minutes
    for existing in jobs_for_tech_on_day(jobs, tech.tech_id, day, exclude_job_id):
        window = job_window_on(existing, day, timezone)
        if window is None:
            continue
        if windows_overlap(start, end, window[0], window[1], buffer):
            return existing
    return None


def _outside_hours(hours: Optional[DayHours], start: int, end: int) -> bool:
    if hours is None or not hours.start or not hours.end:
        return False
    return start < clock_to_minutes(hours.start) or end > clock_to_minutes(hours.end)


def is_tech_available(
    tech: Technician,
    day: date,
    proposed_start,
    duration_minutes: int,
    existing_jobs: Iterable[Job],
    time_off_entries: Iterable[TimeOffEntry] = (),
    timezone: Optional[str] = None,
    exclude_job_id: Optional[str] = None,
) -> bool:
    """
    1. Time off blocks.
    2. Day disabled blocks.
    3. Window must sit inside the day's working hours (when configured).
    4. No buffered overlap with the tech's other timed jobs that day.
    """
    if is_date_blocked_by_time_off(day, time_off_entries, tech.tech_id).blocked:
        return False
    working = is_tech_working_on_day(tech, day)
    if not working.working:
        return False

    start = clock_to_minutes(proposed_start, timezone)
    end = start + duration_minutes
    if _outside_hours(working.hours, start, end):
        return False

    return find_overlapping_job(
        tech, day, start, end, existing_jobs, timezone, exclude_job_id
    ) is None


def booked_hours(jobs: Sequence[Job]) -> float:
    return sum(j.estimated_duration_minutes for j in jobs) / 60.0


def check_conflicts(
    tech: Technician,
    job: Job,
    existing_jobs: Iterable[Job],
    day: date,
    timezone: Optional[str] = None,
    time_off_entries: Iterable[TimeOffEntry] = (),
) -> ConflictReport:
    existing_jobs = list(existing_jobs)
    conflicts: List[Conflict] = []

    time_off = is_date_blocked_by_time_off(day, time_off_entries, tech.tech_id)
    if time_off.blocked:
        conflicts.append(Conflict("time_off", "error", f"{tech.name} is on {time_off.reason}"))

    working = is_tech_working_on_day(tech, day)
    if not working.working:
        conflicts.append(
            Conflict("day_off", "error", f"{tech.name} is scheduled off on {working.day_name}s")
        )

    tech_jobs = jobs_for_tech_on_day(existing_jobs, tech.tech_id, day, exclude_job_id=job.job_id)
    if len(tech_jobs) >= tech.max_jobs_per_day:
        conflicts.append(
            Conflict("max_jobs", "error", f"{tech.name} already has {tech.max_jobs_per_day} jobs scheduled")
        )

    total_hours = booked_hours(tech_jobs) + job.estimated_duration_minutes / 60.0
    if total_hours > tech.max_hours_per_day:
        conflicts.append(
            Conflict(
                "max_hours",
                "warning",
                f"Would exceed {tech.max_hours_per_day}hr daily limit ({total_hours:.1f}hrs total)",
            )
        )

    skills = required_skills_for(job)
    if not tech_has_skills(tech, skills):
        needed = skills[0] if skills else "required"
        conflicts.append(Conflict("skills", "warning", f"{tech.name} may not have {needed} skills"))

    if job.scheduled_time:
        start = clock_to_minutes(job.scheduled_time, timezone)
        end = start + job.estimated_duration_minutes
        if working.working and _outside_hours(working.hours, start, end):
            conflicts.append(
                Conflict("outside_hours", "error", f"Time slot is outside {tech.name}'s working hours")
            )
        clash = find_overlapping_job(tech, day, start, end, existing_jobs, timezone, job.job_id)
        if clash is not None:
            conflicts.append(
                Conflict(
                    "time_conflict",
                    "error",
                    f"Time slot conflicts with {clash.title or clash.category or 'existing job'}",
                )
            )

    return ConflictReport(conflicts=conflicts)


def find_next_available_slot(
    tech: Technician,
    duration_minutes: int,
    existing_jobs: Iterable[Job],
    start_date: date,
    max_days: int = 7,
    time_off_entries: Iterable[TimeOffEntry] = (),
) -> Optional[SlotSuggestion]:
    """Scan working hours in 30-minute steps, day by day, for the first buffered gap."""
    if duration_minutes <= 0:
        return None
    existing_jobs = list(existing_jobs)
    time_off_entries = list(time_off_entries)
    buffer = tech.default_buffer_minutes

    for offset in range(max_days):
        day = start_date + timedelta(days=offset)
        if is_date_blocked_by_time_off(day, time_off_entries, tech.tech_id).blocked:
            continue
        working = is_tech_working_on_day(tech, day)
        if not working.working:
            continue
        hours = working.hours or DayHours()
        work_start = clock_to_minutes(hours.start or DEFAULT_DAY_START)
        work_end = clock_to_minutes(hours.end or DEFAULT_DAY_END)

        occupied = []
        for j in jobs_for_tech_on_day(existing_jobs, tech.tech_id, day):
            window = job_window_on(j, day)
            if window is not None:
                occupied.append(window)

        start = work_start
        while start + duration_minutes <= work_end:
            end = start + duration_minutes
            if not any(windows_overlap(start, end, s, e, buffer) for s, e in occupied):
                return SlotSuggestion(
                    date=day,
                    start_time=minutes_to_clock(start),
                    end_time=minutes_to_clock(end),
                    day_name=working.day_name,
                )
            start += SLOT_STEP_MINUTES
    return None
