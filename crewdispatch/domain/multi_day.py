"""
Multi-day segmentation. Walks forward over working days, one segment per day.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional

from crewdispatch.domain.availability import INACTIVE_JOB_STATUSES, job_window_on, windows_overlap
from crewdispatch.domain.constraints import MultiDayLimits
from crewdispatch.domain.models import DayHours, Job, MultiDayConflict, MultiDaySchedule, Segment
from crewdispatch.domain.timeutils import (
    MINUTES_PER_WORKDAY,
    clock_to_minutes,
    minutes_to_clock,
    weekday_name,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMITS = MultiDayLimits()


def calculate_days_needed(duration_minutes: int, hours_per_day: int = 8) -> int:
    if not duration_minutes or duration_minutes <= 0:
        return 1
    per_day = hours_per_day * 60
    return -(-duration_minutes // per_day)


def is_multi_day_job(duration_minutes: int, max_day_minutes: int = MINUTES_PER_WORKDAY) -> bool:
    return duration_minutes > max_day_minutes


def create_multi_day_schedule(
    start_date: date,
    total_minutes: int,
    working_hours: Optional[dict] = None,
    limits: MultiDayLimits = DEFAULT_LIMITS,
) -> MultiDaySchedule:
    """
    1. From start_date, skip disabled days.
    2. Enabled (or unconfigured) day: consume min(remaining, end - start) from the day's start.
    3. Stop when nothing remains or at limits.max_segments.
    Hitting the cap with minutes left marks the schedule truncated.
    """
    working_hours = working_hours or {}
    total = max(0, int(total_minutes or 0))
    segments: List[Segment] = []
    remaining = total
    current = start_date
    scanned = 0

    while remaining > 0 and len(segments) < limits.max_segments and scanned < limits.max_calendar_days:
        hours: Optional[DayHours] = working_hours.get(weekday_name(current))
        scanned += 1
        if hours is not None and not hours.enabled:
            current += timedelta(days=1)
            continue

        day_start = clock_to_minutes((hours and hours.start) or limits.default_day_start)
        day_end = clock_to_minutes((hours and hours.end) or limits.default_day_end)
        available = day_end - day_start
        if available <= 0:
            current += timedelta(days=1)
            continue

        consumed = min(remaining, available)
        segments.append(
            Segment(
                date=current,
                day_number=len(segments) + 1,
                start_time=minutes_to_clock(day_start),
                end_time=minutes_to_clock(day_start + consumed),
                duration_minutes=consumed,
                is_complete=remaining <= available,
            )
        )
        remaining -= consumed
        current += timedelta(days=1)

    if remaining > 0:
        logger.warning(
            "Multi-day job from %s stopped after %d segments with %d minutes unscheduled",
            start_date.isoformat(), len(segments), remaining,
        )

    scheduled = total - remaining
    return MultiDaySchedule(
        segments=tuple(segments),
        total_duration_minutes=total,
        scheduled_minutes=scheduled,
        is_multi_day=len(segments) > 1,
        total_days=len(segments),
        start_date=segments[0].date if segments else None,
        end_date=segments[-1].date if segments else None,
        truncated=remaining > 0,
        unscheduled_minutes=remaining,
    )


def segment_for_date(schedule: Optional[MultiDaySchedule], day: date) -> Optional[Segment]:
    if schedule is None:
        return None
    for segment in schedule.segments:
        if segment.date == day:
            return segment
    return None


def jobs_on_date(jobs: Iterable[Job], day: date) -> List[Job]:
    """Jobs dated on `day`, or with a multi-day segment on it. Undated jobs are excluded."""
    return [
        j for j in jobs
        if j.scheduled_date == day or segment_for_date(j.multi_day_schedule, day) is not None
    ]


def check_multi_day_conflicts(
    segments: Iterable[Segment],
    existing_jobs: Iterable[Job],
    tech_id: Optional[str] = None,
) -> List[MultiDayConflict]:
    """One record per segment day where an existing job's window overlaps the segment."""
    existing_jobs = [
        j for j in existing_jobs
        if j.status not in INACTIVE_JOB_STATUSES
        and (tech_id is None or j.is_assigned_to(tech_id))
    ]
    conflicts: List[MultiDayConflict] = []
    for segment in segments:
        seg_start = clock_to_minutes(segment.start_time)
        seg_end = clock_to_minutes(segment.end_time)
        hits = []
        for job in jobs_on_date(existing_jobs, segment.date):
            window = job_window_on(job, segment.date)
            if window is None:
                continue
            if windows_overlap(seg_start, seg_end, window[0], window[1], 0):
                hits.append(job.job_id)
        if hits:
            conflicts.append(
                MultiDayConflict(date=segment.date, day_number=segment.day_number, job_ids=tuple(hits))
            )
    return conflicts


@dataclass
class MultiDayAnalysis:
    schedule: MultiDaySchedule
    conflicts: List[MultiDayConflict] = field(default_factory=list)
    summary: str = ""

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


def analyze_multi_day_conflicts(
    start_date: date,
    total_minutes: int,
    working_hours: Optional[dict],
    existing_jobs: Iterable[Job],
    tech_id: Optional[str] = None,
    limits: MultiDayLimits = DEFAULT_LIMITS,
) -> MultiDayAnalysis:
    schedule = create_multi_day_schedule(start_date, total_minutes, working_hours, limits)
    conflicts = check_multi_day_conflicts(schedule.segments, existing_jobs, tech_id)
    if conflicts:
        days = ", ".join(f"Day {c.day_number}" for c in conflicts)
        summary = f"Conflicts on {len(conflicts)} day(s): {days}"
    else:
        summary = "No conflicts detected"
    return MultiDayAnalysis(schedule=schedule, conflicts=conflicts, summary=summary)
