import logging
from datetime import date

import pytest
from conftest import MONDAY, NEXT_MONDAY, SATURDAY, TUESDAY, WEDNESDAY, weekday_hours

from crewdispatch.domain.constraints import MultiDayLimits
from crewdispatch.domain.models import DayHours
from crewdispatch.domain.multi_day import (
    analyze_multi_day_conflicts,
    calculate_days_needed,
    check_multi_day_conflicts,
    create_multi_day_schedule,
    is_multi_day_job,
    jobs_on_date,
)


def test_twenty_hours_over_a_work_week():
    schedule = create_multi_day_schedule(MONDAY, 1200, weekday_hours())
    assert [s.date for s in schedule.segments] == [MONDAY, TUESDAY, WEDNESDAY]
    assert [s.duration_minutes for s in schedule.segments] == [540, 540, 120]
    assert [s.day_number for s in schedule.segments] == [1, 2, 3]
    assert schedule.segments[2].start_time == "08:00"
    assert schedule.segments[2].end_time == "10:00"
    assert schedule.segments[2].is_complete
    assert not schedule.segments[0].is_complete
    assert schedule.is_multi_day
    assert schedule.total_days == 3
    assert schedule.start_date == MONDAY
    assert schedule.end_date == WEDNESDAY
    assert not schedule.truncated


def test_weekend_days_are_skipped():
    friday = date(2024, 3, 8)
    schedule = create_multi_day_schedule(friday, 1200, weekday_hours())
    assert [s.date for s in schedule.segments] == [friday, NEXT_MONDAY, date(2024, 3, 12)]


def test_start_on_disabled_day_moves_to_next_working_day():
    schedule = create_multi_day_schedule(SATURDAY, 60, weekday_hours())
    assert schedule.segments[0].date == NEXT_MONDAY
    assert not schedule.is_multi_day


def test_unconfigured_days_use_default_hours():
    schedule = create_multi_day_schedule(SATURDAY, 1200, None)
    assert [s.duration_minutes for s in schedule.segments] == [540, 540, 120]
    assert schedule.segments[0].date == SATURDAY


@pytest.mark.parametrize("total", [30, 540, 2000, 7560, 10000, 50000])
def test_segment_sum_matches_capped_total(total):
    schedule = create_multi_day_schedule(MONDAY, total, weekday_hours())
    assert sum(s.duration_minutes for s in schedule.segments) == min(total, 14 * 540)
    assert schedule.scheduled_minutes == min(total, 14 * 540)


def test_segment_cap_marks_schedule_truncated(caplog):
    with caplog.at_level(logging.WARNING):
        schedule = create_multi_day_schedule(MONDAY, 10000, weekday_hours())
    assert len(schedule.segments) == 14
    assert schedule.truncated
    assert schedule.unscheduled_minutes == 10000 - 14 * 540
    assert "unscheduled" in caplog.text


def test_custom_segment_cap():
    schedule = create_multi_day_schedule(MONDAY, 1200, weekday_hours(), MultiDayLimits(max_segments=2))
    assert len(schedule.segments) == 2
    assert schedule.unscheduled_minutes == 120


def test_no_working_days_and_zero_duration():
    disabled = {day: DayHours(enabled=False) for day in weekday_hours()}
    nothing = create_multi_day_schedule(MONDAY, 600, disabled)
    assert nothing.segments == ()
    assert nothing.truncated
    assert nothing.start_date is None

    empty = create_multi_day_schedule(MONDAY, 0, weekday_hours())
    assert empty.segments == ()
    assert not empty.truncated


def test_conflicts_reported_per_colliding_day(make_job):
    schedule = create_multi_day_schedule(MONDAY, 1200, weekday_hours())
    existing = [
        make_job("tue", crew=("t1",), scheduled_date=TUESDAY, scheduled_time="10:00"),
        make_job("wed-late", crew=("t1",), scheduled_date=WEDNESDAY, scheduled_time="13:00"),
        make_job("undated", crew=("t1",), scheduled_time="09:00"),
    ]
    conflicts = check_multi_day_conflicts(schedule.segments, existing, "t1")
    assert len(conflicts) == 1
    assert conflicts[0].date == TUESDAY
    assert conflicts[0].day_number == 2
    assert conflicts[0].job_ids == ("tue",)

    assert check_multi_day_conflicts(schedule.segments, existing, "t2") == []
    assert len(check_multi_day_conflicts(schedule.segments, existing)) == 1


def test_existing_multi_day_jobs_collide_on_their_segments(make_job):
    other_schedule = create_multi_day_schedule(TUESDAY, 600, weekday_hours())
    other = make_job("other", crew=("t1",), scheduled_date=TUESDAY, multi_day_schedule=other_schedule)
    schedule = create_multi_day_schedule(MONDAY, 1200, weekday_hours())
    conflicts = check_multi_day_conflicts(schedule.segments, [other], "t1")
    assert [c.day_number for c in conflicts] == [2, 3]


def test_analyze_summary(make_job):
    existing = [make_job("tue", crew=("t1",), scheduled_date=TUESDAY, scheduled_time="10:00")]
    analysis = analyze_multi_day_conflicts(MONDAY, 1200, weekday_hours(), existing, "t1")
    assert analysis.has_conflicts
    assert analysis.summary == "Conflicts on 1 day(s): Day 2"

    clear = analyze_multi_day_conflicts(MONDAY, 1200, weekday_hours(), [], "t1")
    assert clear.summary == "No conflicts detected"


def test_jobs_on_date_includes_segments(make_job):
    spanning = make_job(
        "span", scheduled_date=MONDAY, multi_day_schedule=create_multi_day_schedule(MONDAY, 1200, weekday_hours())
    )
    single = make_job("single", scheduled_date=TUESDAY)
    assert [j.job_id for j in jobs_on_date([spanning, single], TUESDAY)] == ["span", "single"]
    assert [j.job_id for j in jobs_on_date([spanning, single], WEDNESDAY)] == ["span"]


def test_day_count_helpers():
    assert calculate_days_needed(1200) == 3
    assert calculate_days_needed(0) == 1
    assert is_multi_day_job(481)
    assert not is_multi_day_job(480)
