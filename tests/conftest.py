from datetime import date

import pytest

from crewdispatch.domain.models import CrewMember, DayHours, Job, Technician

MONDAY = date(2024, 3, 4)
TUESDAY = date(2024, 3, 5)
WEDNESDAY = date(2024, 3, 6)
SATURDAY = date(2024, 3, 9)
NEXT_MONDAY = date(2024, 3, 11)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")


def weekday_hours(start="08:00", end="17:00") -> dict:
    """Mon-Fri working, weekend disabled."""
    hours = {day: DayHours(enabled=True, start=start, end=end) for day in WEEKDAYS}
    hours["saturday"] = DayHours(enabled=False)
    hours["sunday"] = DayHours(enabled=False)
    return hours


@pytest.fixture
def make_tech():
    def _make(tech_id="t1", name=None, **kwargs):
        kwargs.setdefault("working_hours", weekday_hours())
        return Technician(tech_id=tech_id, name=name or f"Tech {tech_id}", **kwargs)

    return _make


@pytest.fixture
def make_job():
    def _make(job_id="j1", crew=(), **kwargs):
        kwargs.setdefault("title", f"Job {job_id}")
        members = tuple(CrewMember(tech_id=tid) for tid in crew)
        return Job(job_id=job_id, assigned_crew=members, **kwargs)

    return _make
