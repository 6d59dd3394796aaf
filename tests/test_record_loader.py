from datetime import date

from crewdispatch.domain.models import DayHours
from crewdispatch.infrastructure.record_loader import (
    load_jobs,
    load_line_items,
    load_technicians,
    load_time_off,
    load_vehicles,
)


def test_technician_defaults_and_hours():
    [tech] = load_technicians(
        [
            {
                "id": "t1",
                "name": "Ana",
                "skills": ["HVAC"],
                "working_hours": {
                    "Monday": {"enabled": True, "start": "07:00", "end": "15:00"},
                    "saturday": {"enabled": False},
                    "holiday": {"enabled": True},
                },
                "max_jobs_per_day": 0,
            }
        ]
    )
    assert tech.tech_id == "t1"
    assert tech.skills == frozenset({"HVAC"})
    assert tech.working_hours["monday"] == DayHours(True, "07:00", "15:00")
    assert tech.working_hours["saturday"].enabled is False
    assert "holiday" not in tech.working_hours
    assert tech.max_jobs_per_day == 4
    assert tech.default_buffer_minutes == 30


def test_missing_working_hours_stays_unconfigured():
    [tech] = load_technicians([{"tech_id": "t1", "working_hours": {}}])
    assert tech.working_hours is None


def test_legacy_single_tech_assignment():
    [job] = load_jobs([{"id": "j1", "assigned_tech_id": "t7", "assigned_tech_name": "Gus"}])
    assert job.assigned_tech_ids == ["t7"]
    assert job.assigned_crew[0].role == "lead"

    [other] = load_jobs([{"id": "j2", "assigned_to": "t8"}])
    assert other.assigned_tech_ids == ["t8"]


def test_crew_list_wins_over_legacy_fields():
    [job] = load_jobs(
        [
            {
                "job_id": "j1",
                "assigned_tech_id": "old",
                "assigned_crew": [{"tech_id": "t1", "name": "Ana"}, {"id": "t2"}, "t3"],
            }
        ]
    )
    assert job.assigned_tech_ids == ["t1", "t2", "t3"]
    assert [m.role for m in job.assigned_crew] == ["lead", "helper", "helper"]


def test_free_text_duration_and_iso_schedule():
    [job] = load_jobs(
        [{"job_id": "j1", "estimated_duration": "2.5 hours", "scheduled_time": "2024-03-04T15:00:00Z"}]
    )
    assert job.estimated_duration_minutes == 150
    assert job.scheduled_date == date(2024, 3, 4)

    [numeric] = load_jobs([{"job_id": "j2", "estimated_duration_minutes": 75, "estimated_duration": "9 hours"}])
    assert numeric.estimated_duration_minutes == 75

    [missing] = load_jobs([{"job_id": "j3"}])
    assert missing.estimated_duration_minutes == 60


def test_stored_crew_requirements_short_keys():
    [job] = load_jobs([{"job_id": "j1", "crew_requirements": {"required": 3, "minimum": 2}}])
    assert job.crew_requirements.required_crew_size == 3
    assert job.crew_requirements.minimum_crew_size == 2
    assert job.crew_requirements.requires_multiple_techs


def test_line_items_accept_type_alias():
    [item] = load_line_items([{"description": "Install", "type": "labor", "hours": 4, "crew_size": 2}])
    assert item.item_type == "labor"
    assert item.crew_size == 2


def test_multi_day_schedule_and_coordinates():
    [job] = load_jobs(
        [
            {
                "job_id": "j1",
                "coordinates": {"lat": 40.1, "lng": -89.2},
                "multi_day_schedule": {
                    "total_duration_minutes": 1200,
                    "segments": [
                        {"date": "2024-03-04", "start_time": "08:00", "end_time": "17:00", "duration_minutes": 540},
                        {"date": "2024-03-05", "start_time": "08:00", "end_time": "17:00", "duration_minutes": 540},
                        {"date": "bad", "start_time": "08:00", "end_time": "10:00", "duration_minutes": 120},
                    ],
                },
            }
        ]
    )
    assert job.coordinates == (40.1, -89.2)
    schedule = job.multi_day_schedule
    assert schedule.total_days == 2
    assert schedule.segments[1].day_number == 2
    assert schedule.truncated
    assert schedule.unscheduled_minutes == 120


def test_time_off_and_vehicles():
    entries = load_time_off(
        [
            {"tech_id": "t1", "start_date": "2024-03-04", "reason": "sick"},
            {"tech_id": "t2", "start_date": "garbage"},
        ]
    )
    assert len(entries) == 1
    assert entries[0].end_date == date(2024, 3, 4)

    vehicles = load_vehicles([{"id": "v1", "capacity": {"passengers": 5}}, {"vehicle_id": "v2"}])
    assert vehicles[0].passenger_capacity == 5
    assert vehicles[1].passenger_capacity == 2


def test_time_off_entry_id_is_not_a_tech_id():
    entries = load_time_off(
        [
            {"id": "to-9", "start_date": "2024-03-04"},
            {"id": "to-10", "techId": "t3", "start_date": "2024-03-05"},
        ]
    )
    assert [e.tech_id for e in entries] == ["t3"]
