import pytest
from fastapi.testclient import TestClient

from crewdispatch.api.main import app

WEEKDAY_HOURS = {
    day: {"enabled": True, "start": "08:00", "end": "17:00"}
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
}
WEEKDAY_HOURS["saturday"] = {"enabled": False}
WEEKDAY_HOURS["sunday"] = {"enabled": False}


@pytest.fixture
def client():
    return TestClient(app)


def _tech(tech_id, **extra):
    return {"tech_id": tech_id, "name": f"Tech {tech_id}", "working_hours": WEEKDAY_HOURS, **extra}


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_score_idle_tech(client):
    response = client.post(
        "/score",
        json={
            "tech": _tech("t1"),
            "job": {"job_id": "j1", "title": "Tune-up", "estimated_duration_minutes": 90},
            "date": "2024-03-05",
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["score"] == 170
    assert body["is_recommended"]
    assert "Works Tuesdays" in body["reasons"]


def test_score_rejects_bad_date(client):
    response = client.post(
        "/score",
        json={"tech": _tech("t1"), "job": {"job_id": "j1"}, "date": "03/05/2024"},
    )
    assert response.status_code == 400
    assert "Invalid date" in response.json()["detail"]


def test_auto_assign_returns_plan_and_updates(client):
    response = client.post(
        "/auto-assign",
        json={
            "date": "2024-03-04",
            "technicians": [_tech("t1"), _tech("t2")],
            "jobs": [
                {
                    "job_id": "install",
                    "scheduled_date": "2024-03-04",
                    "line_items": [{"item_type": "labor", "hours": 10}],
                },
                {"job_id": "done", "assigned_crew": [{"tech_id": "t1"}]},
            ],
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["date"] == "2024-03-04"
    assert [e["job_id"] for e in body["entries"]] == ["install"]
    assert body["entries"][0]["assigned_crew_size"] == 2
    assert body["summary"]["fully_staffed"] == 1
    [update] = body["updates"]
    assert update["assigned_crew"][0]["role"] == "lead"
    assert update["assigned_crew"][1]["role"] == "helper"
    assert update["scheduled_date"] == "2024-03-04"


def test_validate_assignment_vehicle_too_small(client):
    response = client.post(
        "/validate-assignment",
        json={
            "date": "2024-03-04",
            "job": {"job_id": "j1", "crew_requirements": {"required_crew_size": 3, "minimum_crew_size": 2}},
            "crew_ids": ["t1", "t2", "t3"],
            "vehicle_id": "truck",
            "technicians": [_tech("t1"), _tech("t2"), _tech("t3")],
            "vehicles": [
                {"vehicle_id": "truck", "name": "Truck 1", "passenger_capacity": 2},
                {"vehicle_id": "van", "name": "Van 1", "passenger_capacity": 4},
            ],
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert not body["is_valid"]
    assert "vehicle_capacity" in [e["type"] for e in body["errors"]]
    [suggestion] = [s for s in body["suggestions"] if s["type"] == "change_vehicle"]
    assert suggestion["vehicle_ids"] == ["van"]


def test_validate_assignment_unknown_tech_is_bad_request(client):
    response = client.post(
        "/validate-assignment",
        json={"date": "2024-03-04", "job": {"job_id": "j1"}, "crew_ids": ["ghost"], "technicians": [_tech("t1")]},
    )
    assert response.status_code == 400


def test_multi_day_schedule(client):
    response = client.post(
        "/multi-day-schedule",
        json={
            "job": {"job_id": "deck", "estimated_duration_minutes": 1200},
            "start_date": "2024-03-04",
            "working_hours": WEEKDAY_HOURS,
            "existing_jobs": [
                {
                    "job_id": "other",
                    "scheduled_date": "2024-03-05",
                    "scheduled_time": "09:00",
                    "estimated_duration_minutes": 60,
                }
            ],
        },
    )
    assert response.status_code == 200
    body = response.json()
    schedule = body["schedule"]
    assert [s["duration_minutes"] for s in schedule["segments"]] == [540, 540, 120]
    assert schedule["end_date"] == "2024-03-06"
    assert body["conflicts"] == [{"date": "2024-03-05", "day_number": 2, "job_ids": ["other"]}]
    assert body["summary"].startswith("Conflicts on 1 day(s)")


def test_conflicts_for_time_off(client):
    response = client.post(
        "/conflicts",
        json={
            "tech": _tech("t1"),
            "job": {"job_id": "j1", "scheduled_time": "10:00"},
            "date": "2024-03-04",
            "time_off": [{"tech_id": "t1", "start_date": "2024-03-04", "reason": "vacation"}],
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["has_errors"]
    assert any("vacation" in c["message"] for c in body["conflicts"])


def test_crew_requirements_from_labor_hours(client):
    response = client.post(
        "/crew-requirements",
        json={"line_items": [{"description": "Install", "item_type": "labor", "hours": 10}]},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["required_crew_size"] == 2
    assert body["source"] == "inferred"
    assert body["requires_multiple_techs"]


def test_route_order(client):
    response = client.post(
        "/route-order",
        json={
            "home_base": {"lat": 40.0, "lng": -89.0},
            "jobs": [
                {"job_id": "far", "coordinates": {"lat": 40.3, "lng": -89.0}},
                {"job_id": "near", "coordinates": {"lat": 40.05, "lng": -89.0}},
                {"job_id": "nowhere"},
            ],
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["ordered_job_ids"] == ["near", "far", "nowhere"]
    assert not body["fallback"]


def test_staffing_summary(client):
    response = client.post(
        "/staffing-summary",
        json={
            "date": "2024-03-04",
            "technicians": [_tech("t1"), _tech("t2")],
            "jobs": [
                {"job_id": "pair", "scheduled_date": "2024-03-04", "assigned_crew": [{"tech_id": "t1"}],
                 "crew_requirements": {"required_crew_size": 2}},
            ],
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["shortfall"] == 1
    assert body["understaffed_jobs"][0]["shortfall"] == 1
    assert body["available_tech_count"] == 2
    assert body["can_cover_all_jobs"]
