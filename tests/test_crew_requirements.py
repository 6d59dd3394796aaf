from crewdispatch.domain.crew_requirements import (
    extract_crew_requirements,
    find_suitable_vehicles,
    required_crew_size,
    requirements_for,
    validate_crew_assignment,
)
from crewdispatch.domain.models import CrewRequirements, LineItem, Vehicle


def test_no_line_items_returns_default_requirement():
    req = extract_crew_requirements([])
    assert req.required_crew_size == 1
    assert req.minimum_crew_size == 1
    assert req.maximum_crew_size is None
    assert req.source == "default"
    assert extract_crew_requirements(None) == req


def test_ten_labor_hours_without_crew_size_infers_two_techs():
    req = extract_crew_requirements([LineItem(item_type="labor", hours=10, crew_size=0)])
    assert req.required_crew_size == 2
    assert req.source == "inferred"
    assert req.minimum_crew_size == 1
    assert req.maximum_crew_size == 4
    assert req.total_labor_hours == 10


def test_inference_tiers():
    large = extract_crew_requirements([LineItem(item_type="labor", hours=16)])
    small = extract_crew_requirements([LineItem(item_type="labor", hours=4)])
    assert large.required_crew_size == 3
    assert small.required_crew_size == 1
    assert small.source == "inferred"


def test_specified_crew_size_wins():
    req = extract_crew_requirements(
        [
            LineItem(description="Roof tear-off", item_type="labor", hours=4, crew_size=3),
            LineItem(description="Cleanup", category="Labor", hours=2),
        ]
    )
    assert req.source == "specified"
    assert req.required_crew_size == 3
    assert req.minimum_crew_size == 2
    assert req.maximum_crew_size == 5
    assert req.requires_multiple_techs is True
    # 4h x 3 techs + 2h x 1 tech
    assert req.total_labor_hours == 14
    assert "Roof tear-off: 3 techs" in req.notes
    assert len(req.labor_items) == 2


def test_non_labor_items_are_ignored():
    req = extract_crew_requirements(
        [
            LineItem(description="Shingles", item_type="material", crew_size=5, quantity=40),
            LineItem(description="Install", is_labor=True, hours=3),
        ]
    )
    assert req.required_crew_size == 1
    assert req.total_labor_hours == 3
    assert [i.description for i in req.labor_items] == ["Install"]


def test_extraction_is_idempotent():
    items = [
        LineItem(item_type="labor", hours=6, crew_size=2),
        LineItem(item_type="labor", hours=3),
    ]
    assert extract_crew_requirements(items) == extract_crew_requirements(items)


def test_crew_size_is_monotonic():
    previous = 0
    for crew in range(0, 7):
        req = extract_crew_requirements(
            [LineItem(item_type="labor", hours=5, crew_size=crew), LineItem(item_type="labor", hours=2)]
        )
        assert req.required_crew_size >= previous
        previous = req.required_crew_size


def test_stored_requirement_takes_precedence(make_job):
    stored = CrewRequirements(required_crew_size=4, minimum_crew_size=3, source="specified")
    job = make_job(crew_requirements=stored, line_items=(LineItem(item_type="labor", hours=1),))
    assert requirements_for(job) is stored
    assert required_crew_size(job) == 4


def test_validate_crew_assignment_statuses(make_job):
    two = CrewRequirements(required_crew_size=3, minimum_crew_size=2, maximum_crew_size=4)

    unassigned = validate_crew_assignment(make_job(crew_requirements=two))
    assert unassigned.status == "unassigned"
    assert not unassigned.is_valid

    below_min = validate_crew_assignment(make_job(crew_requirements=two, crew=("a",)))
    assert below_min.status == "understaffed"
    assert not below_min.is_valid

    below_ideal = validate_crew_assignment(make_job(crew_requirements=two, crew=("a", "b")))
    assert below_ideal.status == "understaffed"
    assert below_ideal.is_valid
    assert below_ideal.warnings

    over = validate_crew_assignment(make_job(crew_requirements=two, crew=("a", "b", "c", "d", "e")))
    assert over.status == "overstaffed"
    assert over.is_valid

    ok = validate_crew_assignment(make_job(crew_requirements=two, crew=("a", "b", "c")))
    assert ok.status == "valid"
    assert ok.difference == 0


def test_find_suitable_vehicles_closest_fit_first():
    vehicles = [
        Vehicle("truck", "Truck", passenger_capacity=2),
        Vehicle("van", "Van", passenger_capacity=4),
        Vehicle("crew-cab", "Crew Cab", passenger_capacity=3),
        Vehicle("bus", "Bus", passenger_capacity=8, status="maintenance"),
    ]
    assert [v.vehicle_id for v in find_suitable_vehicles(vehicles, 3)] == ["crew-cab", "van"]
