import pytest

from crewdispatch.core.travel_engine.route_engine import (
    RouteResult,
    haversine_miles,
    optimize_route,
    route_legs,
    suggest_route_order,
)


def test_nearest_neighbour_from_home_base(make_job):
    jobs = [
        make_job("far", coordinates=(40.30, -89.00)),
        make_job("near", coordinates=(40.01, -89.00)),
        make_job("mid", coordinates=(40.10, -89.00)),
    ]
    ordered = suggest_route_order(jobs, home_base=(40.00, -89.00))
    assert [j.job_id for j in ordered] == ["near", "mid", "far"]


def test_without_home_base_starts_at_first_job(make_job):
    jobs = [
        make_job("a", coordinates=(40.10, -89.00)),
        make_job("b", coordinates=(40.30, -89.00)),
        make_job("c", coordinates=(40.12, -89.00)),
    ]
    assert [j.job_id for j in suggest_route_order(jobs)] == ["a", "c", "b"]


def test_jobs_without_coordinates_go_last_in_input_order(make_job):
    jobs = [
        make_job("x"),
        make_job("a", coordinates=(40.2, -89.0)),
        make_job("y"),
        make_job("b", coordinates=(40.0, -89.0)),
    ]
    ordered = suggest_route_order(jobs, home_base=(40.0, -89.0))
    assert [j.job_id for j in ordered] == ["b", "a", "x", "y"]


def test_single_or_empty_input(make_job):
    assert suggest_route_order([]) == []
    job = make_job()
    assert suggest_route_order([job]) == [job]


def test_haversine_one_degree_latitude():
    assert haversine_miles(40.0, -89.0, 41.0, -89.0) == pytest.approx(69.1, abs=0.1)


def test_optimize_route_totals(make_job):
    jobs = [make_job("a", coordinates=(40.1, -89.0)), make_job("b", coordinates=(40.2, -89.0))]
    result = optimize_route(jobs, home_base=(40.0, -89.0))
    assert not result.fallback
    assert [j.job_id for j in result.ordered_jobs] == ["a", "b"]
    assert len(result.legs) == 2
    assert result.total_distance == pytest.approx(sum(route_legs(result.ordered_jobs, (40.0, -89.0))), abs=0.01)
    assert result.total_duration > 0


def test_optimize_route_uses_plugged_optimizer(make_job):
    jobs = [make_job("a"), make_job("b")]

    def reverse(js, home):
        return RouteResult(ordered_jobs=list(reversed(js)), total_distance=3.0, total_duration=9)

    result = optimize_route(jobs, optimizer=reverse)
    assert [j.job_id for j in result.ordered_jobs] == ["b", "a"]
    assert result.total_duration == 9


def test_optimize_route_falls_back_when_optimizer_fails(make_job):
    jobs = [make_job("a", coordinates=(40.2, -89.0)), make_job("b", coordinates=(40.0, -89.0))]

    def broken(js, home):
        raise TimeoutError("routing service unavailable")

    result = optimize_route(jobs, home_base=(40.0, -89.0), optimizer=broken)
    assert result.fallback
    assert [j.job_id for j in result.ordered_jobs] == ["b", "a"]


def test_optimize_route_empty():
    result = optimize_route([])
    assert result.ordered_jobs == []
    assert result.total_distance == 0
