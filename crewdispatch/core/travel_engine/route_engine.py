"""
Route ordering for one tech's day. Default: nearest neighbour on (lat, lng), no network.

A pluggable optimizer (driving-time service) takes precedence; on failure the
nearest-neighbour order is returned with fallback=True.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple

import numpy as np
from scipy.spatial.distance import cdist

from crewdispatch.core.travel_engine.distance_adapter import estimate_travel_time_minutes
from crewdispatch.domain.models import Job

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3958.8

LatLng = Tuple[float, float]


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    lat1_r = math.radians(lat1)
    lat2_r = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlon / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.asin(min(1.0, math.sqrt(a)))


@dataclass
class RouteResult:
    ordered_jobs: List[Job]
    total_distance: float = 0.0  # miles
    total_duration: int = 0  # minutes of driving
    fallback: bool = False
    legs: List[float] = field(default_factory=list)


class RouteOptimizer(Protocol):
    """Reorders a day's jobs starting from home_base."""

    def __call__(self, jobs: Sequence[Job], home_base: Optional[LatLng]) -> RouteResult:
        ...


def suggest_route_order(jobs: Sequence[Job], home_base: Optional[LatLng] = None) -> List[Job]:
    """
    1. Jobs with coordinates: greedy nearest neighbour (Euclidean on lat/lng)
       starting at home_base, or at the first located job when there is none.
    2. Jobs without coordinates keep their input order, after the located ones.
    """
    jobs = list(jobs)
    if len(jobs) <= 1:
        return jobs

    located = [j for j in jobs if j.coordinates is not None]
    unlocated = [j for j in jobs if j.coordinates is None]
    if not located:
        return jobs

    points = np.array([j.coordinates for j in located], dtype=float)
    D = cdist(points, points)
    visited = np.zeros(len(located), dtype=bool)

    if home_base is not None:
        from_home = cdist(np.array([home_base], dtype=float), points)[0]
        current = int(np.argmin(from_home))
    else:
        current = 0

    order = [current]
    visited[current] = True
    while not visited.all():
        dist = np.where(visited, np.inf, D[current])
        current = int(np.argmin(dist))
        order.append(current)
        visited[current] = True

    return [located[i] for i in order] + unlocated


def route_legs(jobs: Sequence[Job], home_base: Optional[LatLng] = None) -> List[float]:
    """Haversine miles per leg between consecutive located stops."""
    stops = ([home_base] if home_base is not None else []) + [
        j.coordinates for j in jobs if j.coordinates is not None
    ]
    return [
        haversine_miles(a[0], a[1], b[0], b[1])
        for a, b in zip(stops, stops[1:])
    ]


def _nearest_neighbour_result(jobs: Sequence[Job], home_base: Optional[LatLng], fallback: bool) -> RouteResult:
    ordered = suggest_route_order(jobs, home_base)
    legs = route_legs(ordered, home_base)
    return RouteResult(
        ordered_jobs=ordered,
        total_distance=round(sum(legs), 2),
        total_duration=sum(estimate_travel_time_minutes(leg) for leg in legs),
        fallback=fallback,
        legs=legs,
    )


def optimize_route(
    jobs: Sequence[Job],
    home_base: Optional[LatLng] = None,
    optimizer: Optional[RouteOptimizer] = None,
) -> RouteResult:
    if not jobs:
        return RouteResult(ordered_jobs=[])
    if optimizer is None:
        return _nearest_neighbour_result(jobs, home_base, fallback=False)
    try:
        return optimizer(jobs, home_base)
    except Exception as e:
        logger.warning("Route optimizer failed (%s); using nearest-neighbour order", e)
        return _nearest_neighbour_result(jobs, home_base, fallback=True)
