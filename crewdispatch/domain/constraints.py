"""
Domain constraints. Dataclasses only. No FastAPI, no external deps beyond dataclasses/typing.
Every scoring weight, cap and per-tech default used by the engine lives here.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScoringWeights:
    skill_match: float = 50.0
    certification_match: float = 30.0
    availability: float = 40.0
    capacity: float = 30.0
    proximity: float = 25.0
    workload_balance: float = 20.0
    preferred_zone: float = 15.0
    near_other_jobs: float = 15.0
    travel_distance: float = -2.0  # per distance unit beyond the tech's radius
    crew_shortfall: float = -100.0  # per missing tech beyond the first
    time_conflict: float = -500.0
    travel_infeasible: float = -300.0
    long_travel: float = -40.0
    moderate_travel: float = -20.0
    slight_travel: float = -5.0
    time_off: float = -200.0
    day_off: float = -100.0
    max_jobs: float = -50.0
    max_hours: float = -30.0
    # Day without workingHours config: assumed available at a reduced weight
    unconfigured_day_factor: float = 0.8
    near_other_jobs_radius: float = 10.0
    close_to_home_radius: float = 10.0
    recommended_threshold: float = 80.0
    candidate_cutoff: float = -50.0
    # Travel time between the tech's timed jobs, minutes
    travel_margin_minutes: int = 10
    long_travel_minutes: int = 45
    moderate_travel_minutes: int = 30
    slight_travel_minutes: int = 15


@dataclass(frozen=True)
class TechDefaults:
    max_travel_miles: int = 30
    max_jobs_per_day: int = 4
    max_hours_per_day: int = 8
    default_buffer_minutes: int = 30


@dataclass(frozen=True)
class MultiDayLimits:
    max_segments: int = 14
    default_day_start: str = "08:00"
    default_day_end: str = "17:00"
    # Calendar days scanned before giving up when every day is disabled
    max_calendar_days: int = 98


@dataclass(frozen=True)
class SchedulingConfig:
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    tech_defaults: TechDefaults = field(default_factory=TechDefaults)
    multi_day: MultiDayLimits = field(default_factory=MultiDayLimits)
