"""
Historical learning bonus. Optional async hook layered on top of the base score.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Awaitable, Callable, Iterable, Optional

from crewdispatch.domain.constraints import ScoringWeights
from crewdispatch.domain.evaluation import DEFAULT_WEIGHTS, score_tech_for_job
from crewdispatch.domain.models import Job, ScoreResult, Technician, TimeOffEntry
from crewdispatch.domain.timeutils import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Insight:
    type: str  # "warning" | "positive" | "info"
    message: str


@dataclass(frozen=True)
class LearningInsight:
    bonus: float = 0.0
    insights: tuple[Insight, ...] = field(default_factory=tuple)


LearningProvider = Callable[[Technician, Job], Awaitable[LearningInsight]]


def apply_learning(
    base: ScoreResult,
    learning: LearningInsight,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoreResult:
    """Bonus added to the score. Warning insights go to warnings, the rest to reasons."""
    score = round_half_up(base.score + learning.bonus)
    warnings = base.warnings + [i.message for i in learning.insights if i.type == "warning"]
    return replace(
        base,
        score=score,
        learning_bonus=learning.bonus,
        insights=[{"type": i.type, "message": i.message} for i in learning.insights],
        reasons=base.reasons + [i.message for i in learning.insights if i.type != "warning"],
        warnings=warnings,
        is_recommended=not base.is_blocked and score >= weights.recommended_threshold and not warnings,
    )


async def score_tech_for_job_async(
    tech: Technician,
    job: Job,
    other_jobs_same_day: Iterable[Job],
    day: date,
    provider: Optional[LearningProvider] = None,
    time_off_entries: Iterable[TimeOffEntry] = (),
    **score_kwargs,
) -> ScoreResult:
    """Base score plus the provider's bonus. Provider failures leave the base score untouched."""
    base = score_tech_for_job(tech, job, other_jobs_same_day, day, time_off_entries, **score_kwargs)
    if provider is None or base.is_blocked:
        return base
    try:
        learning = await provider(tech, job)
    except Exception as e:
        logger.warning("Learning score failed for %s on %s, using base: %s", tech.tech_id, job.job_id, e)
        return base
    return apply_learning(base, learning, score_kwargs.get("weights", DEFAULT_WEIGHTS))
