import asyncio

from conftest import TUESDAY

from crewdispatch.application.learning import Insight, LearningInsight, score_tech_for_job_async
from crewdispatch.domain.models import TimeOffEntry


def test_learning_bonus_is_added(make_tech, make_job):
    async def provider(tech, job):
        return LearningInsight(
            bonus=12,
            insights=(
                Insight("positive", "Completed 9 similar jobs"),
                Insight("warning", "Two callbacks last month"),
            ),
        )

    result = asyncio.run(score_tech_for_job_async(make_tech(), make_job(), [], TUESDAY, provider))
    assert result.score == 182
    assert result.learning_bonus == 12
    assert "Completed 9 similar jobs" in result.reasons
    assert "Two callbacks last month" in result.warnings
    assert not result.is_recommended
    assert result.insights[1] == {"type": "warning", "message": "Two callbacks last month"}


def test_learning_failure_returns_base_score(make_tech, make_job):
    async def provider(tech, job):
        raise RuntimeError("history service down")

    result = asyncio.run(score_tech_for_job_async(make_tech(), make_job(), [], TUESDAY, provider))
    assert result.score == 170
    assert result.learning_bonus == 0
    assert result.is_recommended


def test_blocked_tech_skips_learning(make_tech, make_job):
    calls = []

    async def provider(tech, job):
        calls.append(tech.tech_id)
        return LearningInsight(bonus=500)

    entries = [TimeOffEntry("t1", TUESDAY, TUESDAY)]
    result = asyncio.run(
        score_tech_for_job_async(make_tech(), make_job(), [], TUESDAY, provider, time_off_entries=entries)
    )
    assert result.score == -200
    assert calls == []


def test_no_provider_is_plain_score(make_tech, make_job):
    result = asyncio.run(score_tech_for_job_async(make_tech(), make_job(), [], TUESDAY))
    assert result.score == 170
