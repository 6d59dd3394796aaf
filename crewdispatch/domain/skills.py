"""
Job category -> skill mapping. Case-insensitive substring matching.
"""

from typing import Sequence

from crewdispatch.domain.models import Job, Technician

JOB_SKILL_MAP = {
    "HVAC": ("HVAC", "Heating", "Cooling", "AC"),
    "Plumbing": ("Plumbing", "Drains", "Water Heater"),
    "Electrical": ("Electrical", "Wiring", "Panel"),
    "Appliance": ("Appliance", "Repair"),
    "General": (),  # any tech can handle
}


def required_skills_for(job: Job) -> tuple:
    category = (job.category or "General").lower()
    for key, skills in JOB_SKILL_MAP.items():
        if key.lower() in category:
            return skills
    return ()


def tech_has_skills(tech: Technician, required: Sequence[str]) -> bool:
    """No requirement, or a generalist tech (no skills listed), always matches."""
    if not required or not tech.skills:
        return True
    tech_skills = [s.lower() for s in tech.skills]
    return any(
        skill.lower() in ts
        for skill in required
        for ts in tech_skills
    )
