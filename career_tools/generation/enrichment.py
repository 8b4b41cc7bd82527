"""Static additions to parsed results; no extra model calls."""

from __future__ import annotations

from typing import Any

from career_tools.generation.catalog import (
    CERTIFICATIONS,
    RESOURCES,
    SENIOR_ROLE_KEYWORDS,
    TRACK_SKILL_KEYWORDS,
    Certification,
    currency_for,
)
from career_tools.generation.types import ToolKind

MAX_CERTIFICATIONS = 4
MAX_RESOURCES = 6


def select_certifications(leadership_skills: list[str], target_role: str) -> list[Certification]:
    selected: list[Certification] = []
    role = target_role.upper()
    skills = [skill.lower() for skill in leadership_skills]

    if any(keyword in role for keyword in SENIOR_ROLE_KEYWORDS):
        selected.append(CERTIFICATIONS["strategic"][0])

    for track, keywords in TRACK_SKILL_KEYWORDS.items():
        if any(keyword in skill for skill in skills for keyword in keywords):
            selected.append(CERTIFICATIONS[track][0])

    fallback = CERTIFICATIONS["strategic"][1]
    if len(selected) < 3 and fallback not in selected:
        selected.append(fallback)

    return [dict(cert) for cert in selected[:MAX_CERTIFICATIONS]]  # type: ignore[misc]


def enrich(result: dict[str, Any], validated: dict[str, Any], tool: ToolKind) -> dict[str, Any]:
    if tool is ToolKind.SALARY_ANALYSIS:
        currency, symbol = currency_for(validated["country"])
        result["salaryRange"]["currency"] = currency
        result["salaryRange"]["currencySymbol"] = symbol
    elif tool is ToolKind.LEADERSHIP:
        result["recommendedCertifications"] = select_certifications(
            validated["leadershipSkills"], validated["targetRole"]
        )
        result["recommendedResources"] = [dict(resource) for resource in RESOURCES[:MAX_RESOURCES]]
    return result
