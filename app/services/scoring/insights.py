"""Batch-level summaries over scored leads."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from pydantic import BaseModel, Field

from app.models.lead import AIPotential, ConfidenceLevel, Lead
from app.services.scoring.normalizer import has_funding, parse_number, round_half_up

HIGH_PRIORITY_THRESHOLD = 80
MEDIUM_PRIORITY_THRESHOLD = 50
ACTIVE_HIRING_JOBS = 2
COMPLETENESS_FIELD_COUNT = 7
LOW_CONFIDENCE_PENALTY = 0.5


class CategoryStats(BaseModel):
    count: int
    average: int


class LeadSummary(BaseModel):
    """Dashboard-ready counters for a scored batch."""

    total: int = 0
    average_score: int = 0
    high_priority: int = 0
    with_email: int = 0
    high_ai_potential: int = 0
    funded: int = 0
    active_hiring: int = 0
    categories: dict[str, CategoryStats] = Field(default_factory=dict)
    confidence_levels: dict[str, int] = Field(default_factory=dict)
    missing_email: int = 0
    missing_linkedin: int = 0
    missing_revenue: int = 0
    missing_employees: int = 0
    no_funding: int = 0
    no_hiring: int = 0
    low_confidence: int = 0
    completeness: int = 0


def priority_label(score: int | None) -> str:
    if not score:
        return "Unknown"
    if score >= HIGH_PRIORITY_THRESHOLD:
        return "High Priority"
    if score >= MEDIUM_PRIORITY_THRESHOLD:
        return "Medium Priority"
    return "Low Priority"


def _blank(value: object) -> bool:
    return value is None or str(value).strip() == ""


def summarize_leads(leads: Sequence[Lead]) -> LeadSummary:
    """Aggregate counts, averages and data-completeness warnings for ``leads``."""
    total = len(leads)
    if not total:
        return LeadSummary()

    scores = [lead.lead_score or 0 for lead in leads]
    category_totals: dict[str, list[int]] = {}
    for lead, score in zip(leads, scores):
        category = lead.lead_category.value if lead.lead_category else "Unknown"
        category_totals.setdefault(category, []).append(score)
    confidence_counts = Counter(
        (lead.confidence_level or ConfidenceLevel.LOW).value for lead in leads
    )

    missing_email = sum(1 for lead in leads if _blank(lead.email))
    missing_linkedin = sum(1 for lead in leads if _blank(lead.linkedin))
    missing_revenue = sum(1 for lead in leads if _blank(lead.revenue_est) or lead.revenue_est == 0)
    missing_employees = sum(1 for lead in leads if _blank(lead.employees) or lead.employees == 0)
    no_funding = sum(1 for lead in leads if not has_funding(lead.recent_funding))
    no_hiring = sum(1 for lead in leads if parse_number(lead.jobs_30d) == 0)
    low_confidence = confidence_counts.get(ConfidenceLevel.LOW.value, 0)

    total_fields = total * COMPLETENESS_FIELD_COUNT
    gaps = (
        missing_email
        + missing_linkedin
        + missing_revenue
        + missing_employees
        + no_funding
        + no_hiring
        + low_confidence * LOW_CONFIDENCE_PENALTY
    )

    return LeadSummary(
        total=total,
        average_score=round_half_up(sum(scores) / total),
        high_priority=sum(1 for score in scores if score >= HIGH_PRIORITY_THRESHOLD),
        with_email=total - missing_email,
        high_ai_potential=sum(1 for lead in leads if lead.ai_potential == AIPotential.HIGH),
        funded=total - no_funding,
        active_hiring=sum(1 for lead in leads if parse_number(lead.jobs_30d) >= ACTIVE_HIRING_JOBS),
        categories={
            category: CategoryStats(count=len(values), average=round_half_up(sum(values) / len(values)))
            for category, values in category_totals.items()
        },
        confidence_levels=dict(confidence_counts),
        missing_email=missing_email,
        missing_linkedin=missing_linkedin,
        missing_revenue=missing_revenue,
        missing_employees=missing_employees,
        no_funding=no_funding,
        no_hiring=no_hiring,
        low_confidence=low_confidence,
        completeness=round_half_up((total_fields - gaps) / total_fields * 100),
    )
