"""Deterministic lead scoring and batch prioritisation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone

from app.models.lead import (
    AIPotential,
    ConfidenceLevel,
    DomainStatus,
    EmailValidation,
    Lead,
    LeadCategory,
    ScoreBreakdown,
)
from app.services.scoring import components
from app.services.scoring.dedupe import deduplicate_leads
from app.services.scoring.normalizer import format_count, has_funding, parse_number, round_half_up

logger = logging.getLogger("app.services.scoring.engine")

SCORE_WEIGHTS: Mapping[str, float] = {
    "funding": 0.35,
    "hiring": 0.25,
    "revenue": 0.20,
    "size": 0.10,
    "confidence": 0.10,
}
AI_POTENTIAL_WEIGHTS: Mapping[str, float] = {
    "funding": 0.40,
    "hiring": 0.35,
    "size": 0.25,
}
SCORERS: tuple[tuple[str, Callable[[Lead], float]], ...] = (
    ("funding", components.funding_score),
    ("hiring", components.hiring_score),
    ("revenue", components.revenue_score),
    ("size", components.size_score),
    ("confidence", components.confidence_score),
)

CONFIDENCE_TIERS = ((75, ConfidenceLevel.HIGH), (50, ConfidenceLevel.MEDIUM))
AI_POTENTIAL_TIERS = ((75, AIPotential.HIGH), (45, AIPotential.MEDIUM))
EXPLANATION_SEPARATOR = " • "
BASELINE_EXPLANATION = "Baseline fit"


def build_breakdown(lead: Lead) -> ScoreBreakdown:
    return ScoreBreakdown(**{name: scorer(lead) for name, scorer in SCORERS})


def weighted_score(breakdown: ScoreBreakdown) -> int:
    """Combine sub-scores with ``SCORE_WEIGHTS`` into a 0-100 integer."""
    total = sum(getattr(breakdown, name) * weight for name, weight in SCORE_WEIGHTS.items())
    return max(0, min(100, round_half_up(total)))


def confidence_level(breakdown: ScoreBreakdown) -> ConfidenceLevel:
    for threshold, level in CONFIDENCE_TIERS:
        if breakdown.confidence >= threshold:
            return level
    return ConfidenceLevel.LOW


def ai_potential(breakdown: ScoreBreakdown) -> AIPotential:
    """Blend funding, hiring and size with their own weights to rate AI-adoption fit."""
    combined = sum(getattr(breakdown, name) * weight for name, weight in AI_POTENTIAL_WEIGHTS.items())
    for threshold, level in AI_POTENTIAL_TIERS:
        if combined >= threshold:
            return level
    return AIPotential.LOW


def lead_category(lead: Lead) -> LeadCategory:
    employees = parse_number(lead.employees)
    revenue = parse_number(lead.revenue_est)
    jobs = parse_number(lead.jobs_30d)
    if employees >= 500 or revenue >= 50_000_000:
        return LeadCategory.ENTERPRISE
    if employees >= 50 or revenue >= 5_000_000 or jobs >= 3:
        return LeadCategory.GROWTH
    return LeadCategory.STARTUP


def build_explanation(lead: Lead) -> str:
    clauses: list[str] = []
    jobs = parse_number(lead.jobs_30d)

    if has_funding(lead.recent_funding):
        clauses.append("Recent funding round")
    if jobs >= 5:
        clauses.append(f"High hiring momentum ({format_count(jobs)} jobs)")
    elif jobs >= 2:
        clauses.append(f"Active hiring ({format_count(jobs)} jobs)")
    if parse_number(lead.revenue_est) >= 10_000_000:
        clauses.append("Strong revenue base")

    return EXPLANATION_SEPARATOR.join(clauses) if clauses else BASELINE_EXPLANATION


def score_lead(lead: Lead, *, now: datetime | None = None) -> Lead:
    """Return a scored copy of ``lead``.

    Sparse or malformed input never raises; missing data simply lands in the
    lowest tier of each scorer. ``now`` pins the timestamps written by the
    secondary-signal pass and defaults to the current UTC time.
    """
    moment = _as_utc(now or datetime.now(timezone.utc))
    timestamp = _format_timestamp(moment)
    breakdown = build_breakdown(lead)
    enrichment_date = lead.enrichment_date or timestamp

    return lead.model_copy(
        update={
            "lead_score": weighted_score(breakdown),
            "confidence_level": confidence_level(breakdown),
            "explanation": build_explanation(lead),
            "ai_potential": ai_potential(breakdown),
            "lead_category": lead_category(lead),
            "breakdown": breakdown,
            "enrichment_date": enrichment_date,
            "data_freshness": components.data_freshness(enrichment_date, now=moment),
            "email_validation": EmailValidation.VALID if lead.email else EmailValidation.UNKNOWN,
            "domain_status": DomainStatus.ACTIVE if lead.domain else DomainStatus.UNKNOWN,
            "growth_velocity": components.growth_velocity(lead),
            "company_signals": components.company_signals(lead),
            "last_verified": timestamp,
            "data_quality_score": components.data_quality_score(lead),
        }
    )


def score_and_deduplicate_leads(leads: Iterable[Lead], *, now: datetime | None = None) -> list[Lead]:
    """Deduplicate, score and rank a batch, highest ``lead_score`` first.

    Deduplication runs before scoring so that only one record per company is
    ever scored. Ties keep their post-dedup order.
    """
    batch = list(leads)
    moment = now or datetime.now(timezone.utc)
    unique = deduplicate_leads(batch)
    scored = [score_lead(lead, now=moment) for lead in unique]
    ranked = sorted(scored, key=lambda lead: lead.lead_score or 0, reverse=True)
    logger.info(
        "Scored lead batch. input=%s unique=%s dropped=%s",
        len(batch),
        len(unique),
        len(batch) - len(unique),
    )
    return ranked


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _format_timestamp(value: datetime) -> str:
    return _as_utc(value).isoformat().replace("+00:00", "Z")
