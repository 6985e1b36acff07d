"""Per-dimension scorers used by the lead scoring engine.

Every scorer is a pure function of a single lead. Tiered scorers are declared
as ``(lower_bound, points)`` tables evaluated top-down: bounds are inclusive
and the first matching tier wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from app.models.lead import DataFreshness, GrowthVelocity, Lead
from app.services.scoring.normalizer import has_funding, is_filled, parse_number, round_half_up

Tier = tuple[float, float]

HIRING_TIERS: tuple[Tier, ...] = (
    (10, 100),
    (5, 80),
    (2, 60),
    (1, 40),
)
HIRING_FLOOR = 0.0

REVENUE_TIERS: tuple[Tier, ...] = (
    (50_000_000, 100),
    (10_000_000, 85),
    (5_000_000, 70),
    (1_000_000, 55),
    (100_000, 30),
)
REVENUE_FLOOR = 10.0

SIZE_TIERS: tuple[Tier, ...] = (
    (1_000, 100),
    (250, 85),
    (50, 70),
    (10, 50),
)
SIZE_FLOOR = 25.0

COMPLETENESS_FIELDS = (
    "company_name",
    "domain",
    "employees",
    "revenue_est",
    "email",
    "linkedin",
    "jobs_30d",
    "recent_funding",
)
CRITICAL_FIELDS = ("company_name", "domain", "email")

FRESH_WINDOW_DAYS = 30
MODERATE_WINDOW_DAYS = 90


def _bucket(value: float, tiers: Sequence[Tier], floor: float) -> float:
    for lower_bound, points in tiers:
        if value >= lower_bound:
            return float(points)
    return floor


def _filled_count(lead: Lead, fields: Sequence[str]) -> int:
    return sum(1 for field in fields if is_filled(getattr(lead, field, None)))


def funding_score(lead: Lead) -> float:
    return 100.0 if has_funding(lead.recent_funding) else 0.0


def hiring_score(lead: Lead) -> float:
    return _bucket(parse_number(lead.jobs_30d), HIRING_TIERS, HIRING_FLOOR)


def revenue_score(lead: Lead) -> float:
    return _bucket(parse_number(lead.revenue_est), REVENUE_TIERS, REVENUE_FLOOR)


def size_score(lead: Lead) -> float:
    return _bucket(parse_number(lead.employees), SIZE_TIERS, SIZE_FLOOR)


def confidence_score(lead: Lead) -> float:
    """Share of the completeness checklist that is populated, on a 0-100 scale."""
    return _filled_count(lead, COMPLETENESS_FIELDS) / len(COMPLETENESS_FIELDS) * 100


def growth_velocity(lead: Lead) -> GrowthVelocity:
    jobs = parse_number(lead.jobs_30d)
    funded = has_funding(lead.recent_funding)
    if jobs >= 5 and funded:
        return GrowthVelocity.HIGH
    if jobs >= 2 or funded:
        return GrowthVelocity.MEDIUM
    return GrowthVelocity.LOW


def company_signals(lead: Lead) -> list[str]:
    """Short labels for the notable signals present on a lead."""
    signals: list[str] = []
    jobs = parse_number(lead.jobs_30d)
    revenue = parse_number(lead.revenue_est)

    if has_funding(lead.recent_funding):
        signals.append("Recent Funding Round")
    if jobs >= 10:
        signals.append("Aggressive Hiring")
    elif jobs >= 5:
        signals.append("Active Recruitment")
    elif jobs >= 2:
        signals.append("Growing Team")

    if revenue >= 50_000_000:
        signals.append("Enterprise Revenue")
    elif revenue >= 10_000_000:
        signals.append("Strong Revenue Base")
    return signals


def data_quality_score(lead: Lead) -> int:
    """Completeness weighted 70/30 between the full checklist and critical contact fields."""
    completeness = _filled_count(lead, COMPLETENESS_FIELDS) / len(COMPLETENESS_FIELDS) * 70
    critical = _filled_count(lead, CRITICAL_FIELDS) / len(CRITICAL_FIELDS) * 30
    return round_half_up(completeness + critical)


def data_freshness(enrichment_date: str | None, *, now: datetime) -> DataFreshness:
    if not enrichment_date:
        return DataFreshness.STALE
    try:
        enriched_at = datetime.fromisoformat(enrichment_date.replace("Z", "+00:00"))
    except ValueError:
        return DataFreshness.STALE
    if enriched_at.tzinfo is None:
        enriched_at = enriched_at.replace(tzinfo=timezone.utc)
    age_days = (now - enriched_at).days
    if age_days <= FRESH_WINDOW_DAYS:
        return DataFreshness.FRESH
    if age_days <= MODERATE_WINDOW_DAYS:
        return DataFreshness.MODERATE
    return DataFreshness.STALE
