"""Offline stand-ins for tech-stack detection and contact validation.

These helpers are deterministic placeholders for third-party lookups
(technology fingerprinting, mailbox and DNS checks). They only inspect the
strings already on the lead.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from app.models.lead import DomainStatus, EmailValidation, Lead

logger = logging.getLogger("app.services.enrichment.advanced")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TECH_STACK_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (".ai", ("AI/ML", "Python", "TensorFlow", "AWS", "Docker")),
    (".io", ("Node.js", "React", "MongoDB", "Kubernetes")),
    (".com", ("JavaScript", "AWS", "PostgreSQL")),
    (".co", ("Ruby on Rails", "Redis", "Heroku")),
)
DEFAULT_TECH_STACK = ("JavaScript", "Cloud Hosting")


def detect_tech_stack(domain: str | None) -> list[str]:
    if not domain:
        return []
    for pattern, stack in TECH_STACK_PATTERNS:
        if pattern in domain:
            return list(stack)
    return list(DEFAULT_TECH_STACK)


def validate_email(email: str | None) -> EmailValidation:
    if not email:
        return EmailValidation.UNKNOWN
    return EmailValidation.VALID if EMAIL_PATTERN.match(email) else EmailValidation.INVALID


def check_domain_status(domain: str | None) -> DomainStatus:
    # TODO: resolve the domain over DNS once an egress-approved resolver is configured.
    if not domain:
        return DomainStatus.UNKNOWN
    return DomainStatus.ACTIVE


def enrich_lead_advanced(lead: Lead) -> Lead:
    return lead.model_copy(
        update={
            "tech_stack": detect_tech_stack(lead.domain),
            "email_validation": validate_email(lead.email),
            "domain_status": check_domain_status(lead.domain),
        }
    )


def batch_enrich_leads(leads: Iterable[Lead]) -> list[Lead]:
    enriched = [enrich_lead_advanced(lead) for lead in leads]
    logger.debug("Advanced enrichment applied to %s leads.", len(enriched))
    return enriched
