"""Contact guesses served by the enrich-contacts endpoint."""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, Field

logger = logging.getLogger("app.services.enrichment.contacts")

LINKEDIN_COMPANY_BASE = "https://www.linkedin.com/company/"
LINKEDIN_SLUG_PATTERN = re.compile(r"[^a-z0-9]")
DOMAIN_PREFIX_PATTERN = re.compile(r"^(https?://)?(www\.)?")
EMAIL_PREFIXES = ("info", "contact", "hello", "sales")


class ContactLookupRequest(BaseModel):
    """Payload accepted by the enrich-contacts endpoint."""

    company_name: str = Field(..., alias="companyName")
    domain: str | None = None

    model_config = {"populate_by_name": True}


class ContactMatch(BaseModel):
    email: str | None = None
    linkedin: str | None = None


def linkedin_company_url(company_name: str) -> str:
    slug = LINKEDIN_SLUG_PATTERN.sub("-", company_name.lower())
    return f"{LINKEDIN_COMPANY_BASE}{slug}"


def clean_domain(domain: str) -> str:
    """Strip scheme, ``www.`` and any path from a domain-ish string."""
    return DOMAIN_PREFIX_PATTERN.sub("", domain.strip(), count=1).split("/")[0]


def email_patterns(domain: str) -> list[str]:
    host = clean_domain(domain)
    return [f"{prefix}@{host}" for prefix in EMAIL_PREFIXES]


def guess_contacts(request: ContactLookupRequest) -> ContactMatch:
    """Derive a LinkedIn company page and a role mailbox for a company."""
    logger.info("Enriching contact info for: %s", request.company_name)
    match = ContactMatch(linkedin=linkedin_company_url(request.company_name))
    if request.domain:
        patterns = email_patterns(request.domain)
        match.email = patterns[0]
        logger.debug("Generated email patterns for %s: %s", clean_domain(request.domain), patterns)
    return match
