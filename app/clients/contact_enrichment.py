"""Async client for the remote enrich-contacts endpoint."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any, Awaitable, Protocol

import httpx

from app.config import settings
from app.models.lead import Lead
from app.services.enrichment.contacts import ContactMatch
from scripts.backoff import exponential_backoff

logger = logging.getLogger("app.clients.contact_enrichment")

ENRICH_PATH = "/enrich-contacts"
SleepFn = Callable[[float], Awaitable[None]]


class ContactEnrichmentError(RuntimeError):
    """Base error for contact enrichment failures."""

    def __init__(self, message: str, code: str = "ENRICH_ERROR") -> None:
        super().__init__(message)
        self.code = code


class ContactEnrichmentRateLimitError(ContactEnrichmentError):
    """Raised when the enrichment endpoint responds with HTTP 429."""

    def __init__(self, message: str = "Rate limited by contact enrichment") -> None:
        super().__init__(message, code="ENRICH_429")


class ContactEnrichmentTimeoutError(ContactEnrichmentError):
    """Raised when the enrichment request times out."""

    def __init__(self, message: str = "Contact enrichment request timed out") -> None:
        super().__init__(message, code="ENRICH_TIMEOUT")


class ContactEnrichmentSchemaError(ContactEnrichmentError):
    """Raised when the enrichment response does not match expectations."""

    def __init__(self, message: str = "Unexpected contact enrichment response schema") -> None:
        super().__init__(message, code="ENRICH_SCHEMA_ERR")


class ContactLookup(Protocol):
    """Subset of client behavior used by ``enrich_lead_contacts``."""

    async def lookup(self, *, company_name: str, domain: str | None = None) -> ContactMatch:
        ...


class ContactEnrichmentClient:
    """Minimal wrapper around the enrich-contacts HTTP function."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        retry_limit: int = 3,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("enrichment_base_url is required to create a ContactEnrichmentClient.")
        if retry_limit < 1:
            raise ValueError("retry_limit must be >= 1")
        self._retry_limit = retry_limit
        self._sleep = sleep or asyncio.sleep
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)

    @classmethod
    def from_settings(cls) -> "ContactEnrichmentClient":
        return cls(
            settings.enrichment_base_url,
            timeout=settings.enrichment_timeout_seconds,
            retry_limit=settings.enrichment_retry_limit,
        )

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "ContactEnrichmentClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def lookup(self, *, company_name: str, domain: str | None = None) -> ContactMatch:
        """Fetch contact guesses, retrying rate limits and timeouts."""
        for attempt, delay in exponential_backoff(max_attempts=self._retry_limit, base_delay=0.5, max_delay=5.0):
            try:
                return await self._request(company_name=company_name, domain=domain)
            except (ContactEnrichmentRateLimitError, ContactEnrichmentTimeoutError) as exc:
                if attempt >= self._retry_limit:
                    raise
                logger.warning(
                    "Contact enrichment transient error (%s) for %s. Attempt %s/%s; retrying in %.1fs.",
                    exc.code,
                    company_name,
                    attempt,
                    self._retry_limit,
                    delay,
                )
                await self._sleep(delay)
        raise ContactEnrichmentError("Unable to complete contact enrichment after retries.")

    async def _request(self, *, company_name: str, domain: str | None) -> ContactMatch:
        payload = {"companyName": company_name, "domain": domain}
        try:
            response = await self._http.post(ENRICH_PATH, json=payload)
        except httpx.TimeoutException as exc:
            raise ContactEnrichmentTimeoutError() from exc
        except httpx.HTTPError as exc:
            raise ContactEnrichmentError(f"HTTP error calling contact enrichment: {exc}") from exc

        if response.status_code == 429:
            raise ContactEnrichmentRateLimitError()
        if response.status_code in (408, 504):
            raise ContactEnrichmentTimeoutError()
        if response.status_code >= 400:
            raise ContactEnrichmentError(
                f"Contact enrichment failed: {response.status_code} - {response.text[:200]}",
                code=f"ENRICH_HTTP_{response.status_code}",
            )

        try:
            data: Any = response.json()
        except ValueError as exc:
            raise ContactEnrichmentSchemaError("Failed to decode contact enrichment JSON.") from exc
        if not isinstance(data, dict) or not data.get("success"):
            raise ContactEnrichmentSchemaError("Contact enrichment reported failure.")
        body = data.get("data")
        if not isinstance(body, dict):
            raise ContactEnrichmentSchemaError("`data` missing from contact enrichment response.")
        return ContactMatch.model_validate(body)


def _needs_contacts(lead: Lead) -> bool:
    return not (lead.email and lead.linkedin)


async def _enrich_one(lead: Lead, client: ContactLookup, semaphore: asyncio.Semaphore) -> Lead:
    async with semaphore:
        try:
            match = await client.lookup(company_name=lead.company_name, domain=lead.domain)
        except ContactEnrichmentError as exc:
            logger.error("Failed to enrich %s: %s (code=%s)", lead.company_name, exc, exc.code)
            return lead
        except Exception as exc:
            logger.exception("Error enriching %s: %s", lead.company_name, exc)
            return lead
    return lead.model_copy(
        update={
            "email": lead.email or match.email,
            "linkedin": lead.linkedin or match.linkedin,
        }
    )


async def enrich_lead_contacts(
    leads: Sequence[Lead],
    *,
    client: ContactLookup,
    concurrency: int = 8,
) -> list[Lead]:
    """Fill missing email/LinkedIn fields, isolating failures per lead.

    Leads that already carry both contacts are returned untouched. A failed
    lookup leaves that lead unchanged; this coroutine never raises for a
    single bad lead. Output order matches input order.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")
    semaphore = asyncio.Semaphore(concurrency)

    async def _process(lead: Lead) -> Lead:
        if not _needs_contacts(lead):
            return lead
        return await _enrich_one(lead, client, semaphore)

    enriched = await asyncio.gather(*(_process(lead) for lead in leads))
    filled = sum(1 for before, after in zip(leads, enriched) if before is not after)
    logger.info("Contact enrichment summary: total=%s enriched=%s", len(leads), filled)
    return list(enriched)
