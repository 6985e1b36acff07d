"""HTTP function that guesses contact details for a company."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.services.enrichment.contacts import ContactLookupRequest, guess_contacts

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/enrich-contacts")
async def enrich_contacts(request: Request) -> JSONResponse:
    """Return ``{"success": true, "data": {...}}`` or a 500 with the error message."""
    try:
        body = await request.json()
        lookup = ContactLookupRequest.model_validate(body)
    except (ValueError, ValidationError) as exc:
        logger.error("Enrichment error: %s", exc)
        return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})

    match = guess_contacts(lookup)
    logger.info("Enrichment complete for %s", lookup.company_name)
    return JSONResponse(content={"success": True, "data": match.model_dump(exclude_none=True)})
