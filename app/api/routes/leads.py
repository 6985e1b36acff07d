"""API endpoints for scoring uploaded lead batches."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from fastapi.responses import Response
from pydantic import BaseModel, Field

from app.config import settings
from app.models.lead import Lead
from app.services.enrichment.advanced import batch_enrich_leads
from app.services.scoring.engine import score_and_deduplicate_leads
from app.services.scoring.insights import LeadSummary, summarize_leads
from pipelines.io.lead_export import default_export_name, render_csv
from pipelines.io.lead_reader import LeadParseError, build_lead, parse_leads

router = APIRouter()
logger = logging.getLogger(__name__)


class ScoreLeadsRequest(BaseModel):
    """Raw leads as produced by the uploader."""

    leads: list[dict[str, Any]] = Field(default_factory=list)
    advanced: bool = Field(default=False, description="Attach tech stack and contact checks.")


class ScoreLeadsResponse(BaseModel):
    leads: list[Lead]
    summary: LeadSummary


def _rank(leads: list[Lead], *, advanced: bool) -> ScoreLeadsResponse:
    ranked = score_and_deduplicate_leads(leads)
    if advanced:
        ranked = batch_enrich_leads(ranked)
    return ScoreLeadsResponse(leads=ranked, summary=summarize_leads(ranked))


def _parse_error(exc: LeadParseError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"code": exc.code, "message": str(exc)},
    )


def _build_leads(records: list[dict[str, Any]]) -> list[Lead]:
    try:
        return [build_lead(record, index) for index, record in enumerate(records)]
    except LeadParseError as exc:
        logger.warning("leads.payload_parse_error code=%s", exc.code)
        raise _parse_error(exc) from exc


@router.post("/leads/score", response_model=ScoreLeadsResponse)
async def score_leads(payload: ScoreLeadsRequest) -> ScoreLeadsResponse:
    """Deduplicate, score and rank a JSON batch of leads."""
    return _rank(_build_leads(payload.leads), advanced=payload.advanced)


@router.post("/leads/upload", response_model=ScoreLeadsResponse)
async def upload_leads(file: UploadFile = File(...), advanced: bool = False) -> ScoreLeadsResponse:
    """Parse an uploaded CSV/JSON file and return the ranked leads."""
    raw = await file.read()
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={"code": "E_UPLOAD_TOO_LARGE", "message": "Upload exceeds the configured size limit."},
        )
    try:
        leads = parse_leads(raw.decode("utf-8"), file.filename or "")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"code": "E_PARSE", "message": "Could not decode the file as UTF-8."},
        ) from exc
    except LeadParseError as exc:
        logger.warning("leads.upload_parse_error code=%s filename=%s", exc.code, file.filename)
        raise _parse_error(exc) from exc
    return _rank(leads, advanced=advanced)


@router.post("/leads/export")
async def export_leads(payload: ScoreLeadsRequest) -> Response:
    """Score a JSON batch and return it as a CSV download."""
    ranked = _rank(_build_leads(payload.leads), advanced=payload.advanced).leads
    filename = default_export_name()
    return Response(
        content=render_csv(ranked),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
