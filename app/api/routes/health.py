from __future__ import annotations

import logging

from fastapi import APIRouter

from app.config import settings
from app.services.scoring.engine import SCORE_WEIGHTS

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness check that also reports the active scoring weights."""
    return {
        "status": "ready",
        "version": settings.app_version,
        "environment": settings.environment,
        "score_weights": dict(SCORE_WEIGHTS),
    }
