"""Domain models for uploaded and scored leads."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

NumericLike = str | int | float | None
ENGINE_FIELDS = frozenset(
    {
        "lead_score",
        "confidence_level",
        "ai_potential",
        "lead_category",
        "explanation",
        "breakdown",
        "data_freshness",
        "growth_velocity",
        "company_signals",
        "data_quality_score",
        "email_validation",
        "domain_status",
        "tech_stack",
        "last_verified",
    }
)


class ConfidenceLevel(str, Enum):
    """How complete the input data for a lead was."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AIPotential(str, Enum):
    """Estimated readiness for AI-related offerings."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class LeadCategory(str, Enum):
    """Size/stage bucket derived from raw firmographics."""

    STARTUP = "Startup"
    GROWTH = "Growth"
    ENTERPRISE = "Enterprise"


class DataFreshness(str, Enum):
    FRESH = "Fresh"
    MODERATE = "Moderate"
    STALE = "Stale"


class GrowthVelocity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class EmailValidation(str, Enum):
    VALID = "Valid"
    INVALID = "Invalid"
    UNKNOWN = "Unknown"


class DomainStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    UNKNOWN = "Unknown"


class ScoreBreakdown(BaseModel):
    """Per-dimension sub-scores that feed the weighted lead score."""

    funding: float = Field(..., ge=0, le=100)
    hiring: float = Field(..., ge=0, le=100)
    revenue: float = Field(..., ge=0, le=100)
    size: float = Field(..., ge=0, le=100)
    confidence: float = Field(..., ge=0, le=100)

    model_config = ConfigDict(frozen=True, extra="forbid")


class Lead(BaseModel):
    """A single company/contact record.

    Raw uploads only populate the identity, firmographic and signal fields.
    Everything from ``lead_score`` down is produced by the scoring engine,
    which always returns a new ``Lead`` rather than updating the one it was given.
    Unknown upload columns are preserved as extra attributes.
    """

    id: str = ""
    company_name: str = ""
    domain: str | None = None
    employees: NumericLike = None
    revenue_est: NumericLike = None
    email: str | None = None
    linkedin: str | None = None
    jobs_30d: NumericLike = None
    recent_funding: str | None = None

    lead_score: int | None = Field(default=None, ge=0, le=100)
    confidence_level: ConfidenceLevel | None = None
    ai_potential: AIPotential | None = None
    lead_category: LeadCategory | None = None
    explanation: str | None = None
    breakdown: ScoreBreakdown | None = None

    enrichment_date: str | None = None
    data_freshness: DataFreshness | None = None
    growth_velocity: GrowthVelocity | None = None
    company_signals: list[str] | None = None
    data_quality_score: int | None = Field(default=None, ge=0, le=100)
    email_validation: EmailValidation | None = None
    domain_status: DomainStatus | None = None
    tech_stack: list[str] | None = None
    last_verified: str | None = None

    model_config = ConfigDict(extra="allow")

    @field_validator("id", "company_name", mode="before")
    @classmethod
    def _coerce_identity(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("domain", "email", "linkedin", "recent_funding", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        if value is None or isinstance(value, str):
            return value
        return str(value)
