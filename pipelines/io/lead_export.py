"""CSV export of prioritised leads."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Callable, Sequence
from datetime import date
from pathlib import Path
from typing import Any

from app.models.lead import Lead

logger = logging.getLogger("pipelines.io.lead_export")

EXPORT_FILENAME_TEMPLATE = "refined_prioritized_leads_{day}.csv"


def _breakdown_value(name: str) -> Callable[[Lead], Any]:
    def _read(lead: Lead) -> Any:
        return getattr(lead.breakdown, name) if lead.breakdown else None

    return _read


def _enum_value(name: str) -> Callable[[Lead], Any]:
    def _read(lead: Lead) -> Any:
        value = getattr(lead, name)
        return value.value if value is not None else None

    return _read


EXPORT_COLUMNS: tuple[tuple[str, Callable[[Lead], Any]], ...] = (
    ("Company", lambda lead: lead.company_name),
    ("Domain", lambda lead: lead.domain),
    ("Employees", lambda lead: lead.employees),
    ("Revenue Est", lambda lead: lead.revenue_est),
    ("Jobs (30d)", lambda lead: lead.jobs_30d),
    ("Recent Funding", lambda lead: lead.recent_funding),
    ("Score (Adjusted)", lambda lead: lead.lead_score),
    ("Confidence", _enum_value("confidence_level")),
    ("AI Potential", _enum_value("ai_potential")),
    ("Lead Category", _enum_value("lead_category")),
    ("Email", lambda lead: lead.email),
    ("LinkedIn", lambda lead: lead.linkedin),
    ("Explanation", lambda lead: lead.explanation),
    ("Funding Score", _breakdown_value("funding")),
    ("Hiring Score", _breakdown_value("hiring")),
    ("Revenue Score", _breakdown_value("revenue")),
    ("Size Score", _breakdown_value("size")),
    ("Confidence Score", _breakdown_value("confidence")),
)


def _cell(value: Any) -> str:
    if not value:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def export_rows(leads: Sequence[Lead]) -> list[list[str]]:
    return [[_cell(reader(lead)) for _, reader in EXPORT_COLUMNS] for lead in leads]


def render_csv(leads: Sequence[Lead]) -> str:
    """Serialize leads with a fixed column order; every cell is quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([header for header, _ in EXPORT_COLUMNS])
    writer.writerows(export_rows(leads))
    return buffer.getvalue()


def default_export_name(day: date | None = None) -> str:
    return EXPORT_FILENAME_TEMPLATE.format(day=(day or date.today()).isoformat())


def write_csv(leads: Sequence[Lead], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_csv(leads), encoding="utf-8")
    logger.info("Exported %s leads to %s.", len(leads), path)
    return path
