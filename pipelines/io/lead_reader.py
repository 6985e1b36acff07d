"""Parse uploaded CSV/JSON lead files into ``Lead`` records."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from app.models.lead import ENGINE_FIELDS, Lead

logger = logging.getLogger("pipelines.io.lead_reader")

SUPPORTED_SUFFIXES = (".csv", ".json")
ID_PREFIX = "lead-"


class LeadParseError(RuntimeError):
    """Raised when an uploaded lead file cannot be parsed."""

    def __init__(self, message: str, code: str = "E_PARSE") -> None:
        super().__init__(message)
        self.code = code


def parse_csv(text: str) -> list[Lead]:
    """Parse a header + rows CSV by plain comma splitting.

    Quoted fields are not supported: every comma separates a cell. Short rows
    are padded with empty strings and every row gets a ``lead-<n>`` id.
    """
    lines = text.strip().split("\n")
    if not lines or not lines[0].strip():
        return []
    headers = [header.strip() for header in lines[0].split(",")]

    leads: list[Lead] = []
    for index, line in enumerate(lines[1:]):
        values = [value.strip() for value in line.split(",")]
        row: dict[str, str] = {"id": f"{ID_PREFIX}{index}"}
        for position, header in enumerate(headers):
            row[header] = values[position] if position < len(values) else ""
        leads.append(build_lead(row, index))
    return leads


def parse_json(text: str) -> list[Lead]:
    """Parse a JSON array of lead objects; any other top-level shape yields no leads."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LeadParseError(f"Could not parse the file: {exc}") from exc
    if not isinstance(payload, list):
        logger.warning("JSON upload is not an array; ignoring %s payload.", type(payload).__name__)
        return []

    leads: list[Lead] = []
    for index, item in enumerate(payload):
        if not isinstance(item, Mapping):
            raise LeadParseError(f"Lead at index {index} must be a JSON object.")
        row = dict(item)
        if not row.get("id"):
            row["id"] = f"{ID_PREFIX}{index}"
        leads.append(build_lead(row, index))
    return leads


def parse_leads(text: str, filename: str) -> list[Lead]:
    """Dispatch on the file extension of ``filename``."""
    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise LeadParseError("Please upload a CSV or JSON file", code="E_UNSUPPORTED_FILE")
    leads = parse_json(text) if suffix == ".json" else parse_csv(text)
    logger.info("Loaded %s leads from %s.", len(leads), filename)
    return leads


def load_leads(path: Path) -> list[Lead]:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise LeadParseError(f"Could not decode {path} as UTF-8.") from exc
    return parse_leads(text, path.name)


def build_lead(row: Mapping[str, object], index: int) -> Lead:
    """Validate one raw record into a ``Lead``, discarding any engine-owned fields."""
    raw = {key: value for key, value in row.items() if key not in ENGINE_FIELDS}
    try:
        return Lead.model_validate(raw)
    except ValidationError as exc:
        raise LeadParseError(f"Lead at index {index} is invalid: {exc.error_count()} errors") from exc
