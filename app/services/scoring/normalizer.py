"""Single entry point for coercing loosely-typed lead fields."""

from __future__ import annotations

import math
import re
from typing import Any

NON_NUMERIC_PATTERN = re.compile(r"[^0-9.\-]")
LEADING_FLOAT_PATTERN = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)")
NO_FUNDING_TOKEN = "no"


def parse_number(value: Any) -> float:
    """Coerce ``value`` into a float without ever raising.

    Strings lose every character that is not a digit, ``.`` or ``-`` and the
    longest numeric prefix of what remains is parsed, so ``"$1,200,000"``,
    ``"1200000"`` and ``1200000`` all normalize to the same value. Anything
    unparsable (including ``None``, booleans and non-finite numbers) yields 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    if isinstance(value, str):
        cleaned = NON_NUMERIC_PATTERN.sub("", value)
        match = LEADING_FLOAT_PATTERN.match(cleaned)
        if not match:
            return 0.0
        number = float(match.group(0))
        return number if number != 0 else 0.0
    return 0.0


def is_filled(value: Any) -> bool:
    """True when a checklist field carries data (``None``, ``""`` and zero do not)."""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0
    return bool(value)


def has_funding(value: str | None) -> bool:
    """Any value other than an exact, case-insensitive ``"no"`` counts as funded."""
    if not value:
        return False
    return value.lower() != NO_FUNDING_TOKEN


def normalize_company_name(value: str | None) -> str:
    return (value or "").strip().lower()


def round_half_up(value: float) -> int:
    """Round halves upwards (``2.5 -> 3``, ``-2.5 -> -2``) instead of to even."""
    return int(math.floor(value + 0.5))


def format_count(value: float) -> str:
    """Render a parsed count without a trailing ``.0`` for whole numbers."""
    if value.is_integer():
        return str(int(value))
    return str(value)
