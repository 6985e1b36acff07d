"""Approximate company-name deduplication for uploaded lead batches."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from app.models.lead import Lead
from app.services.scoring.normalizer import normalize_company_name

logger = logging.getLogger("app.services.scoring.dedupe")

DUPLICATE_THRESHOLD = 0.85


def name_similarity(first: str, second: str) -> float:
    """Character-coverage similarity between two company names.

    Both names are lowercased and trimmed. Identical names score 1.0.
    Otherwise every character of the shorter name that occurs anywhere in the
    longer one counts as a match, and the match count is divided by the length
    of the longer name. The result is in ``[0, 1]`` and symmetric in its
    arguments.

    This is a coverage heuristic, not an edit distance:

    * character order is ignored, so ``"growth labs"`` vs ``"labs growth"``
      scores 1.0 rather than being treated as different words;
    * repeated characters each count, so short names made of common letters
      can cover a lot of a slightly longer name;
    * a short name against a much longer one stays low because the longer
      length is the denominator (``"acme"`` vs ``"acme corp"`` is 4/9).
    """
    left = normalize_company_name(first)
    right = normalize_company_name(second)
    if left == right:
        return 1.0

    # Equal lengths break the tie lexically so argument order never matters.
    longer, shorter = sorted((left, right), key=lambda name: (len(name), name), reverse=True)
    if not longer:
        return 1.0

    matches = sum(1 for char in shorter if char in longer)
    return matches / len(longer)


def is_duplicate_name(candidate: str, accepted: Iterable[str]) -> str | None:
    """Return the first accepted name ``candidate`` duplicates, if any."""
    for existing in accepted:
        if name_similarity(candidate, existing) > DUPLICATE_THRESHOLD:
            return existing
    return None


def deduplicate_leads(leads: Iterable[Lead]) -> list[Lead]:
    """Keep the first-seen lead of every group of near-identical company names.

    Leads whose trimmed name is empty are dropped outright and never become a
    comparison target. Input order is preserved and the input is not modified.
    """
    unique: list[Lead] = []
    accepted: list[str] = []

    for lead in leads:
        name = normalize_company_name(lead.company_name)
        if not name:
            logger.debug("Dropping lead id=%s with empty company name.", lead.id)
            continue
        match = is_duplicate_name(name, accepted)
        if match is not None:
            logger.debug("Dropping duplicate lead id=%s name=%r (matches %r).", lead.id, name, match)
            continue
        unique.append(lead)
        accepted.append(name)

    return unique
