"""Score, deduplicate and export an uploaded lead file."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from app.clients.contact_enrichment import ContactEnrichmentClient, ContactLookup, enrich_lead_contacts
from app.config import settings
from app.models.lead import Lead
from app.services.enrichment.advanced import batch_enrich_leads
from app.services.scoring.engine import score_and_deduplicate_leads
from app.services.scoring.insights import LeadSummary, summarize_leads
from pipelines.io.lead_export import default_export_name, write_csv
from pipelines.io.lead_reader import LeadParseError, load_leads
from tools.telemetry import get_telemetry

logger = logging.getLogger("pipelines.score_leads")


async def _enrich_contacts(leads: list[Lead], client: ContactLookup | None) -> list[Lead]:
    if client is not None:
        return await enrich_lead_contacts(leads, client=client, concurrency=settings.enrichment_concurrency)
    async with ContactEnrichmentClient.from_settings() as owned_client:
        return await enrich_lead_contacts(leads, client=owned_client, concurrency=settings.enrichment_concurrency)


def run_pipeline(
    *,
    input_path: Path,
    output_path: Path | None = None,
    json_output_path: Path | None = None,
    enrich_contacts: bool = False,
    advanced: bool = False,
    client: ContactLookup | None = None,
) -> tuple[list[Lead], LeadSummary]:
    """Load leads, optionally fill contacts, then score and rank them."""
    start = time.perf_counter()
    leads = load_leads(input_path)

    if enrich_contacts:
        leads = asyncio.run(_enrich_contacts(leads, client))

    ranked = score_and_deduplicate_leads(leads)
    if advanced:
        ranked = batch_enrich_leads(ranked)
    summary = summarize_leads(ranked)

    if output_path:
        write_csv(ranked, output_path)
    if json_output_path:
        _persist_json(ranked, summary, json_output_path)

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    logger.info(
        "Lead scoring summary: input=%s ranked=%s high_priority=%s average=%s completeness=%s%%",
        len(leads),
        summary.total,
        summary.high_priority,
        summary.average_score,
        summary.completeness,
    )
    get_telemetry().emit(
        module="score_leads",
        event="summary",
        elapsed_ms=elapsed_ms,
        input_total=len(leads),
        ranked_total=summary.total,
        high_priority=summary.high_priority,
        enrich_contacts=enrich_contacts,
        advanced=advanced,
    )
    return ranked, summary


def _persist_json(leads: Sequence[Lead], summary: LeadSummary, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "summary": summary.model_dump(mode="json"),
        "leads": [lead.model_dump(mode="json") for lead in leads],
    }
    with path.open("w", encoding="utf-8") as outfile:
        json.dump(payload, outfile, indent=2, ensure_ascii=False)
        outfile.write("\n")
    logger.info("Persisted %s scored leads to %s.", len(leads), path)


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Score, deduplicate and rank a CSV/JSON lead file.")
    parser.add_argument("--input", type=Path, required=True, help="CSV or JSON lead file.")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="CSV export path (defaults to <export_dir>/refined_prioritized_leads_<date>.csv).",
    )
    parser.add_argument("--json-output", type=Path, default=None, help="Optional JSON dump of scored leads.")
    parser.add_argument(
        "--enrich-contacts",
        action="store_true",
        help="Fill missing email/LinkedIn via the enrich-contacts endpoint before scoring.",
    )
    parser.add_argument(
        "--advanced",
        action="store_true",
        help="Attach tech stack and email/domain checks to the ranked leads.",
    )
    args = parser.parse_args(argv)
    if args.output is None:
        args.output = Path(settings.export_dir) / default_export_name()
    return args


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        run_pipeline(
            input_path=args.input,
            output_path=args.output,
            json_output_path=args.json_output,
            enrich_contacts=args.enrich_contacts,
            advanced=args.advanced,
        )
    except FileNotFoundError as exc:
        logger.error("INPUT_READ_ERROR: %s", exc)
        return 1
    except LeadParseError as exc:
        logger.error("Lead file could not be parsed: %s (code=%s)", exc, exc.code)
        return 1
    except Exception as exc:  # pragma: no cover - safety net
        logger.exception("Unexpected error during lead scoring: %s", exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
