from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

from app.services.enrichment.contacts import ContactMatch
from pipelines import score_leads

CSV_TEXT = (
    "company_name,domain,employees,revenue_est,jobs_30d,recent_funding,email,linkedin\n"
    "Acme SaaS,acme.io,120,$12000000,6,Series A,,\n"
    "acme saas ,acme.io,120,,,,,\n"
    "Solo Co,,,,,no,,\n"
)


class StubLookup:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def lookup(self, *, company_name: str, domain: str | None = None) -> ContactMatch:
        self.calls.append(company_name)
        return ContactMatch(email=f"info@{domain}" if domain else None, linkedin="https://www.linkedin.com/company/stub")


@pytest.fixture
def input_path(tmp_path: Path) -> Path:
    path = tmp_path / "leads.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


def test_run_pipeline_ranks_and_exports(tmp_path: Path, input_path: Path):
    output_path = tmp_path / "out" / "ranked.csv"
    json_path = tmp_path / "out" / "ranked.json"

    ranked, summary = score_leads.run_pipeline(
        input_path=input_path,
        output_path=output_path,
        json_output_path=json_path,
    )

    assert [lead.company_name for lead in ranked] == ["Acme SaaS", "Solo Co"]
    assert summary.total == 2
    assert summary.funded == 1

    with output_path.open(encoding="utf-8") as handle:
        rows = list(csv.reader(handle))
    assert len(rows) == 3
    assert rows[1][0] == "Acme SaaS"

    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload["summary"]["total"] == 2
    assert payload["leads"][0]["lead_score"] == ranked[0].lead_score


def test_run_pipeline_enriches_contacts_before_scoring(input_path: Path):
    stub = StubLookup()

    ranked, summary = score_leads.run_pipeline(input_path=input_path, enrich_contacts=True, client=stub)

    assert ranked[0].email == "info@acme.io"
    assert ranked[0].linkedin == "https://www.linkedin.com/company/stub"
    assert summary.missing_linkedin == 0
    assert len(stub.calls) == 3


def test_run_pipeline_advanced_attaches_tech_stack(input_path: Path):
    ranked, _ = score_leads.run_pipeline(input_path=input_path, advanced=True)

    assert ranked[0].tech_stack == ["Node.js", "React", "MongoDB", "Kubernetes"]
    assert ranked[1].tech_stack == []


def test_main_writes_export(tmp_path: Path, input_path: Path):
    output_path = tmp_path / "export.csv"

    exit_code = score_leads.main(["--input", str(input_path), "--output", str(output_path)])

    assert exit_code == 0
    assert output_path.exists()


def test_main_reports_missing_input(tmp_path: Path):
    assert score_leads.main(["--input", str(tmp_path / "missing.csv"), "--output", str(tmp_path / "x.csv")]) == 1


def test_main_reports_unsupported_file(tmp_path: Path):
    path = tmp_path / "leads.txt"
    path.write_text("company_name\nAcme\n", encoding="utf-8")

    assert score_leads.main(["--input", str(path), "--output", str(tmp_path / "x.csv")]) == 1


def test_parse_args_defaults_output_to_export_dir(monkeypatch, input_path: Path):
    monkeypatch.setattr(score_leads.settings, "export_dir", "exports")

    args = score_leads.parse_args(["--input", str(input_path)])

    assert args.output.parent == Path("exports")
    assert args.output.name.startswith("refined_prioritized_leads_")
