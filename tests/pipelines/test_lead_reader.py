import json
from pathlib import Path

import pytest

from pipelines.io.lead_reader import LeadParseError, load_leads, parse_csv, parse_json, parse_leads


def test_parse_csv_assigns_ids_and_pads_short_rows():
    text = "company_name,domain,employees\nAcme,acme.com,50\nBeta,,\nGamma\n"

    leads = parse_csv(text)

    assert [lead.id for lead in leads] == ["lead-0", "lead-1", "lead-2"]
    assert leads[0].domain == "acme.com"
    assert leads[0].employees == "50"
    assert leads[1].domain == ""
    assert leads[2].company_name == "Gamma"
    assert leads[2].employees == ""


def test_parse_csv_trims_cells_and_windows_line_endings():
    leads = parse_csv("company_name , jobs_30d\r\n Acme , 4 \r\n")

    assert leads[0].company_name == "Acme"
    assert leads[0].jobs_30d == "4"


def test_parse_csv_splits_on_every_comma():
    leads = parse_csv('company_name,domain\n"Acme, Inc",acme.com\n')

    assert leads[0].company_name == '"Acme'
    assert leads[0].domain == 'Inc"'


def test_parse_csv_header_only_and_empty():
    assert parse_csv("company_name,domain\n") == []
    assert parse_csv("") == []


def test_parse_csv_keeps_unknown_columns():
    leads = parse_csv("company_name,industry\nAcme,Fintech\n")

    assert leads[0].model_extra == {"industry": "Fintech"}


def test_parse_json_assigns_missing_ids_and_strips_engine_fields():
    payload = [
        {"id": "custom", "company_name": "Acme", "lead_score": 99, "explanation": "stale"},
        {"company_name": "Beta", "employees": 20},
    ]

    leads = parse_json(json.dumps(payload))

    assert [lead.id for lead in leads] == ["custom", "lead-1"]
    assert leads[0].lead_score is None
    assert leads[0].explanation is None
    assert leads[1].employees == 20


def test_parse_json_non_array_yields_no_leads():
    assert parse_json('{"company_name": "Acme"}') == []


def test_parse_json_rejects_invalid_documents():
    with pytest.raises(LeadParseError) as excinfo:
        parse_json("{not json")
    assert excinfo.value.code == "E_PARSE"

    with pytest.raises(LeadParseError):
        parse_json('["Acme"]')


def test_parse_leads_rejects_unsupported_extension():
    with pytest.raises(LeadParseError) as excinfo:
        parse_leads("company_name\nAcme\n", "leads.xlsx")

    assert excinfo.value.code == "E_UNSUPPORTED_FILE"


def test_parse_leads_dispatches_on_extension():
    assert parse_leads("company_name\nAcme\n", "LEADS.CSV")[0].company_name == "Acme"
    assert parse_leads('[{"company_name": "Acme"}]', "leads.json")[0].company_name == "Acme"


def test_load_leads_reads_file(tmp_path: Path):
    path = tmp_path / "leads.csv"
    path.write_text("company_name,recent_funding\nAcme,Series A\n", encoding="utf-8")

    leads = load_leads(path)

    assert leads[0].recent_funding == "Series A"


def test_load_leads_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_leads(tmp_path / "missing.csv")
