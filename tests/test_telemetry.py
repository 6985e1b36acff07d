import json
from pathlib import Path

from app.config import settings
from tools import telemetry


def test_telemetry_writes_json_file(tmp_path: Path, monkeypatch):
    log_path = tmp_path / "telemetry.log"
    monkeypatch.setenv("TELEMETRY_FORMAT", "json")
    monkeypatch.setenv("TELEMETRY_PATH", str(log_path))
    telemetry.reset_telemetry_for_testing()
    sink = telemetry.get_telemetry()

    sink.emit(module="score_leads", event="summary", ranked_total=3)

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    payload = json.loads(lines[-1])
    assert payload["module"] == "score_leads"
    assert payload["event"] == "summary"
    assert payload["ranked_total"] == 3
    assert payload["timestamp"].endswith("Z")
    telemetry.reset_telemetry_for_testing()


def test_telemetry_defaults_to_text(monkeypatch):
    monkeypatch.delenv("TELEMETRY_FORMAT", raising=False)
    monkeypatch.delenv("TELEMETRY_PATH", raising=False)
    monkeypatch.setattr(settings, "telemetry_format", "text")
    monkeypatch.setattr(settings, "telemetry_path", None)
    telemetry.reset_telemetry_for_testing()
    sink = telemetry.get_telemetry()

    payload = sink.emit(module="score_leads", event="noop")

    assert sink.config.format == "text"
    assert sink.config.path is None
    assert payload["event"] == "noop"
    telemetry.reset_telemetry_for_testing()


def test_settings_used_when_env_missing(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("TELEMETRY_FORMAT", raising=False)
    monkeypatch.delenv("TELEMETRY_PATH", raising=False)
    monkeypatch.setattr(settings, "telemetry_format", "JSON")
    monkeypatch.setattr(settings, "telemetry_path", str(tmp_path / "runs.jsonl"))

    config = telemetry.load_config()

    assert config.format == "json"
    assert config.path == tmp_path / "runs.jsonl"


def test_unknown_format_falls_back_to_text(monkeypatch):
    monkeypatch.setenv("TELEMETRY_FORMAT", "yaml")

    assert telemetry.load_config().format == "text"
