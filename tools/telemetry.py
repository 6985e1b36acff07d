"""Structured run telemetry for the lead scoring pipeline."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from app.config import settings

logger = logging.getLogger("telemetry")

FORMAT_ENV = "TELEMETRY_FORMAT"
PATH_ENV = "TELEMETRY_PATH"
SUPPORTED_FORMATS = {"json", "text"}


@dataclass(frozen=True)
class TelemetryConfig:
    format: str = "text"
    path: Path | None = None


class Telemetry:
    """Emit run events to the ``telemetry`` logger and an optional JSONL file."""

    def __init__(self, config: TelemetryConfig) -> None:
        self._config = config
        if self._config.path:
            self._config.path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def config(self) -> TelemetryConfig:
        return self._config

    def emit(self, module: str, event: str, **fields: Any) -> dict[str, Any]:
        payload = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "module": module,
            "event": event,
            **fields,
        }
        line = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
        if self._config.format == "json":
            logger.info(line)
        else:
            logger.info("%s %s.%s %s", payload["timestamp"], module, event, fields)
        self._append(line)
        return payload

    def _append(self, line: str) -> None:
        if not self._config.path:
            return
        try:
            with self._config.path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except OSError as exc:  # pragma: no cover
            logger.warning("TELEMETRY_WRITE_ERROR path=%s error=%s", self._config.path, exc)


_TELEMETRY: Telemetry | None = None


def load_config() -> TelemetryConfig:
    """Environment variables win over the application settings."""
    fmt = (os.getenv(FORMAT_ENV) or settings.telemetry_format or "text").strip().lower()
    path_value = os.getenv(PATH_ENV) or settings.telemetry_path
    path = Path(path_value).expanduser() if path_value else None
    return TelemetryConfig(format=fmt if fmt in SUPPORTED_FORMATS else "text", path=path)


def get_telemetry() -> Telemetry:
    global _TELEMETRY  # noqa: PLW0603
    if _TELEMETRY is None:
        _TELEMETRY = Telemetry(load_config())
    return _TELEMETRY


def reset_telemetry_for_testing() -> None:
    global _TELEMETRY  # noqa: PLW0603
    _TELEMETRY = None
