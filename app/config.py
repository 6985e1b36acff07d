from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Lead Refinery"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Security
    cors_origins: list[str] = []

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Contact enrichment collaborator
    enrichment_base_url: str = "http://localhost:8000/functions/v1"
    enrichment_timeout_seconds: float = 10.0
    enrichment_concurrency: int = 8
    enrichment_retry_limit: int = 3

    # Uploads / exports
    max_upload_bytes: int = 5_000_000
    export_dir: str = "output"

    # Telemetry
    telemetry_format: str = "text"
    telemetry_path: str | None = None

    model_config = ConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()
