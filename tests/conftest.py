import asyncio
from datetime import UTC, datetime

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.lead import Lead

FIXED_NOW = datetime(2025, 11, 10, 12, 0, tzinfo=UTC)


class _SyncASGIClient:
    """Minimal synchronous wrapper around httpx.AsyncClient for ASGI apps."""

    def __init__(self, app):
        transport = httpx.ASGITransport(app=app)
        self._client = httpx.AsyncClient(transport=transport, base_url="http://testserver")

    def request(self, method: str, url: str, **kwargs):
        return asyncio.run(self._client.request(method, url, **kwargs))

    def get(self, url: str, **kwargs):
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs):
        return self.request("POST", url, **kwargs)

    def close(self) -> None:
        asyncio.run(self._client.aclose())


@pytest.fixture
def client():
    """Create test client compatible with older/newer httpx releases."""
    try:
        test_client = TestClient(app)
        yield test_client
    except TypeError:
        fallback_client = _SyncASGIClient(app)
        try:
            yield fallback_client
        finally:
            fallback_client.close()


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_lead():
    """Factory for raw leads; keyword overrides win over the defaults."""

    def _make(company_name: str = "Acme SaaS", **fields) -> Lead:
        payload = {"id": fields.pop("id", f"lead-{company_name.lower()}"), "company_name": company_name}
        payload.update(fields)
        return Lead(**payload)

    return _make


@pytest.fixture
def full_lead(make_lead) -> Lead:
    return make_lead(
        "Northwind Analytics",
        domain="northwind.ai",
        employees="1,200",
        revenue_est="$75,000,000",
        email="sales@northwind.ai",
        linkedin="https://www.linkedin.com/company/northwind-analytics",
        jobs_30d=12,
        recent_funding="Series C",
    )
