"""Health endpoint integration test."""

import pytest
from httpx import ASGITransport, AsyncClient

from repo_health.api.container import Container, set_container
from repo_health.domain.ports.config import AppConfig
from repo_health.main import app


@pytest.mark.asyncio
async def test_health_returns_ok():
    """Health endpoint reports the resolved AI plan."""
    set_container(Container(config=AppConfig(), providers={}))
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        resp = await client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["service"] == "repo-health"
    assert data["ai_mode"] == "auto"
    assert data["topology"] == "sequential"
    assert data["providers"] == []
