"""Tests for the health check endpoint."""

import pytest
from httpx import ASGITransport, AsyncClient

from hermes.main import create_app


@pytest.mark.asyncio
async def test_health_check_returns_200(settings):
    """Health endpoint should return 200 with status, version, and environment."""
    transport = ASGITransport(app=create_app(settings))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == settings.app_version
    assert data["environment"] == "test"
