"""Tests for the health endpoint."""

import pytest


@pytest.mark.asyncio
async def test_health_ok(api_client):
    response = await api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": "1.0.0", "database": True}


@pytest.mark.asyncio
async def test_health_degraded_when_ping_fails(api_client, monkeypatch):
    from armory.infrastructure.storage.sqlite import get_pool

    pool = await get_pool()

    async def failing_ping():
        return False

    monkeypatch.setattr(pool, "ping", failing_ping)

    response = await api_client.get("/health")

    assert response.json()["status"] == "degraded"
    assert response.json()["database"] is False
