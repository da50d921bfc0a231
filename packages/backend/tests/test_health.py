"""Health endpoint tests."""

import pytest

from askgate.chat.proxy import ConversationProxy


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert data["gemini"] == "ok"
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_degraded_without_gemini(client, app):
    app.state.proxy = ConversationProxy(None)
    data = (await client.get("/api/health")).json()
    assert data["gemini"] == "not configured"
    assert data["status"] == "degraded"
