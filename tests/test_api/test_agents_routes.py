"""Tests for the agent catalog and health routes."""

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from supportdesk import __version__
from supportdesk.main import app
from tests.conftest import setup_test_app


@pytest.fixture
async def client(tmp_path: Path):
    setup_test_app(tmp_path)

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()


class TestHealthRoutes:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert "timestamp" in data


class TestAgentRoutes:
    async def test_list_agents(self, client: AsyncClient) -> None:
        resp = await client.get("/api/agents")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert [a["type"] for a in body["data"]] == [
            "ROUTER",
            "ORDER",
            "BILLING",
            "SUPPORT",
        ]

    async def test_capabilities(self, client: AsyncClient) -> None:
        resp = await client.get("/api/agents/order/capabilities")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["name"] == "Order Agent"
        assert "track_order" in data["tools"]

    async def test_router_capabilities(self, client: AsyncClient) -> None:
        resp = await client.get("/api/agents/ROUTER/capabilities")
        assert resp.json()["data"]["tools"] == ["intent_classification"]

    async def test_invalid_agent_type(self, client: AsyncClient) -> None:
        resp = await client.get("/api/agents/sales/capabilities")
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Invalid agent type: sales"
