"""Tests for API routes using httpx AsyncClient."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from breakbot_report.api.dependencies import get_http_client, get_settings
from breakbot_report.config import Settings
from breakbot_report.main import app


@pytest.fixture
def service_responses() -> list[httpx.Response]:
    """Queue of responses the fake analysis service will return."""
    return []


@pytest.fixture
async def client(
    fast_settings: Settings, service_responses: list[httpx.Response]
) -> AsyncIterator[AsyncClient]:
    """Test client whose analysis service is an httpx MockTransport."""

    def handler(request: httpx.Request) -> httpx.Response:
        return service_responses.pop(0)

    service = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_settings] = lambda: fast_settings
    app.dependency_overrides[get_http_client] = lambda: service

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()
    await service.aclose()


class TestHealthRoutes:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert "version" in data


class TestAnalyzeRoute:
    async def test_json_views(
        self,
        client: AsyncClient,
        service_responses: list[httpx.Response],
        sample_payload: dict[str, Any],
    ) -> None:
        service_responses.append(httpx.Response(200, json=sample_payload))
        resp = await client.post("/api/reports/acme/lib/7")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["overview"]["breaking_change_count"] == 2
        assert body["metadata"] == {"modules": 3, "clients": 2}

    async def test_html_format(
        self,
        client: AsyncClient,
        service_responses: list[httpx.Response],
        sample_payload: dict[str, Any],
    ) -> None:
        service_responses.append(httpx.Response(200, json=sample_payload))
        resp = await client.post("/api/reports/acme/lib/7?format=html")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "Impact Summary" in resp.text

    async def test_markdown_format(
        self,
        client: AsyncClient,
        service_responses: list[httpx.Response],
        sample_payload: dict[str, Any],
    ) -> None:
        service_responses.append(httpx.Response(200, json=sample_payload))
        resp = await client.post("/api/reports/acme/lib/7?format=markdown")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/markdown")
        assert "## Impact Summary" in resp.text

    async def test_producer_failure_is_single_error(
        self,
        client: AsyncClient,
        service_responses: list[httpx.Response],
    ) -> None:
        service_responses.append(
            httpx.Response(404, json={"message": "Unknown pull request"})
        )
        resp = await client.post("/api/reports/acme/lib/7")
        assert resp.status_code == 502
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Unknown pull request"
        assert body["data"] is None

    async def test_malformed_report(
        self,
        client: AsyncClient,
        service_responses: list[httpx.Response],
        sample_payload: dict[str, Any],
    ) -> None:
        sample_payload["report"]["reports"][0]["error"] = "also an error"
        service_responses.append(httpx.Response(200, json=sample_payload))
        resp = await client.post("/api/reports/acme/lib/7")
        assert resp.status_code == 422
        assert resp.json()["success"] is False

    async def test_pr_number_must_be_positive(
        self, client: AsyncClient
    ) -> None:
        resp = await client.post("/api/reports/acme/lib/0")
        assert resp.status_code == 422


class TestRenderRoute:
    async def test_render_posted_payload(
        self, client: AsyncClient, sample_payload: dict[str, Any]
    ) -> None:
        resp = await client.post("/api/reports/render", json=sample_payload)
        assert resp.status_code == 200
        summary = resp.json()["data"]["client_summary"]
        assert [c["broken_use_count"] for c in summary] == [3, 0]

    async def test_render_rejects_reversed_lines(
        self, client: AsyncClient, sample_payload: dict[str, Any]
    ) -> None:
        use = sample_payload["report"]["reports"][0]["clientReports"][0][
            "brokenUses"
        ][0]
        use["startLine"], use["endLine"] = 12, 10
        resp = await client.post("/api/reports/render", json=sample_payload)
        assert resp.status_code == 422
        assert "start line 12" in resp.json()["error"]

    async def test_render_rejects_non_object_report(
        self, client: AsyncClient, sample_payload: dict[str, Any]
    ) -> None:
        sample_payload["report"] = "oops"
        resp = await client.post("/api/reports/render", json=sample_payload)
        assert resp.status_code == 422
        body = resp.json()
        assert body["success"] is False
        assert "report must be an object" in body["error"]
