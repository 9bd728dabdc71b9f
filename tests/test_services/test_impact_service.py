"""Tests for the fetch-then-correlate service."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from breakbot_report.config import Settings
from breakbot_report.constants import ClientStatus
from breakbot_report.exceptions import MalformedReport, ProducerFailure
from breakbot_report.services.impact_service import (
    analyze_pull_request,
    load_report_file,
)


class TestAnalyzePullRequest:
    async def test_returns_correlated_views(
        self, sample_payload: dict[str, Any], fast_settings: Settings
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=sample_payload)

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler)
        ) as client:
            views = await analyze_pull_request(
                "acme", "lib", 7, settings=fast_settings, client=client
            )

        assert len(views.report.module_reports) == 3
        assert [s.module_id for s in views.module_summaries] == [
            "com.acme:core",
            "com.acme:extras",
        ]
        one = views.client_summary["https://github.com/acme/client-one"]
        two = views.client_summary["https://github.com/acme/client-two"]
        assert (one.status, one.broken_use_count) == (ClientStatus.BROKEN, 3)
        assert (two.status, two.broken_use_count) == (ClientStatus.CLEAN, 0)

    async def test_producer_failure_propagates(
        self, fast_settings: Settings
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"message": "Maracas crashed"})

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler)
        ) as client:
            with pytest.raises(ProducerFailure, match="Maracas crashed"):
                await analyze_pull_request(
                    "acme", "lib", 7, settings=fast_settings, client=client
                )


class TestLoadReportFile:
    def test_loads_saved_payload(
        self, tmp_path: Path, sample_payload: dict[str, Any]
    ) -> None:
        path = tmp_path / "pr.json"
        path.write_text(json.dumps(sample_payload))
        report = load_report_file(path)
        assert report.pull_request.base_branch == "main"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_report_file(tmp_path / "nope.json")

    def test_not_a_report(self, tmp_path: Path) -> None:
        path = tmp_path / "pr.json"
        path.write_text('{"hello": "world"}')
        with pytest.raises(MalformedReport):
            load_report_file(path)
