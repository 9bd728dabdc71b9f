"""Shared test fixtures: sample pr-sync payloads and settings."""

import os

# Never reach the real analysis service from tests.
os.environ["API_BASE_URL"] = "https://breakbot.test"

from typing import Any

import pytest

from breakbot_report.config import Settings
from breakbot_report.models.report import AnalysisReport, parse_analysis_report


def _use(src: str, path: str, start: int, end: int) -> dict[str, Any]:
    return {
        "src": src,
        "elem": f"{src}()",
        "path": path,
        "startLine": start,
        "endLine": end,
        "url": f"https://github.com/acme/client/blob/main/{path}#L{start}",
        "apiUse": "METHOD_INVOCATION",
    }


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Three modules: one delta, one analysis error, one delta.

    - core: ``Foo.bar`` breaks client-one once; client-two uses
      ``Foo.baz`` which did not change.
    - parser: failed analysis.
    - extras: ``Qux.quux`` breaks client-one twice.
    """
    return {
        "date": "2024-03-01T12:00:00Z",
        "pr": {
            "headBranch": "feature/remove-bar",
            "headSha": "a1b2c3d4e5f6",
            "baseBranch": "main",
            "baseSha": "0f9e8d7c6b5a",
        },
        "report": {
            "reports": [
                {
                    "id": "com.acme:core",
                    "delta": {
                        "breakingChanges": [
                            {
                                "declaration": "Foo.bar",
                                "change": "METHOD_REMOVED",
                                "fileUrl": "https://github.com/acme/lib/blob/a1b2c3/Foo.java",
                                "diffUrl": "https://github.com/acme/lib/pull/7/files#diff-1",
                            }
                        ]
                    },
                    "clientReports": [
                        {
                            "url": "https://github.com/acme/client-one",
                            "brokenUses": [_use("Foo.bar", "src/Main.java", 10, 12)],
                        },
                        {
                            "url": "https://github.com/acme/client-two",
                            "brokenUses": [_use("Foo.baz", "src/App.java", 3, 3)],
                        },
                    ],
                },
                {"id": "com.acme:parser", "error": "parse failure"},
                {
                    "id": "com.acme:extras",
                    "delta": {
                        "breakingChanges": [
                            {
                                "declaration": "Qux.quux",
                                "change": "FIELD_TYPE_CHANGED",
                                "fileUrl": "https://github.com/acme/lib/blob/a1b2c3/Qux.java",
                                "diffUrl": "https://github.com/acme/lib/pull/7/files#diff-2",
                            }
                        ]
                    },
                    "clientReports": [
                        {
                            "url": "https://github.com/acme/client-one",
                            "brokenUses": [
                                _use("Qux.quux", "src/Util.java", 5, 5),
                                _use("Qux.quux", "src/Util.java", 20, 21),
                            ],
                        }
                    ],
                },
            ]
        },
    }


@pytest.fixture
def sample_report(sample_payload: dict[str, Any]) -> AnalysisReport:
    return parse_analysis_report(sample_payload)


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with a short retry budget and no backoff."""
    return Settings(
        api_base_url="https://breakbot.test",
        producer_max_attempts=3,
        retry_initial_wait_seconds=0,
        retry_max_wait_seconds=0,
        request_timeout_seconds=5,
    )
