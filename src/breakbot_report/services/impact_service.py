"""Impact analysis service: fetch a report, then correlate it."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import httpx

from breakbot_report.config import Settings
from breakbot_report.engine.correlation import correlate
from breakbot_report.engine.views import ImpactViews
from breakbot_report.models.report import AnalysisReport, parse_analysis_report
from breakbot_report.producer.client import fetch_report

logger = logging.getLogger(__name__)


async def analyze_pull_request(
    owner: str,
    repo: str,
    pr_number: int,
    *,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> ImpactViews:
    """Fetch the analysis for a pull request and derive its impact views.

    ProducerFailure and MalformedReport propagate unchanged so that
    callers can show them as a single error message.
    """
    start = time.monotonic()
    report = await fetch_report(
        owner, repo, pr_number, settings=settings, client=client
    )
    views = correlate(report)
    logger.info(
        "event=pull_request_analyzed owner=%s repo=%s pr=%d "
        "breaking_changes=%d broken_clients=%d duration_ms=%.0f",
        owner,
        repo,
        pr_number,
        views.overview.breaking_change_count,
        views.overview.impacted_client_count,
        (time.monotonic() - start) * 1000,
    )
    return views


def load_report_file(path: Path) -> AnalysisReport:
    """Read a saved ``pr-sync`` JSON payload from disk.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        MalformedReport: If the file does not hold a valid report.
    """
    if not path.is_file():
        msg = f"Report file does not exist: {path}"
        raise FileNotFoundError(msg)
    return parse_analysis_report(path.read_bytes())
