"""BreakBot analysis service client with transient-error retry."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from breakbot_report.config import Settings
from breakbot_report.constants import ERROR_TRUNCATION_CHARS, PR_SYNC_PATH
from breakbot_report.exceptions import ProducerFailure
from breakbot_report.models.report import AnalysisReport, parse_analysis_report
from breakbot_report.resilience.errors import classify_error, is_retryable

logger = logging.getLogger(__name__)


def build_report_url(
    base_url: str, owner: str, repo: str, pr_number: int
) -> str:
    """Endpoint that analyzes a pull request and returns its report."""
    return base_url.rstrip("/") + PR_SYNC_PATH.format(
        owner=owner, repo=repo, pr_number=pr_number
    )


def _validate_request(owner: str, repo: str, pr_number: int) -> None:
    if not owner.strip():
        raise ValueError("owner must not be empty")
    if not repo.strip():
        raise ValueError("repo must not be empty")
    if pr_number < 1:
        raise ValueError(f"pull request number must be positive, got {pr_number}")


def _failure_message(response: httpx.Response) -> str:
    """Prefer the service's own ``message``; fall back to the status."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    reason = response.reason_phrase or "error"
    return f"Analysis service returned HTTP {response.status_code} ({reason})"


async def _post_once(
    client: httpx.AsyncClient, url: str, timeout: float
) -> dict[str, Any]:
    response = await client.post(url, timeout=timeout)
    if response.status_code != 200:
        raise ProducerFailure(
            _failure_message(response), status_code=response.status_code
        )
    try:
        payload = response.json()
    except ValueError as e:
        raise ProducerFailure(
            "Analysis service returned a non-JSON response",
            status_code=response.status_code,
        ) from e
    if not isinstance(payload, dict):
        raise ProducerFailure(
            "Analysis service returned an unexpected payload",
            status_code=response.status_code,
        )
    return payload


def _log_retry(state: RetryCallState) -> None:
    error = state.outcome.exception() if state.outcome else None
    logger.warning(
        "event=report_fetch_retry attempt=%d error_class=%s error=%s",
        state.attempt_number,
        classify_error(error).value if error else "unknown",
        str(error)[:ERROR_TRUNCATION_CHARS],
    )


async def _fetch(
    client: httpx.AsyncClient, url: str, settings: Settings
) -> dict[str, Any]:
    retrying = AsyncRetrying(
        stop=stop_after_attempt(settings.producer_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_initial_wait_seconds,
            max=settings.retry_max_wait_seconds,
        ),
        retry=retry_if_exception(is_retryable),
        before_sleep=_log_retry,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await _post_once(
                client, url, settings.request_timeout_seconds
            )
    raise ProducerFailure("Analysis service was not called")  # pragma: no cover


async def fetch_report(
    owner: str,
    repo: str,
    pr_number: int,
    *,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> AnalysisReport:
    """Ask the analysis service for the impact report of a pull request.

    Transient failures (timeouts, connection errors, 429 and 5xx) are
    retried with jittered exponential backoff, up to
    ``settings.producer_max_attempts`` attempts.

    Args:
        owner: GitHub owner of the library repository.
        repo: Repository name.
        pr_number: Pull request number.
        settings: Service URL, timeout and retry budget.
        client: Shared client; a short-lived one is created if omitted.

    Returns:
        The parsed AnalysisReport snapshot.

    Raises:
        ValueError: If the request coordinates are invalid.
        ProducerFailure: If the service could not produce a report.
        MalformedReport: If the service answered with a payload that
            violates the report contract.
    """
    _validate_request(owner, repo, pr_number)
    cfg = settings or Settings()
    url = build_report_url(cfg.api_base_url, owner, repo, pr_number)

    logger.info(
        "event=report_fetch_start owner=%s repo=%s pr=%d",
        owner,
        repo,
        pr_number,
    )
    try:
        if client is not None:
            payload = await _fetch(client, url, cfg)
        else:
            async with httpx.AsyncClient() as owned:
                payload = await _fetch(owned, url, cfg)
    except ProducerFailure as e:
        logger.warning(
            "event=report_fetch_failed pr=%d status=%s error=%s",
            pr_number,
            e.status_code,
            str(e)[:ERROR_TRUNCATION_CHARS],
        )
        raise
    except httpx.HTTPError as e:
        logger.warning(
            "event=report_fetch_failed pr=%d error_class=%s error=%s",
            pr_number,
            classify_error(e).value,
            str(e)[:ERROR_TRUNCATION_CHARS],
        )
        raise ProducerFailure(str(e) or type(e).__name__) from e

    report = parse_analysis_report(payload)
    logger.info(
        "event=report_fetched pr=%d modules=%d",
        pr_number,
        len(report.module_reports),
    )
    return report
