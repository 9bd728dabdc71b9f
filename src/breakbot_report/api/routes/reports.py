"""Pull request impact report routes."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import APIRouter, Body, Depends, Path, Query
from fastapi.responses import HTMLResponse, JSONResponse, Response

from breakbot_report.api.dependencies import get_http_client, get_settings
from breakbot_report.api.schemas import APIResponse
from breakbot_report.config import Settings
from breakbot_report.constants import ExportFormat
from breakbot_report.engine.correlation import correlate
from breakbot_report.engine.views import ImpactViews
from breakbot_report.exceptions import MalformedReport, ProducerFailure
from breakbot_report.export import export_report, views_to_dict
from breakbot_report.models.report import parse_analysis_report
from breakbot_report.services.impact_service import analyze_pull_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _envelope(
    status_code: int,
    *,
    data: Any = None,
    error: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> JSONResponse:
    body = APIResponse(
        success=error is None,
        data=data,
        error=error,
        metadata=metadata or {},
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _render(views: ImpactViews, fmt: ExportFormat) -> Response:
    if fmt == ExportFormat.HTML:
        return HTMLResponse(export_report(views, fmt))
    if fmt == ExportFormat.MARKDOWN:
        return Response(
            export_report(views, fmt),
            media_type="text/markdown; charset=utf-8",
        )
    return _envelope(
        200,
        data=views_to_dict(views),
        metadata={
            "modules": len(views.report.module_reports),
            "clients": len(views.client_summary),
        },
    )


@router.post("/render")
async def render_report(
    payload: dict[str, Any] = Body(...),
    fmt: ExportFormat = Query(ExportFormat.JSON, alias="format"),
) -> Response:
    """Correlate and render a raw analysis payload supplied by the caller."""
    try:
        views = correlate(parse_analysis_report(payload))
    except MalformedReport as e:
        logger.warning("event=malformed_report module=%s error=%s", e.module_id, e)
        return _envelope(422, error=str(e))
    return _render(views, fmt)


@router.post("/{owner}/{repo}/{pr_number}")
async def analyze(
    owner: str,
    repo: str,
    pr_number: int = Path(ge=1),
    fmt: ExportFormat = Query(ExportFormat.JSON, alias="format"),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    """Analyze a pull request and return its client impact report."""
    try:
        views = await analyze_pull_request(
            owner, repo, pr_number, settings=settings, client=client
        )
    except ProducerFailure as e:
        return _envelope(502, error=str(e))
    except MalformedReport as e:
        logger.warning("event=malformed_report module=%s error=%s", e.module_id, e)
        return _envelope(422, error=str(e))
    except ValueError as e:
        return _envelope(400, error=str(e))
    return _render(views, fmt)
