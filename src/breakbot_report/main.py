"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from breakbot_report import __version__
from breakbot_report.api.routes import health, reports
from breakbot_report.config import Settings
from breakbot_report.logging_config import setup_logging

_settings = Settings()
setup_logging(_settings.log_level)

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = _settings

    # One pooled client for every analysis service call
    http_client = httpx.AsyncClient(
        timeout=settings.request_timeout_seconds
    )

    app.state.settings = settings
    app.state.http_client = http_client
    _logger.info(
        "event=startup api_base_url=%s max_attempts=%d",
        settings.api_base_url,
        settings.producer_max_attempts,
    )

    yield

    await http_client.aclose()


app = FastAPI(
    title="BreakBot Report",
    description=(
        "Will this pull request break my clients? --"
        " cross-referenced breaking change impact reports"
    ),
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origin_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=False,
)

app.include_router(health.router)
app.include_router(reports.router)
