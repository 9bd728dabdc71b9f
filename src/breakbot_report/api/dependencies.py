"""FastAPI dependency injection for shared application state."""

from __future__ import annotations

import httpx
from fastapi import Request

from breakbot_report.config import Settings


def get_settings(request: Request) -> Settings:
    """Get Settings from app.state."""
    return request.app.state.settings  # type: ignore[no-any-return]


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared httpx client for analysis service calls."""
    return request.app.state.http_client  # type: ignore[no-any-return]
