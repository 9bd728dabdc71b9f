"""Shared constants: single source of truth for cross-module values.

StrEnum members are str-compatible, so downstream code (JSON
payloads, query parameters, CLI choices) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class OutcomeKind(StrEnum):
    """Discriminator for a module's analysis outcome."""

    DELTA = "delta"
    ERROR = "error"


class ClientStatus(StrEnum):
    """Whether an analyzed client has at least one broken use."""

    BROKEN = "broken"
    CLEAN = "clean"


class ChangeStatus(StrEnum):
    """Whether a breaking change breaks any analyzed client."""

    BREAKS_CLIENTS = "breaks-clients"
    NO_BROKEN_CLIENT = "no-broken-client"


class ExportFormat(StrEnum):
    """Supported report export formats."""

    MARKDOWN = "markdown"
    HTML = "html"
    JSON = "json"


# ── Producer ─────────────────────────────────────────────

DEFAULT_API_BASE_URL = "https://api.breakbot.net"
PR_SYNC_PATH = "/github/pr-sync/{owner}/{repo}/{pr_number}"

# ── Presentation ─────────────────────────────────────────

GITHUB_URL_PREFIX = "https://github.com/"
SHORT_SHA_LENGTH = 6
ERROR_TRUNCATION_CHARS = 200

EXPORT_EXTENSIONS: dict[str, str] = {
    ExportFormat.MARKDOWN: "md",
    ExportFormat.HTML: "html",
    ExportFormat.JSON: "json",
}
