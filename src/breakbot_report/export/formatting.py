"""Display labels shared by every export format."""

from __future__ import annotations

from breakbot_report.constants import (
    GITHUB_URL_PREFIX,
    SHORT_SHA_LENGTH,
    ChangeStatus,
    ClientStatus,
)
from breakbot_report.engine.views import ChangeImpact, ClientSummaryEntry

CHANGE_STATUS_LABELS: dict[str, str] = {
    ChangeStatus.BREAKS_CLIENTS: "Breaks clients",
    ChangeStatus.NO_BROKEN_CLIENT: "No broken client",
}


def repository_label(url: str) -> str:
    """``https://github.com/owner/name`` → ``owner/name``."""
    if url.startswith(GITHUB_URL_PREFIX):
        return url[len(GITHUB_URL_PREFIX):]
    return url


def short_sha(sha: str) -> str:
    return sha[:SHORT_SHA_LENGTH]


def impacted_clients_label(impact: ChangeImpact) -> str:
    if not impact.affected_clients:
        return "None"
    names = ", ".join(impact.affected_clients)
    return f"{impact.affected_client_count} ({names})"


def broken_locations_label(impact: ChangeImpact) -> str:
    if impact.broken_location_count == 0:
        return "None"
    return str(impact.broken_location_count)


def client_status_label(entry: ClientSummaryEntry) -> str:
    if entry.status == ClientStatus.BROKEN:
        return f"{entry.broken_use_count} broken uses"
    return "Not Broken"
