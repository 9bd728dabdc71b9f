"""Markdown export: summary, module tables and per-client tables."""

from __future__ import annotations

from breakbot_report.engine.views import (
    AnnotatedBrokenUse,
    ImpactViews,
    ModuleImpactSummary,
)
from breakbot_report.export.formatting import (
    CHANGE_STATUS_LABELS,
    broken_locations_label,
    client_status_label,
    impacted_clients_label,
    repository_label,
    short_sha,
)
from breakbot_report.models.report import AnalysisErrorOutcome, ModuleReport


def _cell(text: str) -> str:
    """Escape pipes and newlines so text stays inside one table cell."""
    return text.replace("|", "\\|").replace("\n", " ")


def _code(text: str) -> str:
    return f"`{_cell(text)}`"


def _table(headers: list[str], rows: list[list[str]]) -> list[str]:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("---" for _ in headers) + "|",
    ]
    lines.extend("| " + " | ".join(row) + " |" for row in rows)
    return lines


def _summary(views: ImpactViews) -> list[str]:
    pr = views.report.pull_request
    ov = views.overview
    return [
        "## Summary\n",
        (
            f"We analyzed **{pr.head_branch}** (commit {short_sha(pr.head_commit)}) "
            f"against **{pr.base_branch}** (commit {short_sha(pr.base_commit)}) "
            f"and found {ov.impacted_module_count} impacted modules for a total "
            f"of {ov.breaking_change_count} breaking changes."
        ),
        f"{ov.impacted_client_count} clients are impacted.",
        "",
    ]


def _module_section(
    module: ModuleReport, summary: ModuleImpactSummary | None
) -> list[str]:
    parts = [f"## Report for module `{module.module_id}`\n"]
    if isinstance(module.outcome, AnalysisErrorOutcome) or summary is None:
        message = getattr(module.outcome, "message", "")
        parts.append(
            "An error was encountered while analyzing the module: "
            f"{message}"
        )
        parts.append("")
        return parts

    parts.append(
        f"This module is affected by {len(summary.changes)} breaking "
        f"changes that impact {summary.impacted_client_count} clients.\n"
    )
    rows = [
        [
            f"[{_code(i.change.declaration)}]({i.change.file_url}) "
            f"[[diff]({i.change.diff_url})]",
            _code(i.change.change_kind),
            CHANGE_STATUS_LABELS[i.status],
            _cell(impacted_clients_label(i)),
            broken_locations_label(i),
        ]
        for i in summary.changes
    ]
    parts.extend(
        _table(
            [
                "Affected Declaration",
                "Breaking Change",
                "Status",
                "Impacted Clients",
                "Broken Locations",
            ],
            rows,
        )
    )
    parts.append("")
    return parts


def _impact_summary(views: ImpactViews) -> list[str]:
    rows = [
        [
            f"[{_cell(repository_label(url))}]({url})",
            client_status_label(entry),
        ]
        for url, entry in views.client_summary.items()
    ]
    return ["## Impact Summary\n", *_table(["Client", "Status"], rows), ""]


def _client_section(url: str, uses: list[AnnotatedBrokenUse]) -> list[str]:
    rows = [
        [
            f"[{_code(u.location)}]({u.use.location_url})",
            _code(u.use.used_element),
            _code(u.source_declaration),
            _code(u.change_kind),
            _code(u.use.api_use) if u.use.api_use else "",
        ]
        for u in uses
    ]
    return [
        f"## Impact on client [{_cell(repository_label(url))}]({url})\n",
        *_table(
            ["Location", "Element", "Breaking Declaration", "Kind", "Usage"],
            rows,
        ),
        "",
    ]


def export_markdown(views: ImpactViews) -> str:
    """Export the impact views as a single Markdown document."""
    report = views.report
    pr = report.pull_request
    summaries = iter(views.module_summaries)
    parts: list[str] = []

    # Metadata header
    parts.append("---")
    parts.append(f"head: {pr.head_branch}@{pr.head_commit}")
    parts.append(f"base: {pr.base_branch}@{pr.base_commit}")
    parts.append(f"generated: {report.generated_at.isoformat()}")
    parts.append(f"modules: {len(report.module_reports)}")
    parts.append("---\n")

    parts.append("# Will this pull request break my clients?\n")
    parts.extend(_summary(views))

    for module in report.module_reports:
        summary = next(summaries) if module.is_delta else None
        parts.extend(_module_section(module, summary))

    parts.extend(_impact_summary(views))

    for url, uses in views.client_index.items():
        parts.extend(_client_section(url, uses))

    return "\n".join(parts)
