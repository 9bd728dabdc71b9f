"""HTML export: standalone styled impact report."""

from __future__ import annotations

import html
from urllib.parse import urlsplit

from breakbot_report.constants import ChangeStatus, ClientStatus
from breakbot_report.engine.views import (
    AnnotatedBrokenUse,
    ChangeImpact,
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

_e = html.escape

_SAFE_SCHEMES = ("http", "https")


def _link(url: str, label: str) -> str:
    """Anchor for web URLs; any other scheme renders the bare label."""
    try:
        scheme = urlsplit(url).scheme.lower()
    except ValueError:
        return label
    if scheme not in _SAFE_SCHEMES:
        return label
    return f'<a href="{_e(url)}">{label}</a>'


def _code(text: str) -> str:
    return f"<code>{_e(text)}</code>"


def _badge(text: str, tone: str) -> str:
    return f'<span class="badge badge-{tone}">{_e(text)}</span>'


def _table(headers: list[str], rows: list[list[str]]) -> str:
    head = "".join(f"<th>{_e(h)}</th>" for h in headers)
    body = "\n".join(
        "<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>"
        for row in rows
    )
    return (
        f"<table>\n<thead><tr>{head}</tr></thead>\n"
        f"<tbody>\n{body}\n</tbody>\n</table>"
    )


def _summary(views: ImpactViews) -> str:
    pr = views.report.pull_request
    ov = views.overview
    return (
        '<section id="summary">\n<h2>Summary</h2>\n<p>'
        f"We analyzed <mark>{_e(pr.head_branch)}</mark> "
        f"(commit {_e(short_sha(pr.head_commit))}) against "
        f"<mark>{_e(pr.base_branch)}</mark> "
        f"(commit {_e(short_sha(pr.base_commit))}) and found "
        f"{ov.impacted_module_count} impacted modules for a total of "
        f"{ov.breaking_change_count} breaking changes.<br>"
        f"{ov.impacted_client_count} clients are impacted.</p>\n</section>"
    )


def _change_row(impact: ChangeImpact) -> list[str]:
    change = impact.change
    breaks = impact.status == ChangeStatus.BREAKS_CLIENTS
    clients = (
        _e(impacted_clients_label(impact))
        if impact.affected_clients
        else _badge("None", "success")
    )
    return [
        f"{_link(change.file_url, _code(change.declaration))} "
        f"[{_link(change.diff_url, 'diff')}]",
        _code(change.change_kind),
        _badge(
            CHANGE_STATUS_LABELS[impact.status],
            "danger" if breaks else "warning",
        ),
        clients,
        _badge(
            broken_locations_label(impact),
            "danger" if breaks else "success",
        ),
    ]


def _module_section(
    module: ModuleReport, summary: ModuleImpactSummary | None
) -> str:
    header = f"<h2>Report for module {_code(module.module_id)}</h2>"
    if isinstance(module.outcome, AnalysisErrorOutcome) or summary is None:
        message = getattr(module.outcome, "message", "")
        body = (
            "<p>An error was encountered while analyzing the module: "
            f"{_e(message)}</p>"
        )
    else:
        body = (
            f"<p>This module is affected by {len(summary.changes)} "
            "breaking changes that impact "
            f"{summary.impacted_client_count} clients.</p>\n"
            + _table(
                [
                    "Affected Declaration",
                    "Breaking Change",
                    "Status",
                    "Impacted Clients",
                    "Broken Locations",
                ],
                [_change_row(i) for i in summary.changes],
            )
        )
    return f'<section class="module">\n{header}\n{body}\n</section>'


def _impact_summary(views: ImpactViews) -> str:
    rows = [
        [
            _link(url, _e(repository_label(url))),
            _badge(
                client_status_label(entry),
                "danger" if entry.status == ClientStatus.BROKEN else "success",
            ),
        ]
        for url, entry in views.client_summary.items()
    ]
    return (
        '<section id="impact-summary">\n<h2>Impact Summary</h2>\n'
        + _table(["Client", "Status"], rows)
        + "\n</section>"
    )


def _client_section(url: str, uses: list[AnnotatedBrokenUse]) -> str:
    rows = [
        [
            _link(u.use.location_url, _code(u.location)),
            _code(u.use.used_element),
            _code(u.source_declaration),
            _code(u.change_kind),
            _code(u.use.api_use) if u.use.api_use else "",
        ]
        for u in uses
    ]
    return (
        '<section class="client">\n'
        f"<h2>Impact on client {_link(url, _e(repository_label(url)))}</h2>\n"
        + _table(
            ["Location", "Element", "Breaking Declaration", "Kind", "Usage"],
            rows,
        )
        + "\n</section>"
    )


def export_html(views: ImpactViews) -> str:
    """Export the impact views as a styled HTML document."""
    report = views.report
    summaries = iter(views.module_summaries)
    body_parts: list[str] = [
        "<h1>Will this pull request break my clients?</h1>",
        _summary(views),
    ]

    for module in report.module_reports:
        summary = next(summaries) if module.is_delta else None
        body_parts.append(_module_section(module, summary))

    body_parts.append(_impact_summary(views))
    body_parts.extend(
        _client_section(url, uses)
        for url, uses in views.client_index.items()
    )
    body_parts.append(
        "<footer><p>This report was generated on "
        f"{_e(report.generated_at.isoformat())}</p></footer>"
    )

    pr = report.pull_request
    title = f"{pr.head_branch} against {pr.base_branch}"
    return _wrap_html("\n".join(body_parts), title)


def _wrap_html(body: str, title: str) -> str:
    """Wrap body in a full HTML document."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>BreakBot report: {_e(title)}</title>
<style>
body {{
  font-family: system-ui, sans-serif;
  max-width: 1100px; margin: 2em auto;
  padding: 0 1em; line-height: 1.6;
}}
code {{ background: #f4f4f4; padding: 0.2em 0.4em; border-radius: 3px; }}
table {{ border-collapse: collapse; width: 100%; margin: 1em 0; }}
th, td {{ border: 1px solid #ddd; padding: 0.5em; text-align: left; }}
th {{ background: #f8f8f8; }}
tbody tr:nth-child(odd) {{ background: #fcfcfc; }}
section {{ margin-bottom: 2em; }}
.badge {{ border-radius: 1em; padding: 0.2em 0.8em; font-size: 0.9em; }}
.badge-danger {{ background: #dc3545; color: #fff; }}
.badge-warning {{ background: #ffc107; color: #000; }}
.badge-success {{ background: #198754; color: #fff; }}
</style>
</head>
<body>
{body}
</body>
</html>"""
