"""Correlation engine: joins breaking changes with client broken uses.

All functions are pure: they read an immutable AnalysisReport and
return fresh structures, so they are safe to call concurrently.

Declarations are matched by exact string equality. When a delta lists
the same declaration twice, every (change, use) pair is kept, the
same way a relational join would.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from breakbot_report.engine.views import (
    AnnotatedBrokenUse,
    ChangeImpact,
    ClientImpactIndex,
    ClientSummaryEntry,
    GlobalClientSummary,
    ImpactViews,
    ModuleImpactSummary,
    ReportOverview,
)
from breakbot_report.exceptions import MalformedReport
from breakbot_report.models.report import (
    AnalysisErrorOutcome,
    AnalysisReport,
    BreakingChange,
    BrokenUse,
    ClientUsageReport,
    DeltaOutcome,
)

logger = logging.getLogger(__name__)

__all__ = [
    "compute_client_impact_index",
    "compute_global_client_summary",
    "compute_module_summaries",
    "compute_report_overview",
    "correlate",
    "validate_report",
]


def validate_report(report: AnalysisReport) -> None:
    """Fail fast on structural contract violations.

    Parsing already enforces the outcome union, so the outcome check
    only trips for reports built without validation, e.g. through
    ``model_construct``. The line range check applies to every report.

    Raises:
        MalformedReport: If a module's outcome is neither a delta nor
            an analysis error, or a broken use has start_line > end_line.
    """
    for module in report.module_reports:
        outcome = module.outcome
        if not isinstance(outcome, (DeltaOutcome, AnalysisErrorOutcome)):
            msg = (
                f"Module {module.module_id!r} must carry exactly one "
                "of a delta or an analysis error"
            )
            raise MalformedReport(msg, module_id=module.module_id)
        if isinstance(outcome, AnalysisErrorOutcome):
            continue
        for client in outcome.client_reports:
            for use in client.broken_uses:
                if use.start_line > use.end_line:
                    msg = (
                        f"Broken use at {use.file_path} in "
                        f"{client.client_url} has start line "
                        f"{use.start_line} after end line {use.end_line}"
                    )
                    raise MalformedReport(msg, module_id=module.module_id)


def _delta_modules(
    report: AnalysisReport,
) -> Iterator[tuple[str, DeltaOutcome]]:
    for module in report.module_reports:
        if isinstance(module.outcome, DeltaOutcome):
            yield module.module_id, module.outcome


def _join(
    outcome: DeltaOutcome,
) -> Iterator[tuple[BreakingChange, ClientUsageReport, BrokenUse]]:
    """Yield matching triples in change, client, use order."""
    for change in outcome.delta.breaking_changes:
        for client in outcome.client_reports:
            for use in client.broken_uses:
                if use.source_declaration == change.declaration:
                    yield change, client, use


def _build_index(report: AnalysisReport) -> ClientImpactIndex:
    index: ClientImpactIndex = {}
    for module_id, outcome in _delta_modules(report):
        for change, client, use in _join(outcome):
            index.setdefault(client.client_url, []).append(
                AnnotatedBrokenUse(
                    use=use,
                    change_kind=change.change_kind,
                    module_id=module_id,
                )
            )
    return index


def _summarize_module(
    module_id: str, outcome: DeltaOutcome
) -> ModuleImpactSummary:
    impacts: list[ChangeImpact] = []
    for change in outcome.delta.breaking_changes:
        affected: dict[str, None] = {}
        locations = 0
        for client in outcome.client_reports:
            matches = sum(
                1
                for use in client.broken_uses
                if use.source_declaration == change.declaration
            )
            if matches:
                affected.setdefault(client.client_url)
                locations += matches
        impacts.append(
            ChangeImpact(
                change=change,
                affected_clients=tuple(affected),
                broken_location_count=locations,
            )
        )
    impacted = {c.client_url for c in outcome.client_reports if c.broken_uses}
    return ModuleImpactSummary(
        module_id=module_id,
        changes=tuple(impacts),
        impacted_client_count=len(impacted),
    )


def _summarize_clients(
    report: AnalysisReport, index: ClientImpactIndex
) -> GlobalClientSummary:
    summary: GlobalClientSummary = {}
    for _, outcome in _delta_modules(report):
        for client in outcome.client_reports:
            url = client.client_url
            if url not in summary:
                summary[url] = ClientSummaryEntry(
                    client_url=url,
                    broken_use_count=len(index.get(url, ())),
                )
    return summary


def _overview(
    report: AnalysisReport, index: ClientImpactIndex
) -> ReportOverview:
    deltas = [outcome for _, outcome in _delta_modules(report)]
    return ReportOverview(
        impacted_module_count=len(deltas),
        breaking_change_count=sum(
            len(o.delta.breaking_changes) for o in deltas
        ),
        impacted_client_count=sum(1 for uses in index.values() if uses),
        failed_module_count=len(report.module_reports) - len(deltas),
    )


def compute_module_summaries(
    report: AnalysisReport,
) -> list[ModuleImpactSummary]:
    """Per-change client and location counts for every delta module.

    Modules that failed analysis produce no row; their messages stay
    available on the report itself.
    """
    validate_report(report)
    return [
        _summarize_module(module_id, outcome)
        for module_id, outcome in _delta_modules(report)
    ]


def compute_client_impact_index(report: AnalysisReport) -> ClientImpactIndex:
    """Map each client URL to its broken uses, annotated with change kind.

    Entries follow module, then breaking change, then broken use order.
    A client seen in several modules gets one merged entry.
    """
    validate_report(report)
    return _build_index(report)


def compute_global_client_summary(
    report: AnalysisReport,
) -> GlobalClientSummary:
    """Broken/clean status for every client that was analyzed.

    Clients absent from every client report were never analyzed and
    are not represented.
    """
    validate_report(report)
    return _summarize_clients(report, _build_index(report))


def compute_report_overview(report: AnalysisReport) -> ReportOverview:
    """Headline counts shown above the per-module tables."""
    validate_report(report)
    return _overview(report, _build_index(report))


def correlate(report: AnalysisReport) -> ImpactViews:
    """Compute every derived view in one pass over the report."""
    validate_report(report)
    index = _build_index(report)
    views = ImpactViews(
        report=report,
        module_summaries=tuple(
            _summarize_module(module_id, outcome)
            for module_id, outcome in _delta_modules(report)
        ),
        client_index=index,
        client_summary=_summarize_clients(report, index),
        overview=_overview(report, index),
    )
    logger.debug(
        "event=report_correlated modules=%d clients=%d broken_clients=%d",
        len(report.module_reports),
        len(views.client_summary),
        views.overview.impacted_client_count,
    )
    return views
