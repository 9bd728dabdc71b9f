"""Correlation engine and the views it derives."""

from breakbot_report.engine.correlation import (
    compute_client_impact_index,
    compute_global_client_summary,
    compute_module_summaries,
    compute_report_overview,
    correlate,
    validate_report,
)
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

__all__ = [
    "AnnotatedBrokenUse",
    "ChangeImpact",
    "ClientImpactIndex",
    "ClientSummaryEntry",
    "GlobalClientSummary",
    "ImpactViews",
    "ModuleImpactSummary",
    "ReportOverview",
    "compute_client_impact_index",
    "compute_global_client_summary",
    "compute_module_summaries",
    "compute_report_overview",
    "correlate",
    "validate_report",
]
