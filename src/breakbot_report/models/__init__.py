"""Pydantic models for the analysis report contract."""

from breakbot_report.models.report import (
    AnalysisErrorOutcome,
    AnalysisReport,
    BreakingChange,
    BrokenUse,
    ClientUsageReport,
    Delta,
    DeltaOutcome,
    ModuleOutcome,
    ModuleReport,
    PullRequestInfo,
    parse_analysis_report,
)

__all__ = [
    "AnalysisErrorOutcome",
    "AnalysisReport",
    "BreakingChange",
    "BrokenUse",
    "ClientUsageReport",
    "Delta",
    "DeltaOutcome",
    "ModuleOutcome",
    "ModuleReport",
    "PullRequestInfo",
    "parse_analysis_report",
]
