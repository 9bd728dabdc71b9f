"""Frozen views derived from an AnalysisReport.

These are plain data handed to presenters: every join is already
computed, so nothing downstream needs to match declarations again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

from breakbot_report.constants import ChangeStatus, ClientStatus
from breakbot_report.models.report import AnalysisReport, BreakingChange, BrokenUse


@dataclass(frozen=True)
class AnnotatedBrokenUse:
    """A broken use joined with the breaking change that causes it."""

    use: BrokenUse
    change_kind: str
    module_id: str

    @property
    def source_declaration(self) -> str:
        return self.use.source_declaration

    @property
    def location(self) -> str:
        """``path:start-end`` label used by the client tables."""
        return f"{self.use.file_path}:{self.use.start_line}-{self.use.end_line}"


ClientImpactIndex: TypeAlias = dict[str, list[AnnotatedBrokenUse]]


@dataclass(frozen=True)
class ChangeImpact:
    """How many clients and locations a single breaking change hits."""

    change: BreakingChange
    affected_clients: tuple[str, ...]
    broken_location_count: int

    @property
    def affected_client_count(self) -> int:
        return len(self.affected_clients)

    @property
    def status(self) -> ChangeStatus:
        if self.broken_location_count > 0:
            return ChangeStatus.BREAKS_CLIENTS
        return ChangeStatus.NO_BROKEN_CLIENT


@dataclass(frozen=True)
class ModuleImpactSummary:
    """Per-change impact rows for one successfully analyzed module."""

    module_id: str
    changes: tuple[ChangeImpact, ...]
    impacted_client_count: int  # clients with any broken use in the module


@dataclass(frozen=True)
class ClientSummaryEntry:
    """Status of one analyzed client across every module."""

    client_url: str
    broken_use_count: int

    @property
    def status(self) -> ClientStatus:
        if self.broken_use_count > 0:
            return ClientStatus.BROKEN
        return ClientStatus.CLEAN


GlobalClientSummary: TypeAlias = dict[str, ClientSummaryEntry]


@dataclass(frozen=True)
class ReportOverview:
    """Headline counts for the whole pull request."""

    impacted_module_count: int
    breaking_change_count: int
    impacted_client_count: int
    failed_module_count: int


@dataclass(frozen=True)
class ImpactViews:
    """Everything a presenter needs: the report plus derived views."""

    report: AnalysisReport
    module_summaries: tuple[ModuleImpactSummary, ...]
    client_index: ClientImpactIndex = field(default_factory=dict)
    client_summary: GlobalClientSummary = field(default_factory=dict)
    overview: ReportOverview = field(
        default_factory=lambda: ReportOverview(0, 0, 0, 0)
    )
