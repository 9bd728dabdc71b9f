"""Pydantic models for the BreakBot pull request analysis result.

Field aliases follow the BreakBot ``pr-sync`` JSON payload; Python code
constructs the models by field name. All models are frozen and use
tuples for sequences, so a parsed report is an immutable snapshot.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from breakbot_report.constants import OutcomeKind
from breakbot_report.exceptions import MalformedReport


class _ReportModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PullRequestInfo(_ReportModel):
    """The two revisions compared by the analysis."""

    head_branch: str = Field(alias="headBranch")
    head_commit: str = Field(alias="headSha")
    base_branch: str = Field(alias="baseBranch")
    base_commit: str = Field(alias="baseSha")


class BreakingChange(_ReportModel):
    """A change to a public declaration that may break clients."""

    declaration: str
    change_kind: str = Field(alias="change")  # e.g. METHOD_REMOVED
    file_url: str = Field(default="", alias="fileUrl")
    diff_url: str = Field(default="", alias="diffUrl")


class Delta(_ReportModel):
    """Breaking changes introduced by the pull request in one module."""

    breaking_changes: tuple[BreakingChange, ...] = Field(
        default=(), alias="breakingChanges"
    )

    @field_validator("breaking_changes", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return () if value is None else value


class BrokenUse(_ReportModel):
    """A location in a client project invalidated by a breaking change."""

    source_declaration: str = Field(alias="src")
    used_element: str = Field(default="", alias="elem")
    file_path: str = Field(alias="path")
    start_line: int = Field(alias="startLine")
    end_line: int = Field(alias="endLine")
    location_url: str = Field(default="", alias="url")
    api_use: str | None = Field(default=None, alias="apiUse")


class ClientUsageReport(_ReportModel):
    """Broken uses found in one client project."""

    client_url: str = Field(alias="url")
    broken_uses: tuple[BrokenUse, ...] = Field(
        default=(), alias="brokenUses"
    )

    @field_validator("broken_uses", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return () if value is None else value


class DeltaOutcome(_ReportModel):
    """The module was analyzed: its delta and the client reports."""

    kind: Literal["delta"] = "delta"
    delta: Delta
    client_reports: tuple[ClientUsageReport, ...] = Field(
        default=(), alias="clientReports"
    )


class AnalysisErrorOutcome(_ReportModel):
    """The module could not be analyzed; carries the explanation."""

    kind: Literal["error"] = "error"
    message: str


ModuleOutcome = Annotated[
    DeltaOutcome | AnalysisErrorOutcome,
    Field(discriminator="kind"),
]


class ModuleReport(_ReportModel):
    """Analysis result for one module of the library."""

    module_id: str = Field(alias="id")
    outcome: ModuleOutcome

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        """Fold the wire's ``delta``/``error`` keys into ``outcome``."""
        if not isinstance(data, dict) or "outcome" in data:
            return data
        module_id = data.get("id", data.get("module_id"))
        delta = data.get("delta")
        error = data.get("error")
        if delta is not None and error is not None:
            raise ValueError(
                f"module {module_id!r} carries both a delta and an error"
            )
        if delta is None and error is None:
            raise ValueError(
                f"module {module_id!r} carries neither a delta nor an error"
            )
        if delta is not None:
            outcome: dict[str, Any] = {
                "kind": OutcomeKind.DELTA.value,
                "delta": delta,
                "clientReports": data.get("clientReports") or [],
            }
        else:
            outcome = {"kind": OutcomeKind.ERROR.value, "message": error}
        return {"id": module_id, "outcome": outcome}

    @property
    def is_delta(self) -> bool:
        return isinstance(self.outcome, DeltaOutcome)


class AnalysisReport(_ReportModel):
    """A complete, immutable analysis snapshot for one pull request."""

    generated_at: datetime = Field(alias="date")
    pull_request: PullRequestInfo = Field(alias="pr")
    module_reports: tuple[ModuleReport, ...] = Field(
        default=(), alias="reports"
    )

    @model_validator(mode="before")
    @classmethod
    def _flatten_report(cls, data: Any) -> Any:
        """The wire nests modules under ``report.reports``."""
        if isinstance(data, dict) and "report" in data:
            data = dict(data)
            nested = data.pop("report") or {}
            if not isinstance(nested, dict):
                raise ValueError("report must be an object")
            data["reports"] = nested.get("reports") or []
        return data


def parse_analysis_report(payload: dict[str, Any] | str | bytes) -> AnalysisReport:
    """Parse a raw ``pr-sync`` payload into an :class:`AnalysisReport`.

    Raises:
        MalformedReport: If the payload does not match the contract,
            including modules with both or neither outcome populated.
    """
    try:
        if isinstance(payload, (str, bytes)):
            return AnalysisReport.model_validate_json(payload)
        return AnalysisReport.model_validate(payload)
    except ValidationError as e:
        raise MalformedReport(f"Invalid analysis report: {e}") from e
