"""JSON export: structured envelope of every derived view."""

from __future__ import annotations

import json
from typing import Any

from breakbot_report.engine.views import (
    AnnotatedBrokenUse,
    ImpactViews,
    ModuleImpactSummary,
)
from breakbot_report.models.report import AnalysisErrorOutcome, ModuleReport


def views_to_dict(views: ImpactViews) -> dict[str, Any]:
    """Convert ImpactViews to a JSON-serializable dict."""
    report = views.report
    ov = views.overview
    return {
        "generated_at": report.generated_at.isoformat(),
        "pull_request": report.pull_request.model_dump(mode="json"),
        "overview": {
            "impacted_module_count": ov.impacted_module_count,
            "breaking_change_count": ov.breaking_change_count,
            "impacted_client_count": ov.impacted_client_count,
            "failed_module_count": ov.failed_module_count,
        },
        "modules": [_module_to_dict(m) for m in report.module_reports],
        "module_summaries": [
            _summary_to_dict(s) for s in views.module_summaries
        ],
        "client_summary": [
            {
                "client_url": entry.client_url,
                "status": entry.status.value,
                "broken_use_count": entry.broken_use_count,
            }
            for entry in views.client_summary.values()
        ],
        "client_impact": {
            url: [_use_to_dict(u) for u in uses]
            for url, uses in views.client_index.items()
        },
    }


def export_json(views: ImpactViews) -> str:
    """Export the impact views as structured JSON."""
    return json.dumps(views_to_dict(views), indent=2, ensure_ascii=False)


def _module_to_dict(module: ModuleReport) -> dict[str, Any]:
    if isinstance(module.outcome, AnalysisErrorOutcome):
        return {
            "module_id": module.module_id,
            "status": "error",
            "error": module.outcome.message,
        }
    return {
        "module_id": module.module_id,
        "status": "analyzed",
        "breaking_change_count": len(module.outcome.delta.breaking_changes),
        "client_count": len(module.outcome.client_reports),
    }


def _summary_to_dict(summary: ModuleImpactSummary) -> dict[str, Any]:
    return {
        "module_id": summary.module_id,
        "impacted_client_count": summary.impacted_client_count,
        "changes": [
            {
                "declaration": i.change.declaration,
                "change_kind": i.change.change_kind,
                "file_url": i.change.file_url,
                "diff_url": i.change.diff_url,
                "status": i.status.value,
                "affected_clients": list(i.affected_clients),
                "affected_client_count": i.affected_client_count,
                "broken_location_count": i.broken_location_count,
            }
            for i in summary.changes
        ],
    }


def _use_to_dict(annotated: AnnotatedBrokenUse) -> dict[str, Any]:
    use = annotated.use
    return {
        "module_id": annotated.module_id,
        "source_declaration": use.source_declaration,
        "used_element": use.used_element,
        "file_path": use.file_path,
        "start_line": use.start_line,
        "end_line": use.end_line,
        "location_url": use.location_url,
        "api_use": use.api_use,
        "change_kind": annotated.change_kind,
    }
