"""Export module: multi-format impact report export."""

from collections.abc import Callable

from breakbot_report.constants import ExportFormat
from breakbot_report.engine.views import ImpactViews
from breakbot_report.export.html import export_html
from breakbot_report.export.json_export import export_json, views_to_dict
from breakbot_report.export.markdown import export_markdown

__all__ = [
    "export_html",
    "export_json",
    "export_markdown",
    "export_report",
    "views_to_dict",
]

_EXPORTERS: dict[str, Callable[[ImpactViews], str]] = {
    ExportFormat.MARKDOWN: export_markdown,
    ExportFormat.HTML: export_html,
    ExportFormat.JSON: export_json,
}


def export_report(views: ImpactViews, fmt: str = "markdown") -> str:
    """Dispatch export of the impact views by format string."""
    exporter = _EXPORTERS.get(fmt)
    if exporter is None:
        valid = ", ".join(_EXPORTERS)
        msg = f"Unsupported format: {fmt}. Use: {valid}"
        raise ValueError(msg)
    return exporter(views)
