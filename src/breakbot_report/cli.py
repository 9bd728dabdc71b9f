"""CLI entry point: ``breakbot-report analyze`` and ``breakbot-report render``."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from breakbot_report import __version__
from breakbot_report.config import Settings
from breakbot_report.constants import EXPORT_EXTENSIONS, ExportFormat
from breakbot_report.engine.views import ImpactViews
from breakbot_report.exceptions import BreakbotReportError
from breakbot_report.logging_config import setup_logging


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"breakbot-report {__version__}")
        return

    if args.command is None:
        parser.print_help()
        return

    settings = Settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        if args.command == "analyze":
            views = _run_analyze(args, settings)
        else:
            views = _run_render(args)
    except (BreakbotReportError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    output_dir = Path(args.output_dir) if args.output_dir else settings.output_dir
    path = _write_output(views, output_dir, args.format)

    ov = views.overview
    print(
        f"\nDone! {ov.breaking_change_count} breaking changes in "
        f"{ov.impacted_module_count} modules, "
        f"{ov.impacted_client_count} clients impacted"
    )
    if ov.failed_module_count:
        print(f"  {ov.failed_module_count} modules could not be analyzed")
    print(f"Output: {path}")


def _add_output_options(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "--output-dir",
        "-o",
        default=None,
        help="Output directory (default: OUTPUT_DIR setting)",
    )
    sub.add_argument(
        "--format",
        "-f",
        choices=[f.value for f in ExportFormat],
        default=ExportFormat.MARKDOWN.value,
        help="Export format (default: markdown)",
    )
    sub.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="breakbot-report",
        description=(
            "Will this pull request break my clients? "
            "Cross-references breaking changes with client usages."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    analyze = sub.add_parser(
        "analyze",
        help="Analyze a GitHub pull request",
    )
    analyze.add_argument("owner", help="Repository owner")
    analyze.add_argument("repo", help="Repository name")
    analyze.add_argument(
        "pr_number",
        type=int,
        help="Pull request number",
    )
    _add_output_options(analyze)

    render = sub.add_parser(
        "render",
        help="Render a saved analysis report JSON file",
    )
    render.add_argument(
        "report_path",
        type=str,
        help="Path to a pr-sync JSON payload",
    )
    _add_output_options(render)

    return parser


def _run_analyze(
    args: argparse.Namespace, settings: Settings
) -> ImpactViews:
    """Execute the analyze command."""
    from breakbot_report.services.impact_service import (
        analyze_pull_request,
    )

    print(f"Analyzing: {args.owner}/{args.repo}#{args.pr_number}")
    return asyncio.run(
        analyze_pull_request(
            args.owner,
            args.repo,
            args.pr_number,
            settings=settings,
        )
    )


def _run_render(args: argparse.Namespace) -> ImpactViews:
    """Execute the render command."""
    from breakbot_report.engine.correlation import correlate
    from breakbot_report.services.impact_service import load_report_file

    report_path = Path(args.report_path).resolve()
    print(f"Rendering: {report_path}")
    return correlate(load_report_file(report_path))


def _write_output(
    views: ImpactViews,
    output_dir: Path,
    fmt: str,
) -> Path:
    """Write the rendered report and its metadata; return the report path."""
    from breakbot_report.export import export_report

    output_dir.mkdir(parents=True, exist_ok=True)

    ext = EXPORT_EXTENSIONS.get(fmt, "md")
    report_file = output_dir / f"report.{ext}"
    report_file.write_text(export_report(views, fmt), encoding="utf-8")

    pr = views.report.pull_request
    ov = views.overview
    metadata = {
        "head": f"{pr.head_branch}@{pr.head_commit}",
        "base": f"{pr.base_branch}@{pr.base_commit}",
        "generated_at": views.report.generated_at.isoformat(),
        "format": fmt,
        "impacted_module_count": ov.impacted_module_count,
        "failed_module_count": ov.failed_module_count,
        "breaking_change_count": ov.breaking_change_count,
        "impacted_client_count": ov.impacted_client_count,
        "clients": [
            {
                "url": entry.client_url,
                "status": entry.status.value,
                "broken_use_count": entry.broken_use_count,
            }
            for entry in views.client_summary.values()
        ],
    }
    (output_dir / "metadata.json").write_text(
        json.dumps(metadata, indent=2), encoding="utf-8"
    )
    return report_file


if __name__ == "__main__":
    main()
