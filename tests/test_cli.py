"""Tests for CLI argument parsing and output writing."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from breakbot_report.cli import _build_parser, _write_output, main
from breakbot_report.engine.correlation import correlate
from breakbot_report.models.report import AnalysisReport


class TestArgParser:
    def test_version_flag(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["--version"])
        assert args.version is True

    def test_analyze_defaults(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["analyze", "acme", "lib", "42"])
        assert args.command == "analyze"
        assert args.owner == "acme"
        assert args.repo == "lib"
        assert args.pr_number == 42
        assert args.output_dir is None
        assert args.format == "markdown"
        assert args.verbose is False

    def test_render_with_options(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(
            [
                "render",
                "report.json",
                "--output-dir",
                "./out",
                "--format",
                "html",
                "--verbose",
            ]
        )
        assert args.command == "render"
        assert args.report_path == "report.json"
        assert args.output_dir == "./out"
        assert args.format == "html"
        assert args.verbose is True

    def test_pr_number_must_be_int(self) -> None:
        parser = _build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["analyze", "acme", "lib", "abc"])

    def test_no_command_prints_help(self) -> None:
        parser = _build_parser()
        args = parser.parse_args([])
        assert args.command is None


class TestWriteOutput:
    def test_markdown_and_metadata(
        self, tmp_path: Path, sample_report: AnalysisReport
    ) -> None:
        output_dir = tmp_path / "output"
        path = _write_output(correlate(sample_report), output_dir, "markdown")

        assert path == output_dir / "report.md"
        assert path.read_text().startswith("---")
        metadata = json.loads((output_dir / "metadata.json").read_text())
        assert metadata["format"] == "markdown"
        assert metadata["breaking_change_count"] == 2
        assert metadata["failed_module_count"] == 1
        assert metadata["clients"][1] == {
            "url": "https://github.com/acme/client-two",
            "status": "clean",
            "broken_use_count": 0,
        }

    def test_json_format_output(
        self, tmp_path: Path, sample_report: AnalysisReport
    ) -> None:
        path = _write_output(correlate(sample_report), tmp_path, "json")
        assert path.name == "report.json"
        data = json.loads(path.read_text())
        assert data["overview"]["impacted_client_count"] == 1


class TestMain:
    def test_render_command(
        self,
        tmp_path: Path,
        sample_payload: dict[str, Any],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        report_file = tmp_path / "pr.json"
        report_file.write_text(json.dumps(sample_payload))
        out_dir = tmp_path / "out"

        main(["render", str(report_file), "-o", str(out_dir), "-f", "html"])

        assert (out_dir / "report.html").exists()
        out = capsys.readouterr().out
        assert "2 breaking changes in 2 modules, 1 clients impacted" in out
        assert "1 modules could not be analyzed" in out

    def test_missing_report_file_exits(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["render", str(tmp_path / "missing.json")])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_malformed_report_exits(
        self,
        tmp_path: Path,
        sample_payload: dict[str, Any],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        sample_payload["report"]["reports"].append({"id": "empty"})
        report_file = tmp_path / "pr.json"
        report_file.write_text(json.dumps(sample_payload))

        with pytest.raises(SystemExit) as exc_info:
            main(["render", str(report_file), "-o", str(tmp_path / "out")])
        assert exc_info.value.code == 1
        assert "neither a delta nor an error" in capsys.readouterr().err

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--version"])
        assert capsys.readouterr().out.startswith("breakbot-report ")
