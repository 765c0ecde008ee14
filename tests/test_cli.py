"""Tests for the Typer CLI."""

import json
from pathlib import Path

from typer.testing import CliRunner

from _snapshots import el, page_data
from pai.cli import app

runner = CliRunner()


def _write_snapshot(path: Path, *children, **kwargs) -> Path:
    path.write_text(json.dumps(page_data(*children, **kwargs)), encoding="utf-8")
    return path


class TestValidate:
    def test_valid_config(self, tmp_config: Path) -> None:
        result = runner.invoke(app, ["validate", "--config", str(tmp_config)])
        assert result.exit_code == 0
        assert "Config is valid!" in result.output
        assert "https://example.com" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "bad.yml"
        cfg.write_text("disabled_checks: [colour]\n")
        result = runner.invoke(app, ["validate", "--config", str(cfg)])
        assert result.exit_code == 1
        assert "Config validation failed" in result.output


class TestAudit:
    def test_invalid_url(self) -> None:
        result = runner.invoke(app, ["audit", "example.com"])
        assert result.exit_code == 1
        assert "Please enter a valid URL" in result.output

    def test_no_target(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["audit", "--output", str(tmp_path)])
        assert result.exit_code == 1

    def test_audit_snapshot_text(self, tmp_path: Path) -> None:
        snap = _write_snapshot(tmp_path / "page.json", el("p", "No heading here"), lang=None)
        out_dir = tmp_path / "out"
        result = runner.invoke(app, [
            "audit", "--snapshot", str(snap), "--format", "text", "--output", str(out_dir),
        ])
        assert result.exit_code == 0, result.output

        data = json.loads((out_dir / "report.json").read_text())
        assert data["summary"] == {"total": 2, "error_count": 1, "warning_count": 1}
        text_reports = list(out_dir.glob("accessibility-report-*.txt"))
        assert len(text_reports) == 1
        assert "Issues found: 2 (1 errors, 1 warnings)" in text_reports[0].read_text()

    def test_audit_snapshot_clean(self, tmp_path: Path) -> None:
        snap = _write_snapshot(tmp_path / "page.json", el("h1", "Welcome"))
        result = runner.invoke(app, ["audit", "--snapshot", str(snap), "--output", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "No accessibility issues found!" in result.output

    def test_extended_flag(self, tmp_path: Path) -> None:
        snap = _write_snapshot(tmp_path / "page.json", el("h1", "Welcome"))
        result = runner.invoke(app, [
            "audit", "--snapshot", str(snap), "--output", str(tmp_path), "--extended",
        ])
        assert result.exit_code == 0, result.output
        data = json.loads((tmp_path / "report.json").read_text())
        assert [f["category"] for f in data["findings"]] == ["navigation"]

    def test_missing_snapshot(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["audit", "--snapshot", str(tmp_path / "missing.json")])
        assert result.exit_code == 1


class TestRender:
    def test_render_html(self, tmp_path: Path) -> None:
        snap = _write_snapshot(tmp_path / "page.json", el("img", attrs={"src": "a.png"}))
        runner.invoke(app, ["audit", "--snapshot", str(snap), "--output", str(tmp_path)])

        out = tmp_path / "report.html"
        result = runner.invoke(app, [
            "render", "--input", str(tmp_path / "report.json"), "--output", str(out),
        ])
        assert result.exit_code == 0, result.output
        assert "Image missing alt attribute" in out.read_text()

    def test_missing_report(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["render", "--input", str(tmp_path / "report.json")])
        assert result.exit_code == 1
        assert "No report found" in result.output

    def test_unknown_format(self, tmp_path: Path) -> None:
        report = tmp_path / "report.json"
        report.write_text("{}")
        result = runner.invoke(app, ["render", "--input", str(report), "--format", "pdf"])
        assert result.exit_code == 1
        assert "Unknown format" in result.output
