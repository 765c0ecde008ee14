"""Typer CLI — ``pai audit``, ``pai render`` and ``pai validate`` commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from pai.config import load_config
from pai.schemas.config import AuditConfig
from pai.schemas.report import Report
from pai.shared.urls import is_valid_url, report_filename

# Load .env file from project root (if it exists)
load_dotenv()

app = typer.Typer(
    name="pai",
    help="Page Accessibility Inspector — audit a web page for common accessibility defects.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # Playwright's asyncio transport is chatty at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def _resolve_config(config: Path | None, **overrides: object) -> AuditConfig:
    """Load the config file (if any) and apply command-line overrides."""
    cfg = load_config(config) if config else AuditConfig()
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return cfg
    return AuditConfig(**{**cfg.model_dump(), **updates})


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to audit-config.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file without running an audit."""
    _setup_logging(verbose)

    try:
        cfg = load_config(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Target URL:  {cfg.target_url or '(none)'}")
    console.print(f"  Format:      {cfg.output_format}")
    console.print(f"  Viewport:    {cfg.viewport_width}x{cfg.viewport_height}")
    console.print(f"  Caps:        {cfg.max_text_candidates} text candidates, "
                  f"{cfg.max_contrast_checks} contrast checks")
    console.print(f"  Extended:    {'yes' if cfg.extended_checks else 'no'}")
    if cfg.disabled_checks:
        console.print(f"  Disabled:    {', '.join(cfg.disabled_checks)}")
    console.print(f"  Output dir:  {cfg.output_directory}")


@app.command()
def audit(
    url: str = typer.Argument(None, help="Page to audit (http:// or https://)."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to audit-config.yml"),
    fmt: str = typer.Option(None, "--format", "-f", help="Report format: json, text or html."),
    output: Path = typer.Option(None, "--output", "-o", help="Directory to write reports into."),
    snapshot: Path = typer.Option(None, "--snapshot", help="Audit a saved snapshot JSON instead of loading the page."),
    save_snapshot: Path = typer.Option(None, "--save-snapshot", help="Also write the captured snapshot to this file."),
    extended: bool = typer.Option(False, "--extended", help="Also run the extended checks (empty alt, form labels, skip links)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Audit a page and write the report.

    Examples:

        pai audit https://example.com

        pai audit https://example.com --format html --output ./reports

        pai audit --snapshot page.json --format text
    """
    _setup_logging(verbose)

    if url is not None and not is_valid_url(url.strip()):
        console.print("[red]Please enter a valid URL (http:// or https://)[/]")
        raise typer.Exit(code=1)

    try:
        cfg = _resolve_config(
            config,
            target_url=url.strip() if url else None,
            output_format=fmt,
            output_directory=str(output) if output else None,
            extended_checks=True if extended else None,
        )
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)

    if snapshot is None and not cfg.target_url:
        console.print("[red]Please enter a URL to check[/] (argument, config target_url, or --snapshot).")
        raise typer.Exit(code=1)

    asyncio.run(_run_audit(cfg, snapshot_path=snapshot, save_snapshot=save_snapshot))


async def _run_audit(
    cfg: AuditConfig,
    *,
    snapshot_path: Path | None = None,
    save_snapshot: Path | None = None,
) -> None:
    """Capture (or load) a snapshot, audit it and write the outputs."""
    from pai.engine.runner import AuditEngine
    from pai.engine.snapshot import PageSnapshot, Viewport, load_snapshot
    from pai.output.formats import render_report
    from pai.output.json_report import render_json
    from pai.shared.browser import BrowserManager
    from pai.shared.progress import AuditProgress

    with AuditProgress() as progress:
        if snapshot_path is not None:
            progress.start_step("Loading snapshot")
            try:
                page = load_snapshot(snapshot_path)
            except Exception as exc:
                progress.fail_step("Loading snapshot", str(exc))
                raise typer.Exit(code=1)
            progress.finish_step("Loading snapshot", page.url)
        else:
            progress.start_step("Loading page")
            try:
                viewport = Viewport(width=cfg.viewport_width, height=cfg.viewport_height)
                async with BrowserManager(viewport=viewport, timeout_ms=cfg.timeout_ms) as bm:
                    captured = await bm.capture_page(cfg.target_url, wait_ms=cfg.wait_ms)
            except Exception as exc:
                progress.fail_step("Loading page", str(exc))
                console.print(f"[red]Could not check the site:[/] {exc}")
                raise typer.Exit(code=1)
            if save_snapshot is not None:
                save_snapshot.parent.mkdir(parents=True, exist_ok=True)
                save_snapshot.write_text(captured.model_dump_json(), encoding="utf-8")
            page = PageSnapshot(captured)
            progress.finish_step("Loading page", page.url)

        progress.start_step("Running checks")
        engine = AuditEngine.from_config(cfg)
        report = engine.run(page)
        progress.finish_step("Running checks", f"{report.summary.total} issue(s)")

    out_dir = Path(cfg.output_directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    json_path = out_dir / "report.json"
    json_path.write_text(render_json(report), encoding="utf-8")
    console.print(f"[green]Report data written to:[/] {json_path}")

    out_path = out_dir / report_filename(cfg.output_format)
    out_path.write_text(render_report(report, cfg.output_format), encoding="utf-8")
    console.print(f"[green]{cfg.output_format.upper()} report written to:[/] {out_path}")

    _print_summary(report)


def _print_summary(report: Report) -> None:
    s = report.summary
    if not s.total:
        console.print("\n[bold green]No accessibility issues found![/]")
        return
    console.print(
        f"\n[bold]{s.total}[/] issue(s): "
        f"[red]{s.error_count} error(s)[/], [yellow]{s.warning_count} warning(s)[/]"
    )


@app.command()
def render(
    report_path: Path = typer.Option(..., "--input", "-i", help="report.json from a previous audit."),
    fmt: str = typer.Option("html", "--format", "-f", help="Report format: json, text or html."),
    output: Path = typer.Option(None, "--output", "-o", help="File to write (defaults to a dated name next to the input)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Re-render a saved report.json in another format.

    Example:

        pai render --input ./output/report.json --format text
    """
    _setup_logging(verbose)

    from pai.output.formats import RENDERERS, render_report
    from pai.output.json_report import load_report

    if not report_path.exists():
        console.print(f"[red]No report found at {report_path}[/]")
        console.print("Run [bold]pai audit[/] first — it saves report.json.")
        raise typer.Exit(code=1)
    if fmt not in RENDERERS:
        console.print(f"[red]Unknown format:[/] {fmt} (expected json, text or html)")
        raise typer.Exit(code=1)

    try:
        report = load_report(report_path.read_text(encoding="utf-8"))
    except Exception as exc:
        console.print(f"[red]Could not read report:[/] {exc}")
        raise typer.Exit(code=1)

    out_path = output or report_path.parent / report_filename(fmt)
    out_path.write_text(render_report(report, fmt), encoding="utf-8")
    console.print(f"[green]{fmt.upper()} report written to:[/] {out_path}")
