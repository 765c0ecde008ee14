"""Rich progress display for an audit run."""

from __future__ import annotations

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

console = Console()


class AuditProgress:
    """Tracks the capture and audit steps using Rich spinners."""

    def __init__(self, *, console: Console = console) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_ids: dict[str, int] = {}

    def __enter__(self) -> "AuditProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def start_step(self, name: str) -> None:
        """Register and start tracking a step."""
        tid = self._progress.add_task(f"[cyan]{name}[/]", total=None)
        self._task_ids[name] = tid

    def finish_step(self, name: str, note: str = "") -> None:
        if name in self._task_ids:
            suffix = f" [dim]{note}[/]" if note else ""
            self._progress.update(
                self._task_ids[name],
                description=f"[green]✓ {name}[/]{suffix}",
                completed=True,
            )

    def fail_step(self, name: str, error: str) -> None:
        if name in self._task_ids:
            self._progress.update(
                self._task_ids[name],
                description=f"[red]✗ {name}: {error}[/]",
                completed=True,
            )
