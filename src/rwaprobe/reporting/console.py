"""Rich-powered console output."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from rwaprobe.models import CheckRecord, RunMetrics

_console = Console()

_STYLE_MAP = {
    "passed": "bold green",
    "failed": "bold red",
    "indeterminate": "bold yellow",
    "errored": "bold magenta",
}


def print_banner(base_url: str) -> None:
    """Display the startup banner."""
    _console.print(
        Panel.fit(
            f"[bold cyan]rwaprobe[/bold cyan]  —  functional checks against {base_url}",
            border_style="cyan",
        )
    )


def print_check(record: CheckRecord, index: int) -> None:
    """Print a single check result line."""
    style = _STYLE_MAP.get(record.outcome, "")
    _console.print(
        f"  [{style}]{index:>3}[/{style}]  "
        f"[{style}]{record.outcome:<14}[/{style}]  "
        f"{record.name:<28} {record.duration_ms:>6} ms"
        + (f"  [dim]{record.detail}[/dim]" if record.detail else "")
    )


def print_run_report(metrics: RunMetrics) -> None:
    """Display a run summary table.

    Indeterminate checks are counted apart from failures: they usually point at
    a slow environment rather than a regression.
    """
    table = Table(title="Run Report", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Checks", str(len(metrics.records)))
    table.add_row("Passed", str(metrics.count("passed")))
    table.add_row("Failed", str(metrics.count("failed")))
    table.add_row("Indeterminate (timeout)", str(metrics.count("indeterminate")))
    table.add_row("Errored", str(metrics.count("errored")))
    table.add_row("Run ID", metrics.run_id)
    table.add_row("Started", metrics.started_at)
    table.add_row("Ended", metrics.ended_at or "—")

    _console.print()
    _console.print(table)
    _console.print()
