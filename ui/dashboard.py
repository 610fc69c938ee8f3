"""
Rich-based terminal dashboard for network quality results.

All formatting helpers live in ``netquality.stats`` and
``netquality.grading`` -- this module only does presentation via the
``rich`` library.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from netquality.api import ClientInfo
from netquality.grading import describe_target_result
from netquality.orchestrator import PhaseEvent, PhaseStatus
from netquality.runner import PingSummary, SpeedTestResult
from netquality.stats import format_speed
from netquality.targets import Target

console = Console()


# ---------------------------------------------------------------------------
# Histogram helper
# ---------------------------------------------------------------------------

_BARS = "▁▂▃▄▅▆▇█"


def create_histogram(values: List[float]) -> str:
    """Return a single-line Unicode bar-chart."""
    if not values:
        return "No data"

    lo, hi = min(values), max(values)
    span = hi - lo if hi > lo else 1.0
    return "".join(
        _BARS[min(int((v - lo) / span * (len(_BARS) - 1)), len(_BARS) - 1)]
        for v in values
    )


# ---------------------------------------------------------------------------
# Print helpers
# ---------------------------------------------------------------------------

def print_header() -> None:
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Network Quality Check[/bold cyan]\n"
            "[dim]Latency, jitter, packet loss and throughput[/dim]",
            border_style="cyan",
        )
    )
    console.print()


def print_client_info(info: Optional[ClientInfo]) -> None:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(style="dim")
    table.add_column(style="bold")
    if info is None:
        table.add_row("IP Address:", "Unavailable")
    else:
        table.add_row("IP Address:", info.ip)
        if info.org:
            table.add_row("Network:", info.org)
        if info.location:
            table.add_row("Location:", info.location)
    console.print(Panel(table, title="[bold]Client Info[/bold]", border_style="blue"))


def print_ping_summary(summary: PingSummary) -> None:
    console.print(
        f"  [bold white]Ping:[/bold white] [bold yellow]{summary.ping_ms} ms[/bold yellow]  "
        f"[dim](jitter: {summary.jitter_ms} ms)[/dim]"
    )


def print_final_results(result: SpeedTestResult) -> None:
    console.print()
    console.print(
        Panel.fit(
            f"[bold white]   Ping:[/bold white]  [bold yellow]{result.ping_ms} ms[/bold yellow]  "
            f"[dim](jitter: {result.jitter_ms} ms)[/dim]\n"
            f"[bold white]   Download:[/bold white]  [bold green]{format_speed(result.download_mbps)}[/bold green]\n"
            f"[bold white]   Upload:[/bold white]  [bold blue]{format_speed(result.upload_mbps)}[/bold blue]",
            title="[bold]Results[/bold]",
            border_style="cyan",
        )
    )
    console.print()


# ---------------------------------------------------------------------------
# Per-target ping board
# ---------------------------------------------------------------------------

class TargetBoard:
    """Live table that follows ``PhaseEvent``s from ``MultiTargetRunner``."""

    def __init__(self, targets: List[Target]) -> None:
        self._targets = list(targets)
        self._cells: Dict[Target, str] = {t: "[dim]waiting[/dim]" for t in self._targets}
        self._samples: Dict[Target, List[float]] = {}
        self._live: Optional[Live] = None

    def render(self) -> Table:
        table = Table(title="Ping Test", box=box.ROUNDED)
        table.add_column("Server", style="bold")
        table.add_column("Address", style="dim")
        table.add_column("Result")
        table.add_column("Samples")
        for t in self._targets:
            table.add_row(
                t.name,
                t.address,
                self._cells.get(t, ""),
                create_histogram(self._samples[t]) if self._samples.get(t) else "",
            )
        return table

    def update(self, target: Target, event: PhaseEvent) -> None:
        if event.status is PhaseStatus.TESTING:
            self._cells[target] = "[cyan]Pinging...[/cyan]"
        elif event.aggregate is not None:
            headline, details, color = describe_target_result(event.aggregate)
            self._cells[target] = f"[bold {color}]{headline}[/bold {color}] [dim]{details}[/dim]"
            self._samples[target] = event.aggregate.latencies

        if self._live is not None:
            self._live.update(self.render())

    def __enter__(self) -> TargetBoard:
        self._live = Live(self.render(), console=console, refresh_per_second=8)
        self._live.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._live is not None:
            self._live.update(self.render())
            self._live.stop()
            self._live = None


# ---------------------------------------------------------------------------
# Progress display
# ---------------------------------------------------------------------------

class ProgressDisplay:
    """Manages a ``rich`` progress line during the speed test phases."""

    def __init__(self) -> None:
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description:<10}"),
            BarColumn(bar_width=40),
            TextColumn("[bold cyan]{task.fields[speed]}[/bold cyan]"),
            TimeElapsedColumn(),
            console=console,
        )
        self._tasks: Dict[str, int] = {}
        self._scales: Dict[str, float] = {}

    def start(self) -> None:
        self.progress.start()

    def update(self, label: str, value: Optional[float]) -> None:
        """``on_progress`` callback: *value* is None when a phase starts."""
        if label not in self._tasks:
            self._tasks[label] = self.progress.add_task(label, total=None, speed="...")
            self._scales[label] = 1.0
        task_id = self._tasks[label]

        if value is None:
            return
        # rich throttles the actual redraws to its refresh rate
        self._scales[label] = max(self._scales[label], value)
        self.progress.update(
            task_id,
            total=self._scales[label],
            completed=value,
            speed=format_speed(value),
        )

    def stop(self) -> None:
        self.progress.stop()
