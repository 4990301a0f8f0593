"""Rich terminal display for reclaim."""

from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn
from rich.table import Table

from reclaim.models import PoolProgress, RunSummary, ScanProgress, ScanReport
from reclaim.progress import (
    Reporter,
    format_duration,
    format_pool_status,
    format_scan_status,
    format_size,
)

console = Console()

PHASE_TITLES = {
    "scan": "Scanning",
    "delete": "Deleting",
    "clean": "Maintaining projects",
}


def scan_progress_bar(target: Console = console) -> Progress:
    """Create a spinner for the scan phase (total unknown)."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.fields[title]}[/bold blue]"),
        TextColumn("[dim]{task.description}[/dim]"),
        TimeElapsedColumn(),
        console=target,
        transient=True,
    )


def pool_progress_bar(target: Console = console) -> Progress:
    """Create a progress bar for a job pool phase."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.fields[title]}[/bold blue]"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        TextColumn("[dim]{task.description}[/dim]"),
        console=target,
    )


class ConsoleReporter(Reporter):
    """Renders scan, delete and clean progress with rich."""

    def __init__(self, target: Console = console, label_budget: int = 100) -> None:
        self.console = target
        self.label_budget = label_budget
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def phase_started(self, phase: str, total: int) -> None:
        self.phase_finished(phase)
        title = PHASE_TITLES.get(phase, phase)
        if phase == "scan":
            self._progress = scan_progress_bar(self.console)
            self._task = self._progress.add_task("", total=None, title=title)
        else:
            self._progress = pool_progress_bar(self.console)
            self._task = self._progress.add_task("", total=total, title=title)
        self._progress.start()

    def scan_progress(self, progress: ScanProgress) -> None:
        if self._progress is not None and self._task is not None:
            self._progress.update(self._task, description=format_scan_status(progress))

    def pool_progress(self, progress: PoolProgress) -> None:
        if self._progress is not None and self._task is not None:
            self._progress.update(
                self._task,
                completed=progress.completed,
                description=format_pool_status(progress, self.label_budget),
            )

    def phase_finished(self, phase: str) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task = None

    def show_paths(self, title: str, paths: Sequence[Path]) -> None:
        show_path_list(title, paths, target=self.console)


def show_path_list(title: str, paths: Sequence[Path], target: Console = console) -> None:
    """Display a numbered list of paths."""
    table = Table(title=f"{title} ({len(paths)})", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Path")
    for i, path in enumerate(paths, 1):
        table.add_row(str(i), str(path))
    target.print(table)


def show_scan_report(report: ScanReport, target: Console = console) -> None:
    """Display what a scan found."""
    if report.trash_dirs:
        show_path_list("Trash directories", report.trash_dirs, target=target)
    if report.projects:
        show_path_list("Projects", report.projects, target=target)
    target.print(
        f"[dim]Scanned {report.scanned_count} directories in "
        f"{format_duration(report.elapsed_seconds)}[/dim]"
    )


def show_dry_run_banner(target: Console = console) -> None:
    target.print("[yellow]DRY RUN - Nothing will be deleted or executed[/yellow]\n")


def show_run_summary(summary: RunSummary, target: Console = console) -> None:
    """Display the final summary of a run."""
    target.print()
    if summary.dry_run:
        target.print("[bold yellow]Dry run complete[/bold yellow]")
    else:
        target.print("[bold green]Reclaim complete![/bold green]")
    target.print()

    table = Table(show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Elapsed", format_duration(summary.elapsed_seconds))
    table.add_row("Directories scanned", str(summary.scanned_count))
    table.add_row("Trash directories", str(summary.trash_found))
    table.add_row("Projects found", str(summary.projects_found))
    if not summary.dry_run:
        table.add_row("Space processed", format_size(summary.total_freed_bytes))
        table.add_row("Space freed", f"[bold green]{format_size(summary.reclaimed_bytes)}[/bold green]")
        table.add_row("Projects cleaned", str(summary.projects_cleaned))
    if summary.failure_count > 0:
        table.add_row("[red]Failed deletions[/red]", str(summary.failure_count))

    target.print(table)

    if summary.failed_deletions:
        target.print()
        target.print(
            Panel(
                "\n".join(str(p) for p in summary.failed_deletions),
                title="[bold red]Could not delete[/bold red]",
                border_style="red",
            )
        )


def show_defaults(defaults: dict, target: Console = console) -> None:
    """Display the default classification and command settings."""
    target.print("[bold]Default Settings[/bold]\n")

    target.print("[green]Trash directories (deleted):[/green]")
    for name in defaults["trash_names"]:
        target.print(f"  • {name}")
    target.print()

    target.print("[yellow]Skipped directories (not scanned):[/yellow]")
    for name in defaults["skip_names"]:
        target.print(f"  • {name}")
    target.print(f"  • anything starting with [bold]{defaults['hidden_prefix']}[/bold]")
    target.print()

    target.print(f"[cyan]Project marker:[/cyan] {defaults['project_marker']}")
    target.print(f"[cyan]Clean command:[/cyan] {defaults['clean_command']}")
    target.print(f"[cyan]Fetch command:[/cyan] {defaults['fetch_command']}")
    target.print(
        f"[cyan]Parallelism:[/cyan] {defaults['max_delete_parallel']} deletions, "
        f"{defaults['max_parallel']} projects"
    )


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message, console=console)
