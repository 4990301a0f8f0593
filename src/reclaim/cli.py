"""CLI interface for reclaim."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.logging import RichHandler

from reclaim import __version__
from reclaim.config import DEFAULT_MAX_DELETE_PARALLEL, DEFAULT_MAX_PARALLEL, describe_defaults
from reclaim.display import (
    ConsoleReporter,
    confirm_action,
    console,
    show_defaults,
    show_dry_run_banner,
    show_run_summary,
    show_scan_report,
)
from reclaim.errors import ReclaimError, RunAborted
from reclaim.models import build_config
from reclaim.runner import run, scan as scan_workspace

app = typer.Typer(
    name="reclaim",
    help="Reclaim disk space from build artifacts and refresh project dependencies",
    add_completion=False,
)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"reclaim version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-V", count=True, help="Increase log output (-V info, -VV debug)."
    ),
) -> None:
    """reclaim - delete build artifacts and refresh projects across a workspace."""
    _setup_logging(verbose)


@app.command()
def clean(
    root: Path = typer.Argument(..., help="Workspace directory to scan"),
    parallel: int = typer.Option(
        DEFAULT_MAX_PARALLEL, "--parallel", "-p", help="Projects maintained at once"
    ),
    delete_parallel: int = typer.Option(
        DEFAULT_MAX_DELETE_PARALLEL, "--delete-parallel", "-d", help="Directories deleted at once"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Delete without asking"),
    dry_run: bool = typer.Option(False, "--dry-run", help="List what would happen, change nothing"),
    marker: Optional[str] = typer.Option(None, "--marker", help="Project marker file name"),
    trash: Optional[List[str]] = typer.Option(None, "--trash", help="Extra trash directory name"),
    skip: Optional[List[str]] = typer.Option(None, "--skip", help="Extra directory name to skip"),
    only_trash: Optional[List[str]] = typer.Option(
        None, "--only-trash", help="Use only these trash names instead of the defaults"
    ),
    no_projects: bool = typer.Option(
        False, "--no-projects", help="Skip the project maintenance phase"
    ),
) -> None:
    """Delete build artifacts, then clean and refetch every project."""
    try:
        config = build_config(
            root,
            extra_trash=trash or (),
            extra_skip=skip or (),
            only_trash=only_trash or None,
            project_marker=marker,
            max_parallel=parallel,
            max_delete_parallel=delete_parallel,
            force=force,
            dry_run=dry_run,
            run_projects=not no_projects,
        )
    except ReclaimError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if dry_run:
        show_dry_run_banner()

    reporter = ConsoleReporter(label_budget=config.active_label_budget)
    try:
        summary = run(config, reporter=reporter, confirm=confirm_action)
    except RunAborted:
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)
    except ReclaimError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if summary.nothing_found:
        console.print(
            f"[yellow]Nothing to reclaim.[/yellow] "
            f"[dim]Scanned {summary.scanned_count} directories.[/dim]"
        )
        raise typer.Exit(0)

    show_run_summary(summary)


@app.command()
def scan(
    root: Path = typer.Argument(..., help="Workspace directory to scan"),
    marker: Optional[str] = typer.Option(None, "--marker", help="Project marker file name"),
    trash: Optional[List[str]] = typer.Option(None, "--trash", help="Extra trash directory name"),
    skip: Optional[List[str]] = typer.Option(None, "--skip", help="Extra directory name to skip"),
    only_trash: Optional[List[str]] = typer.Option(
        None, "--only-trash", help="Use only these trash names instead of the defaults"
    ),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Scan only: list trash directories and projects without touching them."""
    try:
        config = build_config(
            root,
            extra_trash=trash or (),
            extra_skip=skip or (),
            only_trash=only_trash or None,
            project_marker=marker,
        )
        reporter = None if as_json else ConsoleReporter(label_budget=config.active_label_budget)
        report = scan_workspace(config, reporter)
    except ReclaimError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if as_json:
        data = {
            "root": str(report.root),
            "scanned_count": report.scanned_count,
            "trash_dirs": [str(p) for p in report.trash_dirs],
            "projects": [str(p) for p in report.projects],
        }
        typer.echo(json.dumps(data, indent=2))
        return

    if report.is_empty:
        console.print("[yellow]Nothing to reclaim.[/yellow]")
    show_scan_report(report)


@app.command()
def defaults() -> None:
    """Show the default trash names, skip names and project commands."""
    show_defaults(describe_defaults())


if __name__ == "__main__":
    app()
