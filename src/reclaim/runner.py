"""Run orchestration for reclaim: scan, then delete, then maintain projects."""

import logging
import time
from pathlib import Path
from typing import Callable

from reclaim.deletion import DeletionCoordinator, FileSystemOps
from reclaim.errors import ConfigurationError
from reclaim.models import ReclaimConfig, RunSummary, ScanReport
from reclaim.progress import Reporter
from reclaim.projects import ProjectCommands, ProjectTaskCoordinator
from reclaim.tree_scanner import scan_tree

log = logging.getLogger(__name__)


def validate_root(root: Path) -> Path:
    """
    Check that the root exists and is a directory.

    Raises:
        ConfigurationError: If it is missing or not a directory
    """
    if not root.exists():
        raise ConfigurationError(f"Root path does not exist: {root}")
    if not root.is_dir():
        raise ConfigurationError(f"Root path is not a directory: {root}")
    return root.resolve()


def scan(config: ReclaimConfig, reporter: Reporter | None = None) -> ScanReport:
    """Validate the root and walk the tree."""
    reporter = reporter or Reporter()
    validate_root(config.root)

    reporter.phase_started("scan", 0)
    report = scan_tree(config, progress_callback=reporter.scan_progress)
    reporter.phase_finished("scan")
    return report


def run(
    config: ReclaimConfig,
    reporter: Reporter | None = None,
    confirm: Callable[[str], bool] | None = None,
    fs: FileSystemOps | None = None,
    commands: ProjectCommands | None = None,
) -> RunSummary:
    """
    Perform a full run.

    The project list is captured by the scan before anything is deleted, and
    the deletion phase drains completely before project maintenance starts.

    Args:
        config: Run configuration
        reporter: Receives progress for all three phases
        confirm: Yes/no prompt used before deleting (unless ``config.force``)
        fs: Filesystem operations for the deletion phase
        commands: Project commands for the maintenance phase

    Returns:
        RunSummary; ``nothing_found`` is set when the scan found no work

    Raises:
        ConfigurationError: If the root is invalid
        RunAborted: If the user declines deletion
        ExecutionEnvironmentError: If a worker pool cannot start
    """
    reporter = reporter or Reporter()
    started = time.monotonic()

    report = scan(config, reporter)
    summary = RunSummary(
        root=report.root,
        scanned_count=report.scanned_count,
        trash_found=len(report.trash_dirs),
        projects_found=len(report.projects),
        dry_run=config.dry_run,
    )

    if report.is_empty:
        log.info("Nothing to reclaim under %s", report.root)
        summary.nothing_found = True
        summary.elapsed_seconds = time.monotonic() - started
        return summary

    deletion = DeletionCoordinator(
        max_parallel=config.max_delete_parallel,
        dry_run=config.dry_run,
        force=config.force,
        confirm=confirm,
        fs=fs,
        reporter=reporter,
    ).run(report.trash_dirs)

    summary.total_freed_bytes = deletion.total_freed_bytes
    summary.reclaimed_bytes = deletion.reclaimed_bytes
    summary.failed_deletions = list(deletion.failed_deletions)

    if config.run_projects:
        commands = commands or ProjectCommands(config.clean_command, config.fetch_command)
        projects = ProjectTaskCoordinator(
            max_parallel=config.max_parallel,
            dry_run=config.dry_run,
            commands=commands,
            reporter=reporter,
        ).run(report.projects)
        summary.projects_cleaned = projects.projects_cleaned

    summary.elapsed_seconds = time.monotonic() - started
    return summary
