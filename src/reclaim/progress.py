"""Progress arithmetic and status formatting for reclaim.

Everything here is a pure function of counters. Rendering lives in
``reclaim.display``.
"""

from pathlib import Path
from typing import Sequence

from reclaim.models import PoolProgress, ScanProgress

ELLIPSIS = "..."


def compute_eta(total: int, completed: int, elapsed_seconds: float) -> float:
    """
    Estimate remaining time from the average time per completed item.

    Args:
        total: Items in the phase
        completed: Items finished so far
        elapsed_seconds: Time since the phase started

    Returns:
        Seconds remaining, 0 when nothing has completed yet
    """
    if completed <= 0:
        return 0.0
    remaining = max(total - completed, 0)
    return remaining * (elapsed_seconds / completed)


def percent_complete(completed: int, total: int) -> float:
    """Percent of items completed (0 for an empty phase)."""
    return (completed / total) * 100 if total > 0 else 0.0


def format_size(size_bytes: int) -> str:
    """Format bytes using the largest binary unit that keeps the value >= 1."""
    if size_bytes < 0:
        return f"-{format_size(-size_bytes)}"

    units = ("B", "KB", "MB", "GB", "TB", "PB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if value < 1024:
            return f"{int(value)} B" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} {units[-1]}"


def format_duration(seconds: float) -> str:
    """Format seconds as H:MM:SS, or M:SS under an hour."""
    total = int(round(max(seconds, 0)))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def truncate_items(items: Sequence[str], budget: int) -> str:
    """
    Comma-join items, cutting the text off with an ellipsis past the budget.

    Args:
        items: Labels to join
        budget: Maximum characters before truncation

    Returns:
        Joined text, at most ``budget`` characters plus the ellipsis
    """
    text = ", ".join(items)
    if len(text) <= budget:
        return text
    return text[:budget].rstrip(", ") + ELLIPSIS


def path_label(path: Path) -> str:
    """Short label for an in-flight item: parent name and directory name."""
    parent = path.parent.name
    return f"{parent}/{path.name}" if parent else path.name


def format_pool_status(progress: PoolProgress, budget: int = 100) -> str:
    """
    One-line status for a job pool.

    Example:
        ``queued 5/12 | done 3/12 (25%) | ETA 0:09 | app/build, web/node_modules``
    """
    parts = [
        f"queued {progress.submitted}/{progress.total}",
        f"done {progress.completed}/{progress.total} "
        f"({percent_complete(progress.completed, progress.total):.0f}%)",
        f"ETA {format_duration(progress.eta_seconds)}",
    ]
    active = truncate_items(progress.active, budget)
    if active:
        parts.append(active)
    return " | ".join(parts)


def format_scan_status(progress: ScanProgress) -> str:
    """One-line status for the scan phase."""
    return (
        f"scanned {progress.scanned} | trash {progress.trash_found} | "
        f"projects {progress.projects_found} | {progress.current}"
    )


class Reporter:
    """
    Receives progress from the three phases.

    The base class ignores everything; ``reclaim.display.ConsoleReporter``
    renders to the terminal.
    """

    def scan_progress(self, progress: ScanProgress) -> None:
        pass

    def phase_started(self, phase: str, total: int) -> None:
        pass

    def pool_progress(self, progress: PoolProgress) -> None:
        pass

    def phase_finished(self, phase: str) -> None:
        pass

    def show_paths(self, title: str, paths: Sequence[Path]) -> None:
        pass
