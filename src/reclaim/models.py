"""Data models for reclaim."""

from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from reclaim.config import (
    DEFAULT_ACTIVE_LABEL_BUDGET,
    DEFAULT_CLEAN_COMMAND,
    DEFAULT_FETCH_COMMAND,
    DEFAULT_HIDDEN_PREFIX,
    DEFAULT_MAX_DELETE_PARALLEL,
    DEFAULT_MAX_PARALLEL,
    DEFAULT_PROGRESS_EVERY,
    DEFAULT_PROJECT_MARKER,
    DEFAULT_SKIP_NAMES,
    DEFAULT_TRASH_NAMES,
)
from reclaim.errors import ConfigurationError


class ReclaimConfig(BaseModel):
    """Settings for a single reclaim run."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(..., description="Directory tree to scan")
    trash_names: frozenset[str] = Field(
        default=DEFAULT_TRASH_NAMES,
        description="Directory names that are deleted wholesale",
    )
    skip_names: frozenset[str] = Field(
        default=DEFAULT_SKIP_NAMES,
        description="Directory names that are never descended into",
    )
    hidden_prefix: str = Field(
        default=DEFAULT_HIDDEN_PREFIX,
        description="Name prefix marking hidden directories (not descended into)",
    )
    project_marker: str = Field(
        default=DEFAULT_PROJECT_MARKER,
        description="File whose presence marks a project directory",
    )
    max_parallel: int = Field(
        default=DEFAULT_MAX_PARALLEL, ge=1, description="Concurrent project tasks"
    )
    max_delete_parallel: int = Field(
        default=DEFAULT_MAX_DELETE_PARALLEL, ge=1, description="Concurrent deletions"
    )
    force: bool = Field(False, description="Skip the deletion confirmation prompt")
    dry_run: bool = Field(False, description="List what would happen, change nothing")
    run_projects: bool = Field(True, description="Run the project maintenance phase")
    clean_command: tuple[str, ...] = Field(
        default=DEFAULT_CLEAN_COMMAND, description="Command run first in each project"
    )
    fetch_command: tuple[str, ...] = Field(
        default=DEFAULT_FETCH_COMMAND, description="Command run second in each project"
    )
    progress_every: int = Field(
        default=DEFAULT_PROGRESS_EVERY, ge=1, description="Scan progress interval (directories)"
    )
    active_label_budget: int = Field(
        default=DEFAULT_ACTIVE_LABEL_BUDGET,
        ge=1,
        description="Character budget for the active-items status text",
    )


def build_config(
    root: Path,
    extra_trash: Iterable[str] = (),
    extra_skip: Iterable[str] = (),
    only_trash: Optional[Iterable[str]] = None,
    **overrides,
) -> ReclaimConfig:
    """
    Merge command-line overrides onto the defaults.

    Args:
        root: Directory tree to scan
        extra_trash: Names added to the default trash set
        extra_skip: Names added to the default skip set
        only_trash: If given, replaces the trash set entirely
        **overrides: Any other ReclaimConfig field

    Returns:
        ReclaimConfig

    Raises:
        ConfigurationError: If a value fails validation
    """
    trash = frozenset(only_trash) if only_trash is not None else DEFAULT_TRASH_NAMES
    trash = trash | frozenset(extra_trash)
    skip = DEFAULT_SKIP_NAMES | frozenset(extra_skip)

    # Trash and skip sets stay disjoint
    skip = skip - trash

    settings = {k: v for k, v in overrides.items() if v is not None}
    try:
        return ReclaimConfig(root=root, trash_names=trash, skip_names=skip, **settings)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


class ScanReport(BaseModel):
    """Outcome of walking the tree once."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(..., description="Root that was scanned")
    projects: tuple[Path, ...] = Field(default=(), description="Project directories, walk order")
    trash_dirs: tuple[Path, ...] = Field(default=(), description="Trash directories, walk order")
    scanned_count: int = Field(0, description="Directories visited")
    elapsed_seconds: float = Field(0.0, description="Wall time of the walk")

    @property
    def is_empty(self) -> bool:
        """True when nothing was found to delete or maintain."""
        return not self.projects and not self.trash_dirs


class ScanProgress(BaseModel):
    """Snapshot emitted periodically during the walk."""

    scanned: int = Field(..., description="Directories visited so far")
    trash_found: int = Field(..., description="Trash directories found so far")
    projects_found: int = Field(..., description="Projects found so far")
    current: str = Field("", description="Current directory, relative to root")


class DeleteResult(BaseModel):
    """Result of deleting one trash directory."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Directory that was deleted")
    succeeded: bool = Field(..., description="Whether the path is gone")
    size_bytes: int = Field(0, ge=0, description="Occupied size measured before deletion")
    used_fallback: bool = Field(False, description="Whether the forced remove was needed")
    error: Optional[str] = Field(None, description="Error message from the primary delete")


class CleanResult(BaseModel):
    """Result of the maintenance sequence for one project."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Project directory")


class PoolProgress(BaseModel):
    """Counters of a job pool at one transition."""

    phase: str = Field(..., description="Phase name, e.g. 'delete' or 'clean'")
    total: int = Field(..., description="Items the phase will submit")
    submitted: int = Field(0, description="Items handed to a worker so far")
    completed: int = Field(0, description="Items whose result has been folded")
    active: list[str] = Field(default_factory=list, description="Labels of in-flight items")
    elapsed_seconds: float = Field(0.0, description="Time since the pool started")
    eta_seconds: float = Field(0.0, description="Estimated time remaining")

    @property
    def percent(self) -> float:
        """Percent of items completed."""
        return (self.completed / self.total) * 100 if self.total > 0 else 0.0


class DeletionOutcome(BaseModel):
    """Aggregates of a deletion phase."""

    total_freed_bytes: int = Field(
        0, description="Occupied size of every processed entry, failures included"
    )
    reclaimed_bytes: int = Field(0, description="Size of entries that were actually removed")
    failed_deletions: list[Path] = Field(default_factory=list, description="Paths still present")
    completed: int = Field(0, description="Entries processed")
    dry_run: bool = Field(False, description="Whether this was a dry run")


class ProjectOutcome(BaseModel):
    """Aggregates of a project maintenance phase."""

    projects_cleaned: int = Field(0, description="Projects whose sequence finished")
    dry_run: bool = Field(False, description="Whether this was a dry run")


class RunSummary(BaseModel):
    """Final summary of a whole run."""

    root: Path
    scanned_count: int = 0
    trash_found: int = 0
    projects_found: int = 0
    total_freed_bytes: int = 0
    reclaimed_bytes: int = 0
    projects_cleaned: int = 0
    failed_deletions: list[Path] = Field(default_factory=list)
    elapsed_seconds: float = 0.0
    dry_run: bool = False
    nothing_found: bool = False

    @property
    def failure_count(self) -> int:
        """Number of paths that could not be deleted."""
        return len(self.failed_deletions)
