"""Single-pass directory walk that finds trash directories and projects.

Each directory below the root is classified before any recursion:

1. its name is a trash name: recorded for deletion, not descended into
2. its name is a skip name: ignored, not descended into
3. its name starts with the hidden prefix: ignored, not descended into
4. otherwise: descended into

Every descended directory (the root included) is also checked for the
project marker file. Finding a project does not stop the walk, so nested
trash and nested projects are still discovered.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from reclaim.models import ReclaimConfig, ScanProgress, ScanReport

log = logging.getLogger(__name__)

ScanProgressCallback = Callable[[ScanProgress], None]


class Classification(str, Enum):
    """How the walk treats a non-root directory."""

    TRASH = "trash"
    SKIPPED = "skipped"
    HIDDEN = "hidden"
    DESCEND = "descend"


def classify(name: str, config: ReclaimConfig) -> Classification:
    """
    Classify a directory by name. First matching rule wins.

    Args:
        name: Directory name (not a path)
        config: Run configuration with the name sets

    Returns:
        Classification for the directory
    """
    if name in config.trash_names:
        return Classification.TRASH
    if name in config.skip_names:
        return Classification.SKIPPED
    if config.hidden_prefix and name.startswith(config.hidden_prefix):
        return Classification.HIDDEN
    return Classification.DESCEND


@dataclass
class _WalkState:
    """Counters and lists owned by a single walk."""

    root: Path
    config: ReclaimConfig
    progress_callback: ScanProgressCallback | None = None
    projects: list[Path] = field(default_factory=list)
    trash_dirs: list[Path] = field(default_factory=list)
    scanned: int = 0

    def visited(self, path: Path) -> None:
        self.scanned += 1
        if self.progress_callback and self.scanned % self.config.progress_every == 0:
            self.progress_callback(
                ScanProgress(
                    scanned=self.scanned,
                    trash_found=len(self.trash_dirs),
                    projects_found=len(self.projects),
                    current=os.path.relpath(path, self.root),
                )
            )


def _list_subdirectories(path: Path) -> list[os.DirEntry]:
    """Return child directories sorted by name; symlinks are not followed."""
    children = []
    with os.scandir(path) as entries:
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    children.append(entry)
            except OSError:
                continue
    children.sort(key=lambda e: e.name)
    return children


def _has_marker(path: Path, marker: str) -> bool:
    try:
        return (path / marker).is_file()
    except OSError:
        return False


def _walk(root: Path, state: _WalkState) -> None:
    # Children are pushed in reverse name order so they pop in name order
    stack: list[tuple[Path, Classification]] = [(root, Classification.DESCEND)]

    while stack:
        path, kind = stack.pop()

        if kind is Classification.TRASH:
            state.trash_dirs.append(path)
            continue

        state.visited(path)

        if _has_marker(path, state.config.project_marker):
            state.projects.append(path)

        try:
            children = _list_subdirectories(path)
        except (PermissionError, OSError) as e:
            # Unreadable directories are leaves
            log.debug("Cannot list %s: %s", path, e)
            continue

        for entry in reversed(children):
            child_kind = classify(entry.name, state.config)
            if child_kind in (Classification.TRASH, Classification.DESCEND):
                stack.append((Path(entry.path), child_kind))


def scan_tree(
    config: ReclaimConfig,
    progress_callback: ScanProgressCallback | None = None,
) -> ScanReport:
    """
    Walk the tree under ``config.root`` once.

    The root itself is always descended into, whatever its name.

    Args:
        config: Run configuration (root, name sets, project marker)
        progress_callback: Optional callback receiving a ScanProgress every
            ``config.progress_every`` visited directories

    Returns:
        ScanReport with projects and trash directories in walk order
    """
    root = Path(os.path.abspath(config.root))
    state = _WalkState(root=root, config=config, progress_callback=progress_callback)

    started = time.monotonic()
    _walk(root, state)
    elapsed = time.monotonic() - started

    log.info(
        "Scanned %d directories under %s: %d trash, %d projects",
        state.scanned,
        root,
        len(state.trash_dirs),
        len(state.projects),
    )

    return ScanReport(
        root=root,
        projects=tuple(state.projects),
        trash_dirs=tuple(state.trash_dirs),
        scanned_count=state.scanned,
        elapsed_seconds=elapsed,
    )
