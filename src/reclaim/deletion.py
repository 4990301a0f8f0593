"""Parallel deletion of trash directories."""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence

from reclaim.errors import RunAborted
from reclaim.job_pool import JobPool
from reclaim.models import DeleteResult, DeletionOutcome
from reclaim.progress import Reporter, format_size, path_label

log = logging.getLogger(__name__)

PHASE = "delete"

# Seconds before the forced remove fallback is given up on
FORCE_DELETE_TIMEOUT = 600


def get_directory_size(path: Path) -> int:
    """
    Total size of all files under a directory.

    Unreadable entries are skipped; this never raises.

    Args:
        path: Directory to measure

    Returns:
        Size in bytes
    """
    total_size = 0
    stack = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                        elif entry.is_dir(follow_symlinks=False):
                            stack.append(Path(entry.path))
                    except (PermissionError, OSError):
                        continue
        except (PermissionError, OSError):
            continue
    return total_size


class FileSystemOps:
    """Filesystem operations used by deletion workers."""

    def size_of(self, path: Path) -> int:
        return get_directory_size(path)

    def delete(self, path: Path) -> Optional[str]:
        """Remove a directory tree. Returns an error message, or None on success."""
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            return None
        except PermissionError as e:
            return f"Permission denied: {e}"
        except OSError as e:
            return f"OS error: {e}"
        return None

    def force_delete(self, path: Path) -> None:
        """Last resort: ask the operating system to remove the tree."""
        if os.name == "nt":
            command = ["cmd", "/c", "rmdir", "/s", "/q", str(path)]
        else:
            command = ["rm", "-rf", str(path)]
        try:
            subprocess.run(command, capture_output=True, timeout=FORCE_DELETE_TIMEOUT)
        except (subprocess.TimeoutExpired, OSError) as e:
            log.debug("Forced remove of %s failed: %s", path, e)

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)


def delete_trash_dir(path: Path, fs: FileSystemOps) -> DeleteResult:
    """
    Measure and delete one trash directory.

    The primary delete is tried first; if it reports an error the forced
    remove runs. Success is decided only by whether the path still exists.

    Args:
        path: Directory to delete
        fs: Filesystem operations

    Returns:
        DeleteResult with the size measured before deletion
    """
    size = fs.size_of(path)

    error = fs.delete(path)
    used_fallback = False
    if error is not None:
        log.debug("Primary delete of %s failed (%s), forcing", path, error)
        fs.force_delete(path)
        used_fallback = True

    return DeleteResult(
        path=path,
        succeeded=not fs.exists(path),
        size_bytes=size,
        used_fallback=used_fallback,
        error=error,
    )


class DeletionCoordinator:
    """
    Deletes a list of trash directories through a JobPool.

    Args:
        max_parallel: Concurrent deletions
        dry_run: List the directories instead of deleting them
        force: Skip the confirmation prompt
        confirm: Asks the user a yes/no question
        fs: Filesystem operations (replaced by fakes in tests)
        reporter: Receives progress updates
    """

    def __init__(
        self,
        max_parallel: int = 15,
        dry_run: bool = False,
        force: bool = False,
        confirm: Callable[[str], bool] | None = None,
        fs: FileSystemOps | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self.max_parallel = max_parallel
        self.dry_run = dry_run
        self.force = force
        self.confirm = confirm
        self.fs = fs or FileSystemOps()
        self.reporter = reporter or Reporter()

    def run(self, trash_dirs: Sequence[Path]) -> DeletionOutcome:
        """
        Delete every directory in ``trash_dirs``.

        Per-path failures never raise; they are collected in
        ``failed_deletions``.

        Raises:
            RunAborted: If the user declines the confirmation
        """
        outcome = DeletionOutcome(dry_run=self.dry_run)
        if not trash_dirs:
            return outcome

        if self.dry_run:
            self.reporter.show_paths("Would delete", trash_dirs)
            return outcome

        if not self.force:
            question = f"Delete {len(trash_dirs)} directories?"
            if self.confirm is None or not self.confirm(question):
                raise RunAborted("Deletion declined")

        def fold(path: Path, result: Optional[DeleteResult]) -> None:
            outcome.completed += 1
            if result is None:
                outcome.failed_deletions.append(path)
                return
            outcome.total_freed_bytes += result.size_bytes
            if result.succeeded:
                outcome.reclaimed_bytes += result.size_bytes
            else:
                log.warning("Could not delete %s", result.path)
                outcome.failed_deletions.append(result.path)

        self.reporter.phase_started(PHASE, len(trash_dirs))
        pool = JobPool(
            worker=lambda path: delete_trash_dir(path, self.fs),
            fold=fold,
            max_concurrent=self.max_parallel,
            total=len(trash_dirs),
            phase=PHASE,
            label=path_label,
            on_progress=self.reporter.pool_progress,
        )
        with pool:
            for path in trash_dirs:
                pool.submit(path)
        self.reporter.phase_finished(PHASE)

        log.info(
            "Deleted %d/%d directories, %s processed",
            outcome.completed - len(outcome.failed_deletions),
            len(trash_dirs),
            format_size(outcome.total_freed_bytes),
        )
        return outcome
