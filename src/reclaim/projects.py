"""Parallel maintenance commands for discovered projects."""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from reclaim.config import DEFAULT_CLEAN_COMMAND, DEFAULT_FETCH_COMMAND
from reclaim.job_pool import JobPool
from reclaim.models import CleanResult, ProjectOutcome
from reclaim.progress import Reporter, path_label

log = logging.getLogger(__name__)

PHASE = "clean"

# Seconds a single project command may run
COMMAND_TIMEOUT = 900


def run_best_effort(command: Sequence[str], cwd: Path) -> None:
    """
    Run a command in ``cwd``, discarding output and exit status.

    Args:
        command: Executable and arguments
        cwd: Working directory
    """
    # flutter is a .bat wrapper on Windows
    executable = shutil.which(command[0]) or command[0]
    try:
        result = subprocess.run(
            [executable, *command[1:]],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=COMMAND_TIMEOUT,
        )
    except subprocess.TimeoutExpired:
        log.debug("%s timed out in %s", " ".join(command), cwd)
        return
    except OSError as e:
        log.debug("%s could not run in %s: %s", " ".join(command), cwd, e)
        return

    if result.returncode != 0:
        log.debug("%s exited %d in %s", " ".join(command), result.returncode, cwd)


class ProjectCommands:
    """The clean and fetch-dependencies commands run in each project."""

    def __init__(
        self,
        clean_command: Sequence[str] = DEFAULT_CLEAN_COMMAND,
        fetch_command: Sequence[str] = DEFAULT_FETCH_COMMAND,
    ) -> None:
        self.clean_command = tuple(clean_command)
        self.fetch_command = tuple(fetch_command)

    def clean(self, project: Path) -> None:
        run_best_effort(self.clean_command, project)

    def fetch_deps(self, project: Path) -> None:
        run_best_effort(self.fetch_command, project)


def maintain_project(project: Path, commands: ProjectCommands) -> CleanResult:
    """Run clean then fetch-dependencies in one project."""
    commands.clean(project)
    commands.fetch_deps(project)
    return CleanResult(path=project)


class ProjectTaskCoordinator:
    """
    Runs the maintenance sequence over every project through a JobPool.

    Command failures are not tracked; every finished project counts as
    cleaned.
    """

    def __init__(
        self,
        max_parallel: int = 6,
        dry_run: bool = False,
        commands: ProjectCommands | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self.max_parallel = max_parallel
        self.dry_run = dry_run
        self.commands = commands or ProjectCommands()
        self.reporter = reporter or Reporter()

    def run(self, projects: Sequence[Path]) -> ProjectOutcome:
        """Run the maintenance sequence in every project."""
        outcome = ProjectOutcome(dry_run=self.dry_run)
        if not projects:
            return outcome

        if self.dry_run:
            self.reporter.show_paths("Would maintain", projects)
            return outcome

        def fold(project: Path, result: Optional[CleanResult]) -> None:
            outcome.projects_cleaned += 1

        self.reporter.phase_started(PHASE, len(projects))
        pool = JobPool(
            worker=lambda project: maintain_project(project, self.commands),
            fold=fold,
            max_concurrent=self.max_parallel,
            total=len(projects),
            phase=PHASE,
            label=path_label,
            on_progress=self.reporter.pool_progress,
        )
        with pool:
            for project in projects:
                pool.submit(project)
        self.reporter.phase_finished(PHASE)

        log.info("Maintained %d projects", outcome.projects_cleaned)
        return outcome
