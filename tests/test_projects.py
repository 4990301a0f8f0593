"""Tests for the project maintenance phase."""

import subprocess
import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

from reclaim.projects import (
    COMMAND_TIMEOUT,
    ProjectCommands,
    ProjectTaskCoordinator,
    maintain_project,
    run_best_effort,
)
from reclaim.progress import Reporter

PROJECTS = [Path("/w/app"), Path("/w/pkg/core"), Path("/w/tools")]


class FakeCommands(ProjectCommands):
    def __init__(self):
        super().__init__()
        self.calls = []
        self._lock = threading.Lock()

    def clean(self, project):
        with self._lock:
            self.calls.append(("clean", project))

    def fetch_deps(self, project):
        with self._lock:
            self.calls.append(("fetch", project))


class TestRunBestEffort:
    @patch("reclaim.projects.subprocess.run")
    def test_runs_in_project_directory(self, mock_run, tmp_path):
        mock_run.return_value = MagicMock(returncode=0)

        run_best_effort(["flutter", "clean"], tmp_path)

        args, kwargs = mock_run.call_args
        assert args[0][1:] == ["clean"]
        assert kwargs["cwd"] == tmp_path
        assert kwargs["capture_output"] is True

    def test_missing_executable_is_ignored(self, tmp_path):
        run_best_effort(["definitely-not-a-real-command-7f3a"], tmp_path)

    @patch("reclaim.projects.subprocess.run")
    def test_nonzero_exit_is_ignored(self, mock_run, tmp_path):
        mock_run.return_value = MagicMock(returncode=1)
        run_best_effort(["flutter", "pub", "get"], tmp_path)

    @patch(
        "reclaim.projects.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="flutter", timeout=1),
    )
    def test_timeout_is_ignored(self, mock_run, tmp_path):
        run_best_effort(["flutter", "clean"], tmp_path)

    @patch("reclaim.projects.subprocess.run")
    def test_commands_are_time_bounded(self, mock_run, tmp_path):
        mock_run.return_value = MagicMock(returncode=0)
        run_best_effort(["flutter", "clean"], tmp_path)
        assert mock_run.call_args[1]["timeout"] == COMMAND_TIMEOUT


class TestProjectCommands:
    @patch("reclaim.projects.run_best_effort")
    def test_default_commands(self, mock_run):
        commands = ProjectCommands()
        commands.clean(PROJECTS[0])
        commands.fetch_deps(PROJECTS[0])

        assert mock_run.call_args_list[0][0] == (("flutter", "clean"), PROJECTS[0])
        assert mock_run.call_args_list[1][0] == (("flutter", "pub", "get"), PROJECTS[0])

    @patch("reclaim.projects.run_best_effort")
    def test_custom_commands(self, mock_run):
        commands = ProjectCommands(clean_command=["make", "clean"], fetch_command=["npm", "ci"])
        commands.fetch_deps(PROJECTS[1])
        assert mock_run.call_args[0] == (("npm", "ci"), PROJECTS[1])


class TestMaintainProject:
    def test_clean_then_fetch(self):
        commands = FakeCommands()
        result = maintain_project(PROJECTS[0], commands)

        assert commands.calls == [("clean", PROJECTS[0]), ("fetch", PROJECTS[0])]
        assert result.path == PROJECTS[0]


class TestProjectTaskCoordinator:
    def test_runs_every_project(self):
        commands = FakeCommands()

        outcome = ProjectTaskCoordinator(max_parallel=2, commands=commands).run(PROJECTS)

        assert outcome.projects_cleaned == 3
        for project in PROJECTS:
            calls = [c for c in commands.calls if c[1] == project]
            assert calls == [("clean", project), ("fetch", project)]

    def test_crashed_worker_still_counts(self):
        """Project failures are not tracked; every finished item is counted."""
        commands = FakeCommands()
        commands.clean = MagicMock(side_effect=RuntimeError("boom"))

        outcome = ProjectTaskCoordinator(commands=commands).run(PROJECTS)
        assert outcome.projects_cleaned == 3

    def test_dry_run_runs_nothing(self):
        commands = FakeCommands()
        reporter = MagicMock(spec=Reporter)

        outcome = ProjectTaskCoordinator(dry_run=True, commands=commands, reporter=reporter).run(
            PROJECTS
        )

        assert commands.calls == []
        assert outcome.projects_cleaned == 0
        assert outcome.dry_run
        reporter.show_paths.assert_called_once_with("Would maintain", PROJECTS)

    def test_empty_list(self):
        commands = FakeCommands()
        outcome = ProjectTaskCoordinator(commands=commands).run([])
        assert outcome.projects_cleaned == 0
        assert commands.calls == []

    def test_reports_clean_phase(self):
        reporter = MagicMock(spec=Reporter)
        ProjectTaskCoordinator(commands=FakeCommands(), reporter=reporter).run(PROJECTS)

        reporter.phase_started.assert_called_once_with("clean", 3)
        reporter.phase_finished.assert_called_once_with("clean")
        last = reporter.pool_progress.call_args[0][0]
        assert last.completed == 3
