"""Tests for CLI interface."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from reclaim.cli import app

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path):
    app_dir = tmp_path / "app"
    (app_dir / "build").mkdir(parents=True)
    (app_dir / "build" / "out.bin").write_bytes(b"x" * 64)
    (app_dir / "pubspec.yaml").write_text("name: app")
    return tmp_path


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "reclaim version" in result.stdout

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "reclaim version" in result.stdout


class TestHelp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "clean" in result.stdout
        assert "scan" in result.stdout
        assert "defaults" in result.stdout

    def test_clean_help(self):
        result = runner.invoke(app, ["clean", "--help"])
        assert result.exit_code == 0
        assert "--dry-run" in result.stdout
        assert "--force" in result.stdout


class TestDefaults:
    def test_defaults_command(self):
        result = runner.invoke(app, ["defaults"])
        assert result.exit_code == 0
        assert "Default Settings" in result.stdout
        assert "node_modules" in result.stdout


class TestScan:
    def test_scan_json(self, workspace):
        result = runner.invoke(app, ["scan", str(workspace), "--json"])
        assert result.exit_code == 0

        data = json.loads(result.stdout)
        assert data["trash_dirs"] == [str(workspace / "app" / "build")]
        assert data["projects"] == [str(workspace / "app")]
        assert (workspace / "app" / "build").exists()

    def test_scan_missing_root(self, tmp_path):
        result = runner.invoke(app, ["scan", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "does not exist" in result.stdout

    def test_scan_extra_trash(self, tmp_path):
        (tmp_path / "svc" / "target").mkdir(parents=True)
        result = runner.invoke(app, ["scan", str(tmp_path), "--trash", "target", "--json"])
        assert json.loads(result.stdout)["trash_dirs"] == [str(tmp_path / "svc" / "target")]

    def test_scan_only_trash(self, workspace):
        (workspace / "web" / "node_modules").mkdir(parents=True)
        result = runner.invoke(
            app, ["scan", str(workspace), "--only-trash", "node_modules", "--json"]
        )
        data = json.loads(result.stdout)
        assert data["trash_dirs"] == [str(workspace / "web" / "node_modules")]
        assert data["projects"] == [str(workspace / "app")]


class TestClean:
    def test_missing_root(self, tmp_path):
        result = runner.invoke(app, ["clean", str(tmp_path / "missing"), "--force"])
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_invalid_parallelism(self, workspace):
        result = runner.invoke(app, ["clean", str(workspace), "--parallel", "0"])
        assert result.exit_code == 1
        assert (workspace / "app" / "build").exists()

    def test_nothing_to_reclaim(self, tmp_path):
        (tmp_path / "notes").mkdir()
        result = runner.invoke(app, ["clean", str(tmp_path)])
        assert result.exit_code == 0
        assert "Nothing to reclaim" in result.stdout

    def test_dry_run(self, workspace):
        result = runner.invoke(app, ["clean", str(workspace), "--dry-run"])
        assert result.exit_code == 0
        assert "DRY RUN" in result.stdout
        assert "Would delete" in result.stdout
        assert (workspace / "app" / "build").exists()

    @patch("reclaim.cli.confirm_action", return_value=False)
    def test_cancelled(self, mock_confirm, workspace):
        result = runner.invoke(app, ["clean", str(workspace)])
        assert result.exit_code == 0
        assert "Cancelled" in result.stdout
        assert (workspace / "app" / "build").exists()

    def test_force_deletes(self, workspace):
        result = runner.invoke(app, ["clean", str(workspace), "--force", "--no-projects"])
        assert result.exit_code == 0
        assert "Reclaim complete" in result.stdout
        assert not (workspace / "app" / "build").exists()
        assert (workspace / "app" / "pubspec.yaml").exists()

    @patch("reclaim.projects.run_best_effort")
    def test_runs_project_commands(self, mock_run, workspace):
        result = runner.invoke(app, ["clean", str(workspace), "--force"])
        assert result.exit_code == 0
        commands = [c[0][0] for c in mock_run.call_args_list]
        assert commands == [("flutter", "clean"), ("flutter", "pub", "get")]
