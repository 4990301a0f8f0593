"""Tests for default settings and config assembly."""

from pathlib import Path

import pytest

from reclaim.config import DEFAULT_SKIP_NAMES, DEFAULT_TRASH_NAMES, describe_defaults
from reclaim.errors import ConfigurationError
from reclaim.models import ReclaimConfig, build_config


class TestDefaults:
    def test_trash_and_skip_are_disjoint(self):
        assert not DEFAULT_TRASH_NAMES & DEFAULT_SKIP_NAMES

    def test_flutter_artifacts_are_trash(self):
        assert {"build", ".dart_tool"} <= DEFAULT_TRASH_NAMES

    def test_describe_defaults_sorted(self):
        data = describe_defaults()
        assert data["trash_names"] == sorted(data["trash_names"])
        assert data["project_marker"] == "pubspec.yaml"
        assert data["clean_command"] == "flutter clean"


class TestBuildConfig:
    def test_extra_trash_added(self):
        config = build_config(Path("/work"), extra_trash=["target"])
        assert "target" in config.trash_names
        assert DEFAULT_TRASH_NAMES <= config.trash_names

    def test_only_trash_replaces(self):
        config = build_config(Path("/work"), only_trash=["node_modules"])
        assert config.trash_names == frozenset({"node_modules"})

    def test_extra_skip_added(self):
        config = build_config(Path("/work"), extra_skip=["archive"])
        assert "archive" in config.skip_names

    def test_trash_name_removed_from_skip(self):
        config = build_config(Path("/work"), extra_trash=["vendor"])
        assert "vendor" in config.trash_names
        assert "vendor" not in config.skip_names

    def test_none_overrides_keep_defaults(self):
        config = build_config(Path("/work"), project_marker=None, max_parallel=None)
        assert config.project_marker == "pubspec.yaml"
        assert config.max_parallel == 6

    def test_overrides_applied(self):
        config = build_config(Path("/work"), max_parallel=2, force=True, dry_run=True)
        assert config.max_parallel == 2
        assert config.force
        assert config.dry_run

    def test_invalid_value_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            build_config(Path("/work"), max_parallel=0)

    def test_returns_reclaim_config(self):
        assert isinstance(build_config(Path("/work")), ReclaimConfig)

    def test_config_module_holds_only_defaults(self):
        import reclaim.config

        assert not hasattr(reclaim.config, "build_config")
