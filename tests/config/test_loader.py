"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence: kwargs > env > project yaml > global yaml > defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

import opsprune.config.loader as loader
from opsprune.config.loader import PROJECT_CONFIG_NAME, _deep_merge, _load_yaml, load_config
from opsprune.core.errors import ConfigError, ErrorCode


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads valid YAML content."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("apply:\n  on_existing: merge\n")

        assert _load_yaml(yaml_file) == {"apply": {"on_existing": "merge"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        """Returns empty dict for empty file."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid YAML syntax."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("logging:\n  level:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        """A YAML list at top level is rejected."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        """Nested dicts are merged recursively."""
        base = {"apply": {"backup": False, "on_existing": "skip"}}
        override = {"apply": {"on_existing": "merge"}}
        assert _deep_merge(base, override) == {"apply": {"backup": False, "on_existing": "merge"}}

    def test_override_replaces_non_dict(self) -> None:
        base: dict[str, Any] = {"a": {"nested": 1}}
        override: dict[str, Any] = {"a": "simple"}
        assert _deep_merge(base, override) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": 1}
        _deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_default_config_when_no_files(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.logging.level == "WARNING"
        assert config.scan.client_factories == ["generateClient"]
        assert config.scan.client_type_names == []
        assert config.apply.on_existing == "skip"
        assert config.apply.backup is True

    def test_project_yaml_overrides_global(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Given
        global_file = tmp_path / "global.yaml"
        global_file.write_text("apply:\n  on_existing: overwrite\n  backup: false\n")
        monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", global_file)
        project = tmp_path / "project"
        project.mkdir()
        (project / PROJECT_CONFIG_NAME).write_text("apply:\n  on_existing: merge\n")

        # When
        config = load_config(project)

        # Then
        assert config.apply.on_existing == "merge"
        assert config.apply.backup is False

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("apply:\n  on_existing: merge\n")
        monkeypatch.setenv("OPSPRUNE__APPLY__ON_EXISTING", "overwrite")

        config = load_config(tmp_path)

        assert config.apply.on_existing == "overwrite"

    def test_env_json_list(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(
            "OPSPRUNE__SCAN__CLIENT_FACTORIES", '["generateClient", "generateServerClient"]'
        )

        config = load_config(tmp_path)

        assert config.scan.client_factories == ["generateClient", "generateServerClient"]

    def test_kwargs_override_everything(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPSPRUNE__APPLY__ON_EXISTING", "overwrite")

        config = load_config(tmp_path, apply={"on_existing": "merge"})

        assert config.apply.on_existing == "merge"

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("apply:\n  on_existing: sometimes\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "on_existing" in exc_info.value.details["field"]

    def test_yaml_level_is_normalized(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("logging:\n  level: debug\n")

        assert load_config(tmp_path).logging.level == "DEBUG"
