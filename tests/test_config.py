"""Tests for sdkmaker.config -- XDG paths, config layers, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from sdkmaker.config import (
    get_config_dir,
    get_data_dir,
    load_project_config,
    load_user_config,
    resolve_config,
)
from sdkmaker.exceptions import ConfigError
from sdkmaker.models import GeneratorConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write *data* as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture
def xdg(isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr("sdkmaker.config._is_xdg_platform", lambda: True)
    return isolated_config


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_config_dir_uses_xdg_config_home(self, xdg: Path) -> None:
        path = get_config_dir()
        assert path == xdg / "config" / "sdkmaker"
        assert path.is_dir()

    def test_data_dir_uses_xdg_data_home(self, xdg: Path) -> None:
        assert get_data_dir() == xdg / "data" / "sdkmaker"

    def test_config_dir_default_under_home(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("sdkmaker.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".config" / "sdkmaker"

    def test_non_xdg_platform_fallback(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("sdkmaker.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".sdkmaker"
        assert get_data_dir() == tmp_path / ".sdkmaker" / "logs"


# ---------------------------------------------------------------------------
# File-backed layers
# ---------------------------------------------------------------------------


class TestUserConfig:
    def test_missing_file_gives_defaults(self, xdg: Path) -> None:
        assert load_user_config() == GeneratorConfig()

    def test_loads_values(self, xdg: Path) -> None:
        _write_json(xdg / "config" / "sdkmaker" / "config.json", {
            "default_controller": "Misc",
            "fetch": {"timeout": 10},
        })
        config = load_user_config()
        assert config.default_controller == "Misc"
        assert config.fetch.timeout == 10.0
        assert config.internal_marker == "Controller_"

    def test_invalid_json_raises(self, xdg: Path) -> None:
        path = xdg / "config" / "sdkmaker" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid user config"):
            load_user_config()

    def test_non_object_raises(self, xdg: Path) -> None:
        _write_json(xdg / "config" / "sdkmaker" / "config.json", ["a"])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_user_config()

    def test_invalid_value_raises(self, xdg: Path) -> None:
        _write_json(xdg / "config" / "sdkmaker" / "config.json", {"fetch": {"timeout": "soon"}})
        with pytest.raises(ConfigError):
            load_user_config()


class TestProjectConfig:
    def test_missing_returns_none(self, xdg: Path) -> None:
        assert load_project_config() is None

    def test_reads_cwd_file(self, xdg: Path) -> None:
        _write_json(xdg / "sdkmaker.json", {"internal_marker": "Internal_"})
        assert load_project_config() == {"internal_marker": "Internal_"}


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, xdg: Path) -> None:
        config = resolve_config()
        assert config.default_controller == "DefaultController"
        assert config.internal_marker == "Controller_"
        assert config.fetch.timeout is None
        assert config.output.format == "auto"

    def test_project_overrides_user(self, xdg: Path) -> None:
        _write_json(xdg / "config" / "sdkmaker" / "config.json", {
            "default_controller": "UserDefault",
            "fetch": {"timeout": 30, "follow_redirects": False},
        })
        _write_json(xdg / "sdkmaker.json", {"default_controller": "ProjectDefault", "fetch": {"timeout": 5}})
        config = resolve_config()
        assert config.default_controller == "ProjectDefault"
        assert config.fetch.timeout == 5.0
        # Nested keys not set by the project survive the merge.
        assert config.fetch.follow_redirects is False

    def test_env_overrides_project(self, xdg: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(xdg / "sdkmaker.json", {"internal_marker": "Project_", "fetch": {"timeout": 5}})
        monkeypatch.setenv("SDKMAKER_INTERNAL_MARKER", "Env_")
        monkeypatch.setenv("SDKMAKER_FETCH_TIMEOUT", "1.5")
        config = resolve_config()
        assert config.internal_marker == "Env_"
        assert config.fetch.timeout == 1.5

    def test_cli_overrides_env(self, xdg: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SDKMAKER_DEFAULT_CONTROLLER", "EnvController")
        config = resolve_config(cli_default_controller="CliController", cli_format="json")
        assert config.default_controller == "CliController"
        assert config.output.format == "json"

    def test_bad_timeout_env(self, xdg: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SDKMAKER_FETCH_TIMEOUT", "forever")
        with pytest.raises(ConfigError, match="SDKMAKER_FETCH_TIMEOUT"):
            resolve_config()

    def test_invalid_project_file(self, xdg: Path) -> None:
        (xdg / "sdkmaker.json").write_text("not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="project config"):
            resolve_config()
