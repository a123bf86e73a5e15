"""Generator configuration with XDG paths and precedence resolution.

This module handles all persistent configuration for sdkmaker:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.sdkmaker/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **User config** -- A single :class:`~sdkmaker.models.GeneratorConfig`
  JSON file storing defaults (default controller, internal marker, fetch
  settings, output format).
* **Project config** -- ``./sdkmaker.json`` holding per-repository overrides
  of the same keys.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and user config into the
  final effective configuration.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from sdkmaker.exceptions import ConfigError
from sdkmaker.models import GeneratorConfig

_APP_NAME = "sdkmaker"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "sdkmaker.json"

ENV_DEFAULT_CONTROLLER = "SDKMAKER_DEFAULT_CONTROLLER"
ENV_INTERNAL_MARKER = "SDKMAKER_INTERNAL_MARKER"
ENV_FETCH_TIMEOUT = "SDKMAKER_FETCH_TIMEOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/sdkmaker/`` (default ``~/.config/sdkmaker/``).
    On macOS/Windows: ``~/.sdkmaker/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/sdkmaker/`` (default ``~/.local/share/sdkmaker/``).
    On macOS/Windows: ``~/.sdkmaker/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- File-backed layers ---


def _read_json_object(path: Path, label: str) -> Optional[dict[str, Any]]:
    """Read *path* as a JSON object, or return ``None`` when it does not exist."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError("config", f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("config", f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_user_config() -> GeneratorConfig:
    """Load the user configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~sdkmaker.models.GeneratorConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = get_config_dir() / _CONFIG_FILENAME
    data = _read_json_object(path, "user config")
    if data is None:
        return GeneratorConfig()
    try:
        return GeneratorConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError("config", f"Invalid user config at {path}: {exc}") from exc


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./sdkmaker.json``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json_object(Path.cwd() / _PROJECT_CONFIG_FILENAME, "project config")


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return *base* updated with *override*, merging nested mappings key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_overrides() -> dict[str, Any]:
    """Collect overrides from ``SDKMAKER_*`` environment variables."""
    overrides: dict[str, Any] = {}
    controller = os.environ.get(ENV_DEFAULT_CONTROLLER)
    if controller:
        overrides["default_controller"] = controller
    marker = os.environ.get(ENV_INTERNAL_MARKER)
    if marker:
        overrides["internal_marker"] = marker
    timeout = os.environ.get(ENV_FETCH_TIMEOUT)
    if timeout:
        try:
            overrides["fetch"] = {"timeout": float(timeout)}
        except ValueError as exc:
            raise ConfigError(
                "config", f"{ENV_FETCH_TIMEOUT} must be a number, got: {timeout}"
            ) from exc
    return overrides


# --- Precedence resolution ---


def resolve_config(
    cli_default_controller: Optional[str] = None,
    cli_internal_marker: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GeneratorConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_default_controller``, ``cli_internal_marker``,
           ``cli_format``)
        2. Environment variables (``SDKMAKER_DEFAULT_CONTROLLER``,
           ``SDKMAKER_INTERNAL_MARKER``, ``SDKMAKER_FETCH_TIMEOUT``)
        3. Project config (``./sdkmaker.json``)
        4. User config (``~/.config/sdkmaker/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~sdkmaker.models.GeneratorConfig`.

    Raises:
        ConfigError: If any layer is malformed or the merged result fails
            validation.
    """
    # 5 + 4
    data = load_user_config().model_dump(mode="json")

    # 3
    project = load_project_config()
    if project is not None:
        data = _deep_merge(data, project)

    # 2
    data = _deep_merge(data, _env_overrides())

    # 1
    if cli_default_controller is not None:
        data["default_controller"] = cli_default_controller
    if cli_internal_marker is not None:
        data["internal_marker"] = cli_internal_marker
    if cli_format is not None:
        data["output"]["format"] = cli_format

    try:
        return GeneratorConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError("config", f"Invalid configuration: {exc}") from exc
