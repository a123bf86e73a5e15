"""Shared test fixtures for sdkmaker.

Provides document fixtures, an isolated config environment, output state
management, and a CLI runner. Discovered automatically by pytest.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from sdkmaker.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager keeps references to the sys.stdout/sys.stderr objects it saw
    at creation time; CliRunner swaps those out, so a manager surviving a
    test would write to closed streams.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_30_raw() -> dict[str, Any]:
    """Raw OpenAPI 3.0 petstore document."""
    with open(FIXTURES_DIR / "petstore_3.0.json") as f:
        return json.load(f)


@pytest.fixture
def swagger_20_raw() -> dict[str, Any]:
    """Raw Swagger 2.0 document describing the same API as ``petstore_30_raw``."""
    with open(FIXTURES_DIR / "swagger_2.0.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_30_path() -> Path:
    return FIXTURES_DIR / "petstore_3.0.json"


@pytest.fixture
def petstore_yaml_path() -> Path:
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def scenario_one_raw() -> dict[str, Any]:
    """Minimal document with one public and one internal operation under one tag."""
    return {
        "openapi": "3.0.0",
        "info": {"title": "Test API", "version": "1.0.0"},
        "paths": {
            "/test": {
                "get": {
                    "operationId": "getTest",
                    "tags": ["TestController"],
                    "parameters": [{"name": "id", "in": "query"}],
                    "responses": {"200": {"description": "OK"}},
                },
                "post": {
                    "operationId": "Controller_postTest",
                    "tags": ["TestController"],
                },
            }
        },
        "components": {"schemas": {"Test": {"type": "object"}}},
    }


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME into tmp_path, clears the
    SDKMAKER_* environment variables, and changes the working directory to
    tmp_path so no project ``sdkmaker.json`` leaks in.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "SDKMAKER_DEFAULT_CONTROLLER",
        "SDKMAKER_INTERNAL_MARKER",
        "SDKMAKER_FETCH_TIMEOUT",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN OutputManager for tests that ignore diagnostics."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON OutputManager for tests that parse stdout."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner capturing stdout and stderr."""
    from typer.testing import CliRunner

    return CliRunner()
