"""Tests for sdkmaker.parser.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from sdkmaker.exceptions import (
    ContentParsingError,
    NetworkError,
    RecursionLimitExceeded,
    ValidationError,
)
from sdkmaker.models import FetchConfig
from sdkmaker.parser.loader import (
    _load_from_file,
    decode_content,
    is_url,
    load_source,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# load_source dispatch
# ---------------------------------------------------------------------------


class TestLoadSource:
    """Test load_source routes each locator to the right reader."""

    @pytest.mark.parametrize("source", [None, 42, 3.5, {"openapi": "3.0.0"}, ["a"], ""])
    def test_non_string_or_empty_rejected(self, source: object) -> None:
        with pytest.raises(ValidationError, match="Input is not a valid string") as exc_info:
            load_source(source)
        assert exc_info.value.operation == "parse"

    def test_rejects_before_any_io(self) -> None:
        with patch("sdkmaker.parser.loader.httpx.get") as mock_get, \
                patch("sdkmaker.parser.loader.Path.read_text") as mock_read:
            with pytest.raises(ValidationError):
                load_source(None)
        mock_get.assert_not_called()
        mock_read.assert_not_called()

    def test_loads_from_file_path(self) -> None:
        loaded = load_source(str(FIXTURES_DIR / "petstore_3.0.json"))
        assert loaded.origin == "file"
        assert loaded.content_type == "application/json"
        assert json.loads(loaded.content)["info"]["title"] == "Petstore API"

    def test_relative_path_resolved_against_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "spec.yml").write_text("openapi: 3.0.0\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        loaded = load_source("spec.yml")
        assert loaded.origin == "file"
        assert loaded.content_type == "application/yaml"

    def test_literal_json_content(self) -> None:
        text = json.dumps({"openapi": "3.0.0", "info": {"title": "Inline"}})
        loaded = load_source(text)
        assert loaded.origin == "literal"
        assert loaded.content == text

    def test_literal_yaml_content(self) -> None:
        text = textwrap.dedent("""\
            swagger: "2.0"
            info:
              title: Inline YAML
        """)
        loaded = load_source(text)
        assert loaded.origin == "literal"

    def test_loads_from_stdin(self) -> None:
        with patch("sdkmaker.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO('{"openapi": "3.0.0"}')
            loaded = load_source("-")
        assert loaded.origin == "stdin"
        assert loaded.content == '{"openapi": "3.0.0"}'

    def test_empty_stdin_raises(self) -> None:
        with patch("sdkmaker.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("   \n")
            with pytest.raises(ValidationError, match="No input"):
                load_source("-")

    def test_loads_from_url(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            text='{"openapi": "3.0.0"}',
            headers={"content-type": "application/json"},
            request=httpx.Request("GET", "https://example.com/openapi.json"),
        )
        with patch("sdkmaker.parser.loader.httpx.get", return_value=mock_response) as mock_get:
            loaded = load_source("https://example.com/openapi.json")
        assert loaded.origin == "url"
        assert loaded.content_type == "application/json"
        assert loaded.content == '{"openapi": "3.0.0"}'
        _, kwargs = mock_get.call_args
        assert kwargs["timeout"] is None
        assert kwargs["follow_redirects"] is True
        assert "application/json" in kwargs["headers"]["Accept"]

    def test_url_fetch_uses_configured_timeout(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            text="openapi: 3.0.0",
            request=httpx.Request("GET", "https://example.com/openapi.yaml"),
        )
        with patch("sdkmaker.parser.loader.httpx.get", return_value=mock_response) as mock_get:
            load_source("https://example.com/openapi.yaml", FetchConfig(timeout=2.5))
        assert mock_get.call_args.kwargs["timeout"] == 2.5


# ---------------------------------------------------------------------------
# URL failures
# ---------------------------------------------------------------------------


class TestLoadFromUrlErrors:
    """Test that every fetch failure surfaces as NetworkError."""

    def test_transport_error(self) -> None:
        cause = httpx.ConnectError("connection refused")
        with patch("sdkmaker.parser.loader.httpx.get", side_effect=cause):
            with pytest.raises(NetworkError) as exc_info:
                load_source("https://unreachable.example.com/spec.json")
        err = exc_info.value
        assert err.operation == "fetchFromUrl"
        assert err.locator == "https://unreachable.example.com/spec.json"
        assert err.cause is cause
        assert err.__cause__ is cause

    def test_http_error_status(self) -> None:
        mock_response = httpx.Response(
            status_code=404,
            text="not found",
            request=httpx.Request("GET", "https://example.com/missing.json"),
        )
        with patch("sdkmaker.parser.loader.httpx.get", return_value=mock_response):
            with pytest.raises(NetworkError, match="HTTP 404"):
                load_source("https://example.com/missing.json")

    def test_timeout(self) -> None:
        with patch(
            "sdkmaker.parser.loader.httpx.get",
            side_effect=httpx.ReadTimeout("timed out"),
        ):
            with pytest.raises(NetworkError):
                load_source("http://slow.example.com/spec.json", FetchConfig(timeout=0.1))


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestLoadFromFile:
    def test_missing_file_raises(self) -> None:
        with pytest.raises(ValidationError, match="Failed to read OpenAPI file") as exc_info:
            _load_from_file("/nonexistent/path/to/spec.json")
        assert exc_info.value.details["path"] == "/nonexistent/path/to/spec.json"

    def test_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            _load_from_file(str(tmp_path))


# ---------------------------------------------------------------------------
# is_url
# ---------------------------------------------------------------------------


class TestIsUrl:
    @pytest.mark.parametrize(
        "source",
        ["https://example.com/spec.json", "http://localhost:8080/v3/api-docs"],
    )
    def test_urls(self, source: str) -> None:
        assert is_url(source)

    @pytest.mark.parametrize(
        "source",
        ["ftp://example.com/spec.json", "https://", "./spec.json", "/abs/spec.yaml", "openapi: 3.0.0"],
    )
    def test_not_urls(self, source: str) -> None:
        assert not is_url(source)


# ---------------------------------------------------------------------------
# decode_content
# ---------------------------------------------------------------------------


class TestDecodeContent:
    def test_json(self) -> None:
        assert decode_content('{"openapi": "3.0.0", "paths": {}}') == {
            "openapi": "3.0.0",
            "paths": {},
        }

    def test_yaml_fallback(self) -> None:
        content = textwrap.dedent("""\
            openapi: 3.0.0
            info:
              title: YAML
            paths:
              /pets:
                get:
                  responses:
                    200:
                      description: OK
        """)
        result = decode_content(content)
        assert result["info"]["title"] == "YAML"
        # Unquoted status codes decode as integers; the projector handles that.
        assert 200 in result["paths"]["/pets"]["get"]["responses"]

    def test_malformed_lists_both_formats(self) -> None:
        with pytest.raises(ContentParsingError) as exc_info:
            decode_content("{not json or yaml")
        err = exc_info.value
        assert err.operation == "processContent"
        assert err.attempted_formats == ["JSON", "YAML"]
        assert err.details["attemptedFormats"] == ["JSON", "YAML"]

    def test_scalar_yaml_is_returned_unchecked(self) -> None:
        assert decode_content("just text") == "just text"

    def test_deeply_nested_json_raises_recursion_limit(self) -> None:
        with pytest.raises(RecursionLimitExceeded) as exc_info:
            decode_content("[" * 100_000 + "]" * 100_000)
        assert exc_info.value.operation == "processContent"
        assert exc_info.value.exit_code == 6

    def test_deeply_nested_yaml_raises_recursion_limit(self) -> None:
        content = "openapi: 3.0.0\npaths: " + "[" * 10_000 + "]" * 10_000
        with pytest.raises(RecursionLimitExceeded):
            decode_content(content)
