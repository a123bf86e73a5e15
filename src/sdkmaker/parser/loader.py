"""Load Swagger/OpenAPI documents from a URL, local file, stdin, or literal text.

This module handles all I/O for fetching raw documents and decoding them into
Python objects. It has two public functions:

* :func:`load_source` -- Classify a locator string (URL, ``-`` for stdin,
  file path, or literal content) and return its raw text.
* :func:`decode_content` -- Decode raw text as JSON, falling back to YAML.

The decoded tree should be passed to
:func:`~sdkmaker.parser.normalizer.normalize_document`, which checks that it
plausibly is a Swagger/OpenAPI document and maps it onto the canonical shape.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

import httpx
import yaml

from sdkmaker.exceptions import (
    ContentParsingError,
    NetworkError,
    RecursionLimitExceeded,
    ValidationError,
)
from sdkmaker.models import FetchConfig

logger = logging.getLogger(__name__)

# Substrings that mark a locator as inline document content rather than a path.
_CONTENT_MARKERS = ("openapi:", '"openapi":', "swagger:", '"swagger":')


@dataclass(frozen=True)
class LoadedSource:
    """Raw document text plus where it came from.

    Attributes:
        content: The undecoded document text.
        content_type: The ``Content-Type`` reported by the server for URL
            locators, an extension-derived hint for files, or ``""``.
        origin: One of ``"url"``, ``"file"``, ``"stdin"``, ``"literal"``.
    """

    content: str
    content_type: str = ""
    origin: str = "literal"


def load_source(source: Any, fetch: Optional[FetchConfig] = None) -> LoadedSource:
    """Load raw document text from a URL, file path, stdin ('-'), or literal string.

    Args:
        source: The locator. Anything other than a non-empty string is
            rejected before any I/O happens.
        fetch: Settings for URL fetching. Defaults to :class:`FetchConfig`
            (no timeout, redirects followed).

    Returns:
        A :class:`LoadedSource` holding the raw text.

    Raises:
        ValidationError: If *source* is not a non-empty string, or names a
            file that cannot be read.
        NetworkError: If a URL locator cannot be fetched.
    """
    if not isinstance(source, str) or not source:
        raise ValidationError("parse", "Input is not a valid string")

    if source == "-":
        return _load_from_stdin()
    if is_url(source):
        return _load_from_url(source, fetch or FetchConfig())
    if not any(marker in source for marker in _CONTENT_MARKERS):
        return _load_from_file(source)

    logger.debug("Treating input as literal document content (%d chars)", len(source))
    return LoadedSource(content=source, origin="literal")


def is_url(source: str) -> bool:
    """Return True if *source* is an absolute HTTP(S) URL with a host."""
    try:
        parsed = urlparse(source.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _load_from_stdin() -> LoadedSource:
    """Read document text from stdin.

    Raises:
        ValidationError: If stdin cannot be read or is empty.
    """
    try:
        content = sys.stdin.read()
    except (OSError, ValueError) as exc:
        raise ValidationError("parse", f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise ValidationError("parse", "No input received from stdin")

    return LoadedSource(content=content, origin="stdin")


def _load_from_url(url: str, fetch: FetchConfig) -> LoadedSource:
    """Fetch document text from *url* with a single GET request.

    There is no retry: any transport failure or non-2xx status is terminal.

    Raises:
        NetworkError: If the request fails or the server answers with an
            error status.
    """
    logger.debug("Fetching %s (timeout=%s)", url, fetch.timeout)
    try:
        response = httpx.get(
            url,
            headers={"Accept": fetch.accept},
            timeout=fetch.timeout,
            follow_redirects=fetch.follow_redirects,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise NetworkError(
            "fetchFromUrl",
            f"Failed to fetch Swagger documentation (HTTP {exc.response.status_code})",
            locator=url,
            cause=exc,
        ) from exc
    except httpx.HTTPError as exc:
        raise NetworkError(
            "fetchFromUrl",
            "Failed to fetch Swagger documentation",
            locator=url,
            cause=exc,
        ) from exc

    return LoadedSource(
        content=response.text,
        content_type=response.headers.get("content-type", ""),
        origin="url",
    )


def _load_from_file(path: str) -> LoadedSource:
    """Read document text from a local file.

    Relative paths are resolved against the current working directory.

    Raises:
        ValidationError: If the file does not exist or cannot be read.
    """
    file_path = Path(path)
    if not file_path.is_absolute():
        file_path = Path.cwd() / file_path

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ValidationError(
            "parse",
            f"Failed to read OpenAPI file: {file_path}: {exc}",
            {"path": str(file_path)},
        ) from exc

    suffix = file_path.suffix.lower()
    content_type = ""
    if suffix == ".json":
        content_type = "application/json"
    elif suffix in (".yaml", ".yml"):
        content_type = "application/yaml"

    logger.debug("Read %d chars from %s", len(content), file_path)
    return LoadedSource(content=content, content_type=content_type, origin="file")


def decode_content(content: str) -> Any:
    """Decode document text as JSON, falling back to YAML.

    JSON is tried first because it is cheaper and stricter; valid JSON is
    also valid YAML, so the fallback never changes the meaning of a JSON
    document.

    Args:
        content: The raw document text.

    Returns:
        The decoded tree. Its shape is not checked here.

    Raises:
        ContentParsingError: If the text is neither valid JSON nor valid YAML.
        RecursionLimitExceeded: If the text nests too deeply to decode.
    """
    try:
        return json.loads(content)
    except json.JSONDecodeError as json_error:
        logger.debug("JSON decoding failed (%s); trying YAML", json_error)
    except RecursionError as exc:
        raise _too_deep() from exc

    try:
        return yaml.safe_load(content)
    except RecursionError as exc:
        raise _too_deep() from exc
    except yaml.YAMLError as exc:
        raise ContentParsingError(
            "processContent",
            "Failed to parse content as JSON or YAML",
            attempted_formats=["JSON", "YAML"],
        ) from exc


def _too_deep() -> RecursionLimitExceeded:
    return RecursionLimitExceeded("processContent", "Document is nested too deeply to decode")
