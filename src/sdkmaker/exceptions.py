"""Exception hierarchy for sdkmaker.

All exceptions inherit from :class:`SdkmakerError`, which carries the name of
the pipeline operation that failed, a human-readable message, optional
structured ``details``, and an ``exit_code`` attribute mapped to a constant
from :mod:`sdkmaker.exit_codes`. The top-level error handler in
:func:`sdkmaker.app.main` catches ``SdkmakerError`` and exits with the
appropriate code, while unexpected exceptions produce a crash log and exit
with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SdkmakerError               (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- ValidationError         (exit 3)
    +-- ContentParsingError     (exit 4)
    +-- NetworkError            (exit 5)
    +-- RecursionLimitExceeded  (exit 6)
    +-- EmitError               (exit 7)
    +-- ConfigError             (exit 1)
"""

from __future__ import annotations

from typing import Any, Optional

from sdkmaker.exit_codes import (
    EXIT_CONTENT_PARSE_ERROR,
    EXIT_EMIT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NETWORK_ERROR,
    EXIT_REFERENCE_ERROR,
    EXIT_VALIDATION_ERROR,
)


class SdkmakerError(Exception):
    """Base exception for all sdkmaker errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`sdkmaker.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        operation: Name of the pipeline step that failed (e.g. ``"parse"``).
        message: Human-readable error description printed to stderr.
        details: Optional structured detail for programmatic callers.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
        exit_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.message = message
        self.details = details or {}
        if exit_code is not None:
            self.exit_code = exit_code

    def __str__(self) -> str:
        return f"{self.operation}: {self.message}"


class InvalidUsageError(SdkmakerError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ValidationError(SdkmakerError):
    """Raised when the input locator or the decoded document has an unusable shape.

    Covers non-string locators, unreadable local files, documents missing
    every Swagger/OpenAPI marker field, and pointers to missing targets.
    """

    exit_code = EXIT_VALIDATION_ERROR


class ContentParsingError(SdkmakerError):
    """Raised when document text is neither valid JSON nor valid YAML.

    The formats that were tried are listed in :attr:`attempted_formats`.
    """

    exit_code = EXIT_CONTENT_PARSE_ERROR

    def __init__(
        self,
        operation: str,
        message: str,
        attempted_formats: list[str],
        details: Optional[dict[str, Any]] = None,
    ):
        merged = {"attemptedFormats": list(attempted_formats), **(details or {})}
        super().__init__(operation, message, merged)
        self.attempted_formats = list(attempted_formats)


class NetworkError(SdkmakerError):
    """Raised on transport failures while fetching a URL locator.

    The original transport exception is available as ``__cause__`` and
    :attr:`cause`.
    """

    exit_code = EXIT_NETWORK_ERROR

    def __init__(self, operation: str, message: str, locator: str, cause: BaseException):
        super().__init__(operation, message, {"locator": locator, "cause": str(cause)})
        self.locator = locator
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.operation}: {self.message} ({self.locator}): {self.cause}"


class RecursionLimitExceeded(SdkmakerError):
    """Raised when reference resolution revisits a node it is still resolving."""

    exit_code = EXIT_REFERENCE_ERROR


class EmitError(SdkmakerError):
    """Raised when the IR cannot be rendered into client source files."""

    exit_code = EXIT_EMIT_ERROR


class ConfigError(SdkmakerError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
