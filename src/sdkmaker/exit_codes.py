"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~sdkmaker.exceptions.SdkmakerError` subclass.
CI scripts can inspect the exit code to tell a bad document apart from an
unreachable one without parsing stderr.

Example::

    $ sdkmaker generate https://api.example.com/docs -o ./sdk
    $ echo $?
    5   # EXIT_NETWORK_ERROR -- the document could not be fetched
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_VALIDATION_ERROR = 3
"""The input is not a usable locator or not a Swagger/OpenAPI document."""

EXIT_CONTENT_PARSE_ERROR = 4
"""The document text could not be decoded as JSON or YAML."""

EXIT_NETWORK_ERROR = 5
"""A transport-level error occurred while fetching a URL locator."""

EXIT_REFERENCE_ERROR = 6
"""Reference resolution hit a cycle or exceeded the recursion limit."""

EXIT_EMIT_ERROR = 7
"""The intermediate representation could not be rendered into source files."""
