"""sdkmaker -- Generate typed TypeScript client libraries from Swagger/OpenAPI documents.

This package loads a Swagger 2.0 or OpenAPI 3.x document, normalizes it into a
single canonical shape, resolves its ``$ref`` pointers into typed descriptors,
groups operations into controllers, and renders a client library from the
resulting intermediate representation.

Typical workflow::

    sdkmaker inspect controllers openapi.yaml   # preview the controllers
    sdkmaker generate openapi.yaml -o ./my-sdk  # write the client sources

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware generator configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Loading, normalization, reference resolution and projection.
    emitters: TypeScript source emission from the projected IR.
"""

__version__ = "0.3.0"
