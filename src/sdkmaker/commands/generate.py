"""Generate command -- build a TypeScript client from a Swagger/OpenAPI document.

Runs the full pipeline (load, decode, normalize, resolve, project), renders
the client sources, and writes them below the output directory. With
``--dry-run`` the sources are printed instead of written.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

import typer

from sdkmaker.exceptions import InvalidUsageError, SdkmakerError
from sdkmaker.output import debug, error, info, print_sources, success


def generate_command(
    ctx: typer.Context,
    source: str = typer.Argument(
        ...,
        help="Swagger/OpenAPI URL, file path, '-' for stdin, or literal JSON/YAML.",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output directory (defaults to the package name).",
    ),
    package_name: Optional[str] = typer.Option(
        None,
        "--package-name",
        help="Package name (derived from info.title if omitted).",
    ),
    default_controller: Optional[str] = typer.Option(
        None,
        "--default-controller",
        help="Controller for operations without tags.",
    ),
    internal_marker: Optional[str] = typer.Option(
        None,
        "--internal-marker",
        help="operationId substring that hides an operation.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the generated files instead of writing them."
    ),
) -> None:
    """Generate a typed client library.

    Example::

        sdkmaker generate https://petstore3.swagger.io/api/v3/openapi.json
        sdkmaker generate ./swagger.yaml -o ./petstore-sdk --package-name petstore-sdk
        cat openapi.json | sdkmaker generate - --dry-run
    """
    from sdkmaker.config import resolve_config
    from sdkmaker.emitters import emit_sdk, write_files
    from sdkmaker.parser import parse

    obj = ctx.obj or {}
    try:
        _check_usage(output_dir, package_name)
        config = resolve_config(
            cli_default_controller=default_controller,
            cli_internal_marker=internal_marker,
            cli_format=obj.get("format"),
        )
        ir = parse(source, config)
        name = package_name or default_package_name(ir.name)
        debug(f"Package name: {name}")

        files = emit_sdk(ir, name)
        if dry_run:
            print_sources(files)
            return

        target = output_dir or Path(name)
        info(f"Writing {len(files)} file(s) to {target}")
        write_files(files, target)
    except SdkmakerError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f'Generated "{name}" ({len(ir.emittable_controllers())} controller(s)) in {target}')


def _check_usage(output_dir: Optional[Path], package_name: Optional[str]) -> None:
    if package_name is not None and not package_name.strip():
        raise InvalidUsageError("generate", "--package-name must not be empty")
    if output_dir is not None and output_dir.exists() and not output_dir.is_dir():
        raise InvalidUsageError("generate", f"--output is not a directory: {output_dir}")


def default_package_name(title: str) -> str:
    """Derive an npm-style package name from an API title.

    The first ``api`` is dropped, runs of other characters become ``-``,
    and ``-sdk`` is appended.

    Example::

        >>> default_package_name("Swagger Petstore")
        'swagger-petstore-sdk'
        >>> default_package_name("My API Service")
        'my-service-sdk'
    """
    slug = title.lower().replace("api", "", 1)
    slug = re.sub(r"[^a-z0-9]+", "-", slug).strip("-")
    return f"{slug or 'client'}-sdk"
