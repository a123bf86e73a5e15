"""Inspect commands -- examine a document without generating code.

Provides the ``sdkmaker inspect`` sub-command group:

* ``controllers`` -- the operations each generated module would contain.
* ``info`` -- API metadata and counts.
* ``models`` -- the component schemas that become TypeScript declarations.
"""

from __future__ import annotations

import typer

from sdkmaker.exceptions import RecursionLimitExceeded, SdkmakerError
from sdkmaker.output import error, format_response, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)

_SOURCE_HELP = "Swagger/OpenAPI URL, file path, '-' for stdin, or literal JSON/YAML."


def _load(ctx: typer.Context, source: str):  # noqa: ANN202
    """Run the pipeline once, returning the normalized document and its IR.

    Exits with the error's code when any stage fails.
    """
    from sdkmaker.config import resolve_config
    from sdkmaker.parser import load_document, project_controllers, resolve_references

    obj = ctx.obj or {}
    try:
        config = resolve_config(cli_format=obj.get("format"))
        doc = load_document(source, config)
        ir = project_controllers(
            resolve_references(doc),
            default_controller=config.default_controller,
            internal_marker=config.internal_marker,
        )
        return doc, ir
    except SdkmakerError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@inspect_app.command("controllers")
def inspect_controllers(
    ctx: typer.Context,
    source: str = typer.Argument(..., help=_SOURCE_HELP),
) -> None:
    """List controllers and their operations in generation order.

    Example::

        sdkmaker inspect controllers ./openapi.json
        sdkmaker --json inspect controllers https://petstore3.swagger.io/api/v3/openapi.json
    """
    _, ir = _load(ctx, source)

    rows: list[list[str]] = []
    for controller, operations in ir.emittable_controllers().items():
        for op in operations:
            rows.append([controller, op.method.value.upper(), op.path, op.operation_id])

    if not rows:
        info("No operations to generate.")
        return

    get_output().print_table(
        ["Controller", "Method", "Path", "OperationId"],
        rows,
        title=f"{ir.name or 'API'} -- Operations ({len(rows)})",
    )


@inspect_app.command("info")
def inspect_info(
    ctx: typer.Context,
    source: str = typer.Argument(..., help=_SOURCE_HELP),
) -> None:
    """Show API metadata: title, version, base URL, and counts.

    Example::

        sdkmaker inspect info ./swagger.yaml
    """
    doc, ir = _load(ctx, source)

    controllers = ir.emittable_controllers()
    format_response({
        "title": ir.name,
        "version": ir.version,
        "openapi_version": doc.openapi,
        "description": ir.description or "-",
        "base_url": ir.base_url or "-",
        "controllers": len(controllers),
        "operations": sum(len(ops) for ops in controllers.values()),
        "models": len(ir.components.get("schemas") or {}),
    })


@inspect_app.command("models")
def inspect_models(
    ctx: typer.Context,
    source: str = typer.Argument(..., help=_SOURCE_HELP),
) -> None:
    """List component schemas with their kind and up to five properties.

    Example::

        sdkmaker inspect models ./openapi.json
    """
    from sdkmaker.emitters.models import build_model_context

    _, ir = _load(ctx, source)
    schemas = ir.components.get("schemas") or {}
    if not schemas:
        info("No schemas defined in this document.")
        return

    rows: list[list[str]] = []
    for name, schema in schemas.items():
        try:
            model = build_model_context(name, schema)
        except RecursionError:
            exc = RecursionLimitExceeded("emit", f"Schema '{name}' is nested too deeply to render")
            error(str(exc))
            raise typer.Exit(code=exc.exit_code) from None
        if model["kind"] == "interface":
            prop_names = [prop["name"] for prop in model["properties"]]
            detail = ", ".join(prop_names[:5])
            if len(prop_names) > 5:
                detail += "..."
        else:
            detail = model["type"]
        rows.append([model["name"], model["kind"], detail])

    get_output().print_table(["Model", "Kind", "Definition"], rows, title=f"Models ({len(rows)})")
