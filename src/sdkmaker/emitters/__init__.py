"""TypeScript emitters -- render a :class:`~sdkmaker.models.ClientIR` into client sources.

The second half of the pipeline. :func:`emit_sdk` returns a mapping of
relative file paths to file contents; :func:`write_files` puts them on disk.

Generated layout::

    src/models.ts          one declaration per component schema
    src/<Controller>.ts    one async function per operation
    src/API.ts             re-exports every controller module
    src/apiContext.ts      axios-backed transport context
    src/createClient.ts    factory binding all functions to one context
    src/index.ts           package entry point
"""

from __future__ import annotations

import logging

from sdkmaker.emitters.client import (
    config_name,
    emit_aggregator,
    emit_client_factory,
    emit_context,
    emit_index,
)
from sdkmaker.emitters.controllers import build_method_context, emit_controller
from sdkmaker.emitters.models import emit_models, model_names
from sdkmaker.emitters.typescript import response_wrapper, type_name
from sdkmaker.emitters.writer import write_files
from sdkmaker.exceptions import EmitError, RecursionLimitExceeded
from sdkmaker.models import ClientIR

logger = logging.getLogger(__name__)

_RESERVED_MODULES = {"models", "API", "apiContext", "createClient", "index"}

# Exports of apiContext.ts that every controller module imports.
_CONTEXT_EXPORTS = {"ApiContext", "RequestConfig", "request", "createContext"}

__all__ = ["emit_sdk", "write_files"]


def emit_sdk(ir: ClientIR, package_name: str) -> dict[str, str]:
    """Render every client source file for *ir*.

    The response alias is ``ApiResponse`` unless a schema already declares
    that name, in which case it gets a ``_`` suffix.

    Args:
        ir: The projected document.
        package_name: Name written into the ``index.ts`` banner.

    Returns:
        Relative path -> file text, in a stable order.

    Raises:
        EmitError: Two operations map onto the same function name, two
            controllers onto the same module name, or a schema or operation
            name clashes with a name the generated modules import.
        RecursionLimitExceeded: A schema is nested too deeply to render.
    """
    try:
        return _emit_sdk(ir, package_name)
    except RecursionError as exc:
        raise RecursionLimitExceeded("emit", "Schema is nested too deeply to render") from exc


def _emit_sdk(ir: ClientIR, package_name: str) -> dict[str, str]:
    controllers = ir.emittable_controllers()
    models = model_names(ir.components)
    wrapper = response_wrapper(models)

    clashing = sorted(models & (_CONTEXT_EXPORTS | {"API", "createClient", config_name(ir)}))
    if clashing:
        raise EmitError("emit", f"Schema '{clashing[0]}' clashes with a generated client name")

    seen_functions: dict[str, str] = {}
    seen_modules: dict[str, str] = {}
    methods = []
    for controller, operations in controllers.items():
        module = type_name(controller)
        if module in _RESERVED_MODULES:
            raise EmitError("emit", f"Controller '{controller}' clashes with the generated module '{module}'")
        if module in seen_modules:
            raise EmitError(
                "emit",
                f"Controllers '{seen_modules[module]}' and '{controller}' both map to module '{module}'",
            )
        seen_modules[module] = controller
        for operation in operations:
            method = build_method_context(operation)
            function = method["function"]
            if function in seen_functions:
                raise EmitError(
                    "emit",
                    f"Duplicate operation '{function}' in controllers "
                    f"'{seen_functions[function]}' and '{controller}'",
                    details={"operationId": operation.operation_id},
                )
            if function in _CONTEXT_EXPORTS or function in models or function == wrapper:
                raise EmitError(
                    "emit",
                    f"Operation '{function}' clashes with a name imported by its module",
                    details={"operationId": operation.operation_id},
                )
            seen_functions[function] = controller
            methods.append(method)

    files: dict[str, str] = {"src/models.ts": emit_models(ir.components, wrapper)}
    for controller, operations in controllers.items():
        files[f"src/{type_name(controller)}.ts"] = emit_controller(operations, wrapper)
    files["src/API.ts"] = emit_aggregator(list(seen_modules))
    files["src/apiContext.ts"] = emit_context(wrapper)
    files["src/createClient.ts"] = emit_client_factory(ir, methods, wrapper)
    files["src/index.ts"] = emit_index(package_name, ir.version)

    logger.info(
        "Rendered %d controller(s), %d operation(s) for %s",
        len(controllers),
        len(methods),
        package_name,
    )
    return files
