"""Emit one request-function module per controller.

Each operation becomes an ``async`` function whose first argument is the
``ApiContext`` owned by the calling client, so generated modules hold no
shared transport state. Only parameters resolved into
:class:`~sdkmaker.models.ParameterDescriptor` become function arguments;
raw (non-primitive) parameters are left out of the signature.

Argument order: request body (when required), required parameters, request
body (when optional), optional parameters. TypeScript rejects a required
argument after an optional one.
"""

from __future__ import annotations

from typing import Any, Optional

from sdkmaker.emitters.render import render
from sdkmaker.emitters.typescript import (
    DEFAULT_WRAPPER,
    function_name,
    json_schema,
    lower_first,
    parameter_ts_type,
    referenced_models,
    return_type,
    safe_identifier,
    schema_to_ts,
    type_name,
)
from sdkmaker.models import Operation, ParameterDescriptor, ParameterLocation, SchemaDescriptor


# Names the generated function body already binds, plus JavaScript reserved
# words that cannot name an argument.
_RESERVED_ARGUMENTS = frozenset({
    "ctx", "config", "request",
    "arguments", "await", "break", "case", "catch", "class", "const", "continue",
    "debugger", "default", "delete", "do", "else", "enum", "eval", "export",
    "extends", "false", "finally", "for", "function", "if", "implements",
    "import", "in", "instanceof", "interface", "let", "new", "null", "package",
    "private", "protected", "public", "return", "static", "super", "switch",
    "this", "throw", "true", "try", "typeof", "var", "void", "while", "with",
    "yield",
})


def build_method_context(operation: Operation) -> dict[str, Any]:
    """Describe one operation for the controller and client templates.

    Argument names come from :func:`safe_identifier`. A name that is already
    taken, by an earlier argument or by ``ctx``/``config``/``request`` or a
    reserved word, gets a ``_2``, ``_3``... suffix. A body named after a
    taken name falls back to ``body``.

    Returns:
        A dict with the function name, signature pieces, URL template,
        header/query mappings, body binding, return type, JSDoc entries,
        and the model names the function refers to.
    """
    params = [p for p in operation.parameters or [] if isinstance(p, ParameterDescriptor)]

    taken = set(_RESERVED_ARGUMENTS)
    bindings = []
    for param in params:
        binding = _param_binding(param, _unique(safe_identifier(param.name), taken))
        taken.add(binding["var"])
        bindings.append((param, binding))

    body = _body_binding(operation.request_body)
    if body:
        var = body["var"] if body["var"] not in taken else _unique("body", taken)
        body["var"] = body["name"] = var

    ordered: list[dict[str, Any]] = []
    if body and body["required"]:
        ordered.append(body)
    ordered.extend(binding for param, binding in bindings if param.required)
    if body and not body["required"]:
        ordered.append(body)
    ordered.extend(binding for param, binding in bindings if not param.required)

    url = operation.path
    for param, binding in bindings:
        if param.location is ParameterLocation.PATH:
            url = url.replace("{" + param.name + "}", "${" + binding["var"] + "}")

    returns = return_type(operation.responses)
    models = set(body["models"]) if body else set()
    for response in (operation.responses or {}).values():
        models |= referenced_models(json_schema(response))

    params_text = ", ".join(
        f"{arg['var']}{'' if arg['required'] else '?'}: {arg['type']}" for arg in ordered
    )
    return {
        "function": function_name(operation.operation_id),
        "http_method": operation.method.value,
        "summary": operation.summary or "",
        "url": url.replace("`", "\\`"),
        "headers": [
            {"name": param.name, "var": binding["var"]}
            for param, binding in bindings
            if param.location is ParameterLocation.HEADER
        ],
        "query": [
            {"name": param.name, "var": binding["var"]}
            for param, binding in bindings
            if param.location is ParameterLocation.QUERY
        ],
        "body": body,
        "return_type": returns,
        "docs": ordered,
        "params": params_text,
        "signature": ", ".join(filter(None, ["ctx: ApiContext", params_text])),
        "args": ", ".join(["ctx"] + [arg["var"] for arg in ordered]),
        "models": sorted(models),
    }


def emit_controller(operations: list[Operation], wrapper: str = DEFAULT_WRAPPER) -> str:
    """Render the TypeScript module for one controller's operations."""
    methods = [build_method_context(op) for op in operations]
    return render(
        "controller.ts.j2", methods=methods, models=collect_models(methods), wrapper=wrapper
    )


def collect_models(methods: list[dict[str, Any]]) -> list[str]:
    """Sorted, de-duplicated model names referenced by *methods*."""
    names: set[str] = set()
    for method in methods:
        names.update(method["models"])
    return sorted(names)


def _unique(base: str, taken: set[str]) -> str:
    if base not in taken:
        return base
    index = 2
    while f"{base}_{index}" in taken:
        index += 1
    return f"{base}_{index}"


def _param_binding(param: ParameterDescriptor, var: str) -> dict[str, Any]:
    description = f"{param.location.value} parameter"
    if param.format:
        description += f" ({param.format})"
    return {
        "var": var,
        "type": parameter_ts_type(param),
        "required": param.required,
        "description": description,
        "name": var,
    }


def _body_binding(request_body: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    schema = json_schema(request_body)
    if schema is None:
        return None

    descriptor = SchemaDescriptor.from_node(schema)
    if descriptor is not None and descriptor.model_name:
        var = safe_identifier(lower_first(type_name(descriptor.model_name)))
    else:
        var = "body"
    return {
        "var": var,
        "name": var,
        "type": schema_to_ts(schema),
        "required": bool(request_body.get("required")) if request_body else False,
        "description": "Request body",
        "models": sorted(referenced_models(schema)),
    }
