"""TypeScript naming and type-mapping helpers shared by the emitters.

All functions here are pure: they take resolved document nodes (as found in
:class:`~sdkmaker.models.ClientIR`) and return TypeScript source fragments.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from sdkmaker.models import ParameterDescriptor, RefKind, SchemaDescriptor

_PRIMITIVES = {
    "integer": "number",
    "number": "number",
    "string": "string",
    "boolean": "boolean",
}

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

DEFAULT_WRAPPER = "ApiResponse"
"""Name of the response alias exported by ``models.ts``."""


def safe_identifier(name: str) -> str:
    """Turn a wire parameter name into a lowercase TypeScript variable name.

    Example::

        >>> safe_identifier("X-Request-Id")
        'x_request_id'
        >>> safe_identifier("2fa")
        '_2fa'
    """
    name = re.sub(r"[^a-zA-Z0-9_]", "_", name)
    name = re.sub(r"^(\d)", r"_\1", name)
    return name.lower()


def function_name(operation_id: str) -> str:
    """Turn an ``operationId`` into a function name, keeping its case."""
    name = re.sub(r"[^a-zA-Z0-9_]", "_", operation_id)
    return re.sub(r"^(\d)", r"_\1", name)


def type_name(name: str) -> str:
    """Turn a schema or controller name into a declaration/module name."""
    return function_name(name) or "Unnamed"


def lower_first(name: str) -> str:
    """Lowercase the first character (``Pet`` -> ``pet``)."""
    return name[:1].lower() + name[1:]


def pascal_case(text: str) -> str:
    """Collapse free text (an API title) into a PascalCase identifier.

    Example::

        >>> pascal_case("Swagger Petstore - OpenAPI 3.0")
        'SwaggerPetstoreOpenAPI30'
    """
    words = re.findall(r"[A-Za-z0-9]+", text)
    name = "".join(word[:1].upper() + word[1:] for word in words)
    if name[:1].isdigit():
        name = f"_{name}"
    return name or "Api"


def property_key(name: str) -> str:
    """Quote an object key unless it is a valid identifier."""
    if _IDENTIFIER.match(name):
        return name
    return "'" + name.replace("\\", "\\\\").replace("'", "\\'") + "'"


def schema_to_ts(schema: Any) -> str:
    """Map a resolved schema node onto a TypeScript type expression.

    Schema descriptors become their model name, arrays ``Array<T>``, enums
    string literal unions, objects with ``properties`` inline object types,
    maps ``Record<string, T>``. Anything unrecognised, including ``other``
    references, is ``any``.
    """
    if not isinstance(schema, dict):
        return "any"

    descriptor = SchemaDescriptor.from_node(schema)
    if descriptor is not None:
        return descriptor_to_ts(descriptor)

    enum_values = schema.get("enum")
    if isinstance(enum_values, list) and enum_values:
        return " | ".join(_literal(value) for value in enum_values)

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        # OpenAPI 3.1 allows type arrays, e.g. ["string", "null"]
        non_null = [t for t in schema_type if t != "null"]
        schema_type = non_null[0] if non_null else None

    if schema_type == "array":
        return f"Array<{schema_to_ts(schema.get('items'))}>"
    if schema_type in _PRIMITIVES:
        return _PRIMITIVES[schema_type]

    properties = schema.get("properties")
    if isinstance(properties, dict) and properties:
        required = set(schema.get("required") or [])
        members = [
            f"{property_key(name)}{'' if name in required else '?'}: {schema_to_ts(prop)}"
            for name, prop in properties.items()
        ]
        return "{ " + "; ".join(members) + " }"

    additional = schema.get("additionalProperties")
    if isinstance(additional, dict):
        return f"Record<string, {schema_to_ts(additional)}>"
    if schema_type == "object" or additional is True:
        return "Record<string, any>"
    return "any"


def descriptor_to_ts(descriptor: SchemaDescriptor) -> str:
    """Render a schema descriptor (or array of one) as a type expression."""
    if descriptor.type == "array" and descriptor.items is not None:
        return f"Array<{descriptor_to_ts(descriptor.items)}>"
    if descriptor.model_name and descriptor.ref_type is RefKind.SCHEMA:
        return type_name(descriptor.model_name)
    return "any"


def referenced_models(node: Any) -> set[str]:
    """Collect the declaration names of every schema descriptor nested in *node*.

    ``other`` references have no declaration in ``models.ts`` and are skipped.
    """
    names: set[str] = set()
    if isinstance(node, dict):
        if node.get("refType") == "schema" and isinstance(node.get("modelName"), str):
            names.add(type_name(node["modelName"]))
        for value in node.values():
            names |= referenced_models(value)
    elif isinstance(node, list):
        for item in node:
            names |= referenced_models(item)
    return names


def response_wrapper(model_names: set[str]) -> str:
    """Name of the ``<Wrapper><T>`` response alias, avoiding declared models.

    Example::

        >>> response_wrapper({"Pet"})
        'ApiResponse'
        >>> response_wrapper({"Pet", "ApiResponse"})
        'ApiResponse_'
    """
    name = DEFAULT_WRAPPER
    while name in model_names:
        name += "_"
    return name


def comment_text(text: str) -> str:
    """Make free text safe inside a ``/** ... */`` block."""
    return text.replace("*/", "*\\/")


def jsdoc_lines(text: str) -> str:
    """Render free text as `` * ``-prefixed JSDoc lines."""
    lines = comment_text(text).splitlines() or [""]
    return "\n".join(f" * {line}".rstrip() for line in lines)


def parameter_ts_type(param: ParameterDescriptor) -> str:
    """TypeScript type for a resolved primitive parameter."""
    if param.format == "date":
        return "Date"
    if param.primitive_type == "integer":
        return "number"
    return "string"


def json_schema(container: Any) -> Any:
    """Return ``content['application/json']['schema']`` of a body or response, if any."""
    if not isinstance(container, dict):
        return None
    content = container.get("content")
    if not isinstance(content, dict):
        return None
    media = content.get("application/json")
    if not isinstance(media, dict):
        return None
    return media.get("schema")


def return_type(responses: Optional[dict[str, Any]]) -> str:
    """Derive the payload type of an operation from its success response.

    ``default`` wins over ``200`` which wins over ``201``. A success response
    without a JSON schema yields ``void``; no success response yields
    ``unknown``.
    """
    responses = responses or {}
    success = responses.get("default") or responses.get("200") or responses.get("201")
    if not success:
        return "unknown"
    schema = json_schema(success)
    if schema is None:
        return "void"
    return schema_to_ts(schema)


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if value is None:
        return "null"
    return "'" + str(value).replace("\\", "\\\\").replace("'", "\\'") + "'"
