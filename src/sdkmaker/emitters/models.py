"""Emit ``models.ts`` -- one TypeScript declaration per component schema."""

from __future__ import annotations

from typing import Any, Optional

from sdkmaker.emitters.render import render
from sdkmaker.emitters.typescript import response_wrapper, schema_to_ts, type_name


def build_model_context(name: str, schema: Any) -> dict[str, Any]:
    """Describe one component schema for the models template.

    Object schemas become interfaces; everything else (enums, arrays,
    primitives, descriptors) becomes a type alias.
    """
    declaration: dict[str, Any] = {
        "name": type_name(name),
        "description": "",
        "kind": "alias",
        "type": "any",
        "properties": [],
    }
    if not isinstance(schema, dict):
        return declaration

    description = schema.get("description")
    if isinstance(description, str):
        declaration["description"] = description.strip()

    properties = schema.get("properties")
    is_object = schema.get("type") == "object" or isinstance(properties, dict)
    if is_object and "enum" not in schema:
        required = set(schema.get("required") or [])
        declaration["kind"] = "interface"
        for prop_name, prop in (properties or {}).items():
            prop_description = prop.get("description") if isinstance(prop, dict) else None
            declaration["properties"].append({
                "name": prop_name,
                "optional": prop_name not in required,
                "type": schema_to_ts(prop),
                "description": prop_description.strip() if isinstance(prop_description, str) else "",
            })
        return declaration

    declaration["type"] = schema_to_ts(schema)
    return declaration


def model_names(components: dict[str, Any]) -> set[str]:
    """Declaration names ``models.ts`` will export for *components*."""
    return {type_name(name) for name in components.get("schemas") or {}}


def emit_models(components: dict[str, Any], wrapper: Optional[str] = None) -> str:
    """Render ``models.ts`` for the ``schemas`` section of *components*.

    *wrapper* names the response alias; by default it is ``ApiResponse``,
    suffixed with ``_`` while a schema already uses the name.
    """
    schemas = components.get("schemas") or {}
    models = [build_model_context(name, schema) for name, schema in schemas.items()]
    if wrapper is None:
        wrapper = response_wrapper(model_names(components))
    return render("models.ts.j2", models=models, wrapper=wrapper)
