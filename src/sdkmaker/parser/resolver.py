"""Resolve ``$ref`` pointers in a canonical document into typed descriptors.

OpenAPI documents use ``$ref`` pointers (e.g.
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition. Code emission
does not want the referenced bodies inlined; it wants to know *which* named
model or parameter a node stands for. This module therefore replaces:

* schema references with a named handle
  ``{"modelName": "Pet", "refType": "schema", "isReference": true}``;
* parameter references, and inline parameters, whose schema is a ``string``
  or ``integer`` with a :class:`~sdkmaker.models.ParameterDescriptor`;
* any other reference with ``{"modelName": ..., "refType": "other", ...}``.

Every node is classified into exactly one :class:`NodeKind` and handed to
the visitor registered for that kind. The walk builds new containers and never
mutates its input, so the unresolved document stays usable.

Parameters with non-primitive schemas are passed through unchanged, and a
parameter pointer whose target is itself a ``$ref`` is followed only one
level. A node met again while it is still being visited (possible with YAML
aliases) raises :class:`~sdkmaker.exceptions.RecursionLimitExceeded`.

The public entry point is :func:`resolve_references`.
"""

from __future__ import annotations

import copy
import enum
import logging
from typing import Any, Callable, Optional

from sdkmaker.exceptions import RecursionLimitExceeded, ValidationError
from sdkmaker.models import (
    CanonicalDocument,
    ParameterDescriptor,
    ParameterLocation,
    RefKind,
    SchemaDescriptor,
)

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES = frozenset({"string", "integer"})


class NodeKind(str, enum.Enum):
    """The closed set of node variants the resolver distinguishes."""

    REFERENCE = "reference"
    PARAMETER = "parameter"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


def classify_node(node: Any) -> NodeKind:
    """Return the :class:`NodeKind` of a document node.

    A mapping with a string ``$ref`` is a reference even if it also looks like
    a parameter. A mapping with truthy ``in``, ``name`` and ``schema`` is a
    parameter definition.
    """
    if isinstance(node, list):
        return NodeKind.SEQUENCE
    if isinstance(node, dict):
        if isinstance(node.get("$ref"), str):
            return NodeKind.REFERENCE
        if node.get("in") and node.get("name") and node.get("schema"):
            return NodeKind.PARAMETER
        return NodeKind.MAPPING
    return NodeKind.SCALAR


def classify_reference(ref: str) -> tuple[str, RefKind]:
    """Split a pointer into its final segment and its :class:`RefKind`.

    A pointer with a ``parameters`` segment is a parameter reference, else one
    with a ``schemas`` segment is a schema reference, else it is ``other``.

    Example::

        >>> classify_reference("#/components/parameters/PageSize")
        ('PageSize', <RefKind.PARAMETER: 'parameter'>)
    """
    segments = ref.split("/")
    name = segments[-1]
    if "parameters" in segments:
        return name, RefKind.PARAMETER
    if "schemas" in segments:
        return name, RefKind.SCHEMA
    return name, RefKind.OTHER


def describe_parameter(
    definition: Any, model_name: Optional[str] = None
) -> Optional[ParameterDescriptor]:
    """Build a :class:`ParameterDescriptor` for a primitive parameter definition.

    Args:
        definition: A parameter definition mapping (``in``, ``name``,
            ``schema``...).
        model_name: The referenced component name, or ``None`` for an
            inline parameter.

    Returns:
        The descriptor, or ``None`` if *definition* is not a parameter with a
        ``string``/``integer`` schema in a known location.
    """
    if not isinstance(definition, dict):
        return None
    schema = definition.get("schema")
    if not (definition.get("in") and definition.get("name") and schema):
        return None
    if not isinstance(schema, dict) or schema.get("type") not in _PRIMITIVE_TYPES:
        return None
    try:
        location = ParameterLocation(definition["in"])
    except ValueError:
        return None

    fmt = schema.get("format")
    return ParameterDescriptor(
        model_name=model_name,
        is_reference=model_name is not None,
        name=str(definition["name"]),
        location=location,
        required=bool(definition.get("required")),
        primitive_type=schema["type"],
        format=fmt if isinstance(fmt, str) else None,
    )


def resolve_references(doc: CanonicalDocument) -> CanonicalDocument:
    """Return a new canonical document with every ``$ref`` node replaced.

    Args:
        doc: The normalized document. It is not modified.

    Returns:
        A structurally identical document carrying descriptors in place of
        references and primitive parameter definitions.

    Raises:
        ValidationError: If a parameter pointer is external or names a
            missing target.
        RecursionLimitExceeded: If the tree contains a cycle or is too deep
            to walk.

    Example::

        resolved = resolve_references(normalize_document(raw))
        params = resolved.paths["/pets"]["get"]["parameters"]
        # [{"modelName": "PageSize", "refType": "parameter", ...}]
    """
    root = doc.as_tree()
    resolver = _ReferenceResolver(root)
    try:
        tree = resolver.visit(root)
    except RecursionError as exc:
        raise RecursionLimitExceeded(
            "resolveRefs", "Document is nested too deeply to resolve references"
        ) from exc

    logger.debug("Resolved %d $ref pointer(s)", resolver.resolved_count)
    return CanonicalDocument.model_validate(tree)


class _ReferenceResolver:
    """Single-pass visitor over one document tree."""

    def __init__(self, root: dict[str, Any]) -> None:
        self._root = root
        self._active: set[int] = set()
        self.resolved_count = 0
        self._visitors: dict[NodeKind, Callable[[Any], Any]] = {
            NodeKind.REFERENCE: self._visit_reference,
            NodeKind.PARAMETER: self._visit_parameter,
            NodeKind.MAPPING: self._visit_mapping,
            NodeKind.SEQUENCE: self._visit_sequence,
            NodeKind.SCALAR: self._visit_scalar,
        }

    def visit(self, node: Any) -> Any:
        return self._visitors[classify_node(node)](node)

    def _visit_reference(self, node: dict[str, Any]) -> Any:
        ref = node["$ref"]
        name, kind = classify_reference(ref)
        self.resolved_count += 1

        if kind is RefKind.PARAMETER:
            target = self._dereference(ref)
            descriptor = describe_parameter(target, model_name=name)
            if descriptor is None:
                logger.debug("Parameter %s is not primitive; left unresolved", ref)
                return copy.deepcopy(target)
            return descriptor.as_node()

        return SchemaDescriptor(model_name=name, ref_type=kind).as_node()

    def _visit_parameter(self, node: dict[str, Any]) -> Any:
        descriptor = describe_parameter(node)
        if descriptor is None:
            return copy.deepcopy(node)
        return descriptor.as_node()

    def _visit_mapping(self, node: dict[str, Any]) -> dict[str, Any]:
        self._enter(node)
        try:
            return {key: self.visit(value) for key, value in node.items()}
        finally:
            self._active.discard(id(node))

    def _visit_sequence(self, node: list[Any]) -> list[Any]:
        self._enter(node)
        try:
            return [self.visit(item) for item in node]
        finally:
            self._active.discard(id(node))

    def _visit_scalar(self, node: Any) -> Any:
        return node

    def _enter(self, node: Any) -> None:
        if id(node) in self._active:
            raise RecursionLimitExceeded(
                "resolveRefs", "Cyclic structure detected while resolving references"
            )
        self._active.add(id(node))

    def _dereference(self, ref: str) -> Any:
        """Follow an internal pointer through the unresolved document."""
        if not ref.startswith("#"):
            raise ValidationError(
                "resolveRefs",
                f"External $ref not supported: {ref}",
                {"ref": ref},
            )

        current: Any = self._root
        for raw_segment in ref.lstrip("#").strip("/").split("/"):
            segment = raw_segment.replace("~1", "/").replace("~0", "~")
            if isinstance(current, dict) and segment in current:
                current = current[segment]
            elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
                current = current[int(segment)]
            else:
                raise ValidationError(
                    "resolveRefs",
                    f"Cannot resolve $ref '{ref}': '{segment}' not found",
                    {"ref": ref},
                )
        return current
