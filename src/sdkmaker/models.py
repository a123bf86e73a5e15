"""Canonical Pydantic models shared across all sdkmaker modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- serialised as JSON in the user or project config:
    :class:`FetchConfig`, :class:`OutputConfig`, :class:`GeneratorConfig`.

**Pipeline models** -- produced by the parser and consumed by the emitters:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`RefKind`,
    :class:`ParameterDescriptor`, :class:`SchemaDescriptor`,
    :class:`CanonicalDocument`, :class:`Operation`, and :class:`ClientIR`.

Descriptor and IR models expose camelCase aliases (``modelName``,
``isReference``, ``operationId``, ...) because that is the vocabulary of the
resolved document tree. ``model_dump(by_alias=True)`` reproduces it.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class FetchConfig(BaseModel):
    """Settings for fetching documents from URL locators."""

    timeout: Optional[float] = Field(
        default=None, description="Request timeout in seconds; null waits indefinitely"
    )
    accept: str = Field(
        default="application/json, application/yaml, text/yaml",
        description="Accept header sent with the request",
    )
    follow_redirects: bool = True


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GeneratorConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format used when no --json/--plain flag is given"
    )


class GeneratorConfig(BaseModel):
    """Effective generator configuration.

    Loaded from ``~/.config/sdkmaker/config.json`` and ``./sdkmaker.json``
    and overridden by environment variables and CLI flags. See
    :func:`~sdkmaker.config.resolve_config` for the full precedence chain.
    """

    default_controller: str = Field(
        default="DefaultController",
        description="Controller name for operations without tags",
    )
    internal_marker: str = Field(
        default="Controller_",
        description="operationId substring that hides framework-internal operations",
    )
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Pipeline ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operation keys of a path item."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Parameter locations the generated functions can send.

    ``cookie`` parameters have no member here and stay raw in the IR.
    """

    QUERY = "query"
    HEADER = "header"
    PATH = "path"


class RefKind(str, enum.Enum):
    """Classification of a ``$ref`` pointer by its path segments."""

    PARAMETER = "parameter"
    SCHEMA = "schema"
    OTHER = "other"


class ParameterDescriptor(BaseModel):
    """A parameter resolved into a typed descriptor.

    Produced for both referenced parameters (``modelName`` is the pointer's
    final segment) and inline ones (``modelName`` is ``None``). Only
    parameters with a ``string`` or ``integer`` schema get this shape.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    model_name: Optional[str] = Field(alias="modelName")
    ref_type: RefKind = Field(default=RefKind.PARAMETER, alias="refType")
    is_reference: bool = Field(alias="isReference")
    name: str
    location: ParameterLocation
    required: bool = False
    primitive_type: str = Field(alias="primitiveType")
    format: Optional[str] = None

    def as_node(self) -> dict[str, Any]:
        """Return the descriptor as a plain document node."""
        return self.model_dump(by_alias=True, mode="json")


class SchemaDescriptor(BaseModel):
    """A named handle for a referenced schema (or an array of one).

    The schema body is not inlined; consumers look the name up in
    ``components.schemas``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    model_name: Optional[str] = Field(default=None, alias="modelName")
    ref_type: RefKind = Field(default=RefKind.SCHEMA, alias="refType")
    is_reference: bool = Field(default=True, alias="isReference")
    type: Optional[str] = None
    items: Optional[SchemaDescriptor] = None

    def as_node(self) -> dict[str, Any]:
        """Return the descriptor as a plain document node, without unset fields."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    @classmethod
    def from_node(cls, node: Any) -> Optional[SchemaDescriptor]:
        """Build a descriptor from a resolved schema node.

        Recognises reference descriptors (nodes carrying ``refType`` of
        ``schema`` or ``other``) and array schemas whose ``items`` is such a
        descriptor.

        Returns:
            The descriptor, or ``None`` if *node* is neither shape.
        """
        if not isinstance(node, dict):
            return None
        if node.get("refType") in (RefKind.SCHEMA.value, RefKind.OTHER.value):
            return cls(
                model_name=node.get("modelName"),
                ref_type=RefKind(node["refType"]),
                is_reference=bool(node.get("isReference", True)),
            )
        if node.get("type") == "array":
            items = cls.from_node(node.get("items"))
            if items is not None:
                return cls(is_reference=False, type="array", items=items)
        return None


class CanonicalDocument(BaseModel):
    """A Swagger/OpenAPI document normalized onto OpenAPI 3.x field names.

    Produced by :func:`~sdkmaker.parser.normalizer.normalize_document`.
    ``paths`` and ``components`` hold the untyped document tree; nothing
    downstream inspects the source version again.
    """

    model_config = ConfigDict(frozen=True)

    openapi: str
    info: dict[str, Any] = Field(default_factory=dict)
    servers: list[dict[str, Any]] = Field(default_factory=list)
    paths: dict[str, Any] = Field(default_factory=dict)
    components: dict[str, Any] = Field(default_factory=dict)
    tags: list[Any] = Field(default_factory=list)

    def as_tree(self) -> dict[str, Any]:
        """Return the document fields as a plain mapping (containers shared, not copied)."""
        return {
            "openapi": self.openapi,
            "info": self.info,
            "servers": self.servers,
            "paths": self.paths,
            "components": self.components,
            "tags": self.tags,
        }


class Operation(BaseModel):
    """One HTTP method bound to one path, as carried by the IR.

    ``parameters`` holds :class:`ParameterDescriptor` instances for
    resolved primitive parameters and the raw mapping for everything else.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    method: HTTPMethod
    path: str
    operation_id: str = Field(alias="operationId")
    summary: Optional[str] = None
    parameters: Optional[
        list[Annotated[Union[ParameterDescriptor, dict[str, Any]], Field(union_mode="left_to_right")]]
    ] = None
    request_body: Optional[dict[str, Any]] = Field(default=None, alias="requestBody")
    responses: Optional[dict[str, Any]] = None


class ClientIR(BaseModel):
    """The intermediate representation handed to the emitters.

    ``controllers`` maps a controller name to its operations in document
    traversal order. Controllers may be empty when all of their operations
    were filtered; use :meth:`emittable_controllers` before rendering.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    controllers: dict[str, list[Operation]] = Field(default_factory=dict)
    components: dict[str, Any] = Field(default_factory=dict)
    base_url: str = Field(default="", alias="baseUrl")
    name: str = ""
    description: str = ""
    version: str = ""

    def emittable_controllers(self) -> dict[str, list[Operation]]:
        """Return only the controllers that hold at least one operation."""
        return {name: ops for name, ops in self.controllers.items() if ops}
