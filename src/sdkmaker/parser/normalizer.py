"""Map Swagger 2.0 and OpenAPI 3.x documents onto one canonical shape.

The single public function is :func:`normalize_document`. After it returns,
every document uses OpenAPI 3.x field names (``openapi``, ``servers``,
``components``) and nothing downstream branches on the source version.

Swagger 2.0 documents are converted as follows:

* ``schemes[0]`` (default ``https``), ``host`` and ``basePath`` become a single
  ``servers`` entry; no ``host`` means no servers.
* ``definitions``, ``parameters``, ``responses`` and ``securityDefinitions``
  move under ``components``.
* ``swagger: "2.0"`` becomes ``openapi: "3.0.0"``; other values pass through.
* Internal pointers into the moved sections are rewritten to their
  ``#/components/...`` location.
"""

from __future__ import annotations

import logging
from typing import Any

from sdkmaker.exceptions import RecursionLimitExceeded, ValidationError
from sdkmaker.models import CanonicalDocument

logger = logging.getLogger(__name__)

_MARKER_FIELDS = ("swagger", "openapi", "info", "paths")

# Swagger 2.0 top-level section -> canonical components section
_LEGACY_SECTIONS = {
    "definitions": "schemas",
    "parameters": "parameters",
    "responses": "responses",
    "securityDefinitions": "securitySchemes",
}


def normalize_document(raw: Any) -> CanonicalDocument:
    """Normalize a decoded Swagger/OpenAPI tree into a :class:`CanonicalDocument`.

    Args:
        raw: The tree returned by :func:`~sdkmaker.parser.loader.decode_content`.

    Returns:
        The canonical document.

    Raises:
        ValidationError: If *raw* is not a mapping carrying at least one of
            ``swagger``, ``openapi``, ``info`` or ``paths``.
        RecursionLimitExceeded: If the tree is too deep to rewrite.
    """
    if not has_basic_structure(raw):
        raise ValidationError("parse", "Invalid Swagger/OpenAPI document structure")

    try:
        if "swagger" in raw:
            return _normalize_swagger2(raw)
        return _normalize_openapi3(raw)
    except RecursionError as exc:
        raise RecursionLimitExceeded(
            "normalize", "Document is nested too deeply to normalize"
        ) from exc


def has_basic_structure(raw: Any) -> bool:
    """Return True if *raw* is a mapping with at least one Swagger/OpenAPI marker field."""
    return isinstance(raw, dict) and any(field in raw for field in _MARKER_FIELDS)


def _normalize_swagger2(raw: dict[str, Any]) -> CanonicalDocument:
    version = str(raw["swagger"])
    logger.debug("Normalizing Swagger %s document", version)

    servers: list[dict[str, Any]] = []
    host = raw.get("host")
    if host:
        schemes = raw.get("schemes") or []
        scheme = schemes[0] if isinstance(schemes, list) and schemes else "https"
        servers.append({"url": f"{scheme}://{host}{raw.get('basePath') or ''}"})

    components = {
        target: _mapping(raw.get(source)) for source, target in _LEGACY_SECTIONS.items()
    }

    return CanonicalDocument(
        openapi="3.0.0" if version == "2.0" else version,
        info=_mapping(raw.get("info")),
        servers=servers,
        paths=_rewrite_legacy_refs(_mapping(raw.get("paths"))),
        components=_rewrite_legacy_refs(components),
        tags=_sequence(raw.get("tags")),
    )


def _normalize_openapi3(raw: dict[str, Any]) -> CanonicalDocument:
    version = raw.get("openapi")
    logger.debug("Normalizing OpenAPI %s document", version)
    return CanonicalDocument(
        openapi=str(version) if version is not None else "",
        info=_mapping(raw.get("info")),
        servers=[server for server in _sequence(raw.get("servers")) if isinstance(server, dict)],
        paths=_mapping(raw.get("paths")),
        components=_mapping(raw.get("components")),
        tags=_sequence(raw.get("tags")),
    )


def _rewrite_legacy_refs(node: Any) -> Any:
    """Return a copy of *node* with Swagger 2.0 section pointers moved under components.

    A container already seen on the current branch is returned as is, so
    self-referencing YAML aliases are left for the resolver to reject.
    """
    return _rewrite(node, frozenset())


def _rewrite(node: Any, active: frozenset[int]) -> Any:
    if isinstance(node, (dict, list)):
        if id(node) in active:
            return node
        active = active | {id(node)}
    if isinstance(node, dict):
        ref = node.get("$ref")
        rewritten = {key: _rewrite(value, active) for key, value in node.items()}
        if isinstance(ref, str):
            rewritten["$ref"] = _rewrite_pointer(ref)
        return rewritten
    if isinstance(node, list):
        return [_rewrite(item, active) for item in node]
    return node


def _rewrite_pointer(ref: str) -> str:
    for source, target in _LEGACY_SECTIONS.items():
        prefix = f"#/{source}/"
        if ref.startswith(prefix):
            return f"#/components/{target}/{ref[len(prefix):]}"
    return ref


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _sequence(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []
