"""Group the operations of a resolved document into controllers.

This module walks the ``paths`` of a :class:`~sdkmaker.models.CanonicalDocument`
and builds the :class:`~sdkmaker.models.ClientIR` consumed by the emitters:

* Each operation lands in the controller named by its first tag, or in the
  default controller when it has no tags.
* Operations without an ``operationId``, or whose ``operationId`` contains
  the internal marker (``Controller_`` by default), are dropped silently.
  This is how framework-only endpoints are hidden from generated clients.
* Controller and operation order follow the document, so regenerated
  clients diff cleanly.

The single public entry point is :func:`project_controllers`.
"""

from __future__ import annotations

import logging
from typing import Any

from sdkmaker.models import CanonicalDocument, ClientIR, HTTPMethod, Operation

logger = logging.getLogger(__name__)

DEFAULT_CONTROLLER = "DefaultController"
INTERNAL_MARKER = "Controller_"

# HTTP methods recognised as operation keys of a path item
_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)

# Operation fields carried into the IR only when present in the source
_OPTIONAL_FIELDS = ("summary", "parameters", "requestBody", "responses")


def project_controllers(
    doc: CanonicalDocument,
    default_controller: str = DEFAULT_CONTROLLER,
    internal_marker: str = INTERNAL_MARKER,
) -> ClientIR:
    """Build the IR from a (normally reference-resolved) canonical document.

    Args:
        doc: The canonical document. Projection also works on an unresolved
            document; parameters then stay raw mappings.
        default_controller: Controller name for operations without tags.
        internal_marker: ``operationId`` substring that excludes an
            operation from every controller.

    Returns:
        The :class:`~sdkmaker.models.ClientIR`. Controllers whose operations
        were all filtered out are still present, with an empty list.
    """
    controllers: dict[str, list[Operation]] = {}

    for path, path_item in doc.paths.items():
        if not isinstance(path_item, dict):
            continue

        for method, operation in path_item.items():
            if method not in _HTTP_METHODS or not isinstance(operation, dict):
                continue

            tag = _first_tag(operation) or default_controller
            bucket = controllers.setdefault(tag, [])

            operation_id = operation.get("operationId")
            if not isinstance(operation_id, str) or not operation_id:
                logger.debug("Skipping %s %s: no operationId", method.upper(), path)
                continue
            if internal_marker and internal_marker in operation_id:
                logger.debug("Skipping internal operation %s", operation_id)
                continue

            bucket.append(_build_operation(method, path, operation_id, operation))

    servers = doc.servers
    base_url = ""
    if servers and isinstance(servers[0], dict):
        base_url = str(servers[0].get("url") or "")

    info = doc.info
    return ClientIR(
        controllers=controllers,
        components=doc.components,
        base_url=base_url,
        name=_text(info.get("title")),
        description=_text(info.get("description")),
        version=_text(info.get("version")),
    )


def _first_tag(operation: dict[str, Any]) -> str:
    tags = operation.get("tags")
    if isinstance(tags, list) and tags and tags[0]:
        return str(tags[0])
    return ""


def _build_operation(
    method: str, path: str, operation_id: str, operation: dict[str, Any]
) -> Operation:
    fields: dict[str, Any] = {
        "method": method,
        "path": path,
        "operationId": operation_id,
    }
    for key in _OPTIONAL_FIELDS:
        value = operation.get(key)
        if value:
            fields[key] = value

    if not isinstance(fields.get("summary", ""), str):
        fields["summary"] = str(fields["summary"])
    if "parameters" in fields:
        if isinstance(fields["parameters"], list):
            fields["parameters"] = [p for p in fields["parameters"] if isinstance(p, dict)]
        else:
            del fields["parameters"]
    for key in ("requestBody", "responses"):
        if not isinstance(fields.get(key, {}), dict):
            del fields[key]
    # YAML decodes unquoted status codes as integers
    if "responses" in fields:
        fields["responses"] = {str(code): body for code, body in fields["responses"].items()}

    return Operation.model_validate(fields)


def _text(value: Any) -> str:
    return "" if value is None else str(value)
