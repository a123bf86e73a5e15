"""Swagger/OpenAPI parser -- load, normalize, resolve ``$ref`` pointers, project controllers.

This sub-package is responsible for the first half of the sdkmaker pipeline:
turning a raw document (JSON or YAML; URL, local file, stdin, or literal
text) into a :class:`~sdkmaker.models.ClientIR` that the emitters can
consume.

Typical usage::

    from sdkmaker.parser import parse

    ir = parse("https://petstore3.swagger.io/api/v3/openapi.json")
    for name, operations in ir.emittable_controllers().items():
        print(name, [op.operation_id for op in operations])

Sub-modules:

* :mod:`~sdkmaker.parser.loader` -- I/O layer (URL, file, stdin) plus
  JSON/YAML decoding.
* :mod:`~sdkmaker.parser.normalizer` -- Swagger 2.0 / OpenAPI 3.x
  normalization onto one canonical shape.
* :mod:`~sdkmaker.parser.resolver` -- ``$ref`` resolution into typed
  descriptors.
* :mod:`~sdkmaker.parser.projector` -- Grouping of operations into
  controllers.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from sdkmaker.models import CanonicalDocument, ClientIR, GeneratorConfig
from sdkmaker.parser.loader import decode_content, load_source
from sdkmaker.parser.normalizer import normalize_document
from sdkmaker.parser.projector import project_controllers
from sdkmaker.parser.resolver import resolve_references

logger = logging.getLogger(__name__)

__all__ = [
    "decode_content",
    "load_document",
    "load_source",
    "normalize_document",
    "parse",
    "project_controllers",
    "resolve_references",
]


def load_document(source: Any, config: Optional[GeneratorConfig] = None) -> CanonicalDocument:
    """Load, decode, and normalize a document without resolving references.

    Useful for cheap metadata lookups (title, version, servers).

    Raises:
        ValidationError: Bad locator or not a Swagger/OpenAPI document.
        ContentParsingError: The text is neither JSON nor YAML.
        NetworkError: A URL locator could not be fetched.
    """
    config = config or GeneratorConfig()
    loaded = load_source(source, config.fetch)
    raw = decode_content(loaded.content)
    doc = normalize_document(raw)
    logger.debug(
        "Loaded %s document '%s' from %s",
        doc.openapi or "unversioned",
        doc.info.get("title", ""),
        loaded.origin,
    )
    return doc


def parse(source: Any, config: Optional[GeneratorConfig] = None) -> ClientIR:
    """Run the whole pipeline and return the IR for *source*.

    Args:
        source: A URL, file path, ``-`` for stdin, or literal JSON/YAML text.
        config: Generator settings; defaults to :class:`GeneratorConfig`.

    Returns:
        The projected :class:`~sdkmaker.models.ClientIR`.

    Raises:
        ValidationError: Bad locator, not a Swagger/OpenAPI document, or a
            dangling parameter pointer.
        ContentParsingError: The text is neither JSON nor YAML.
        NetworkError: A URL locator could not be fetched.
        RecursionLimitExceeded: The document tree contains a cycle.
    """
    config = config or GeneratorConfig()
    doc = load_document(source, config)
    resolved = resolve_references(doc)
    return project_controllers(
        resolved,
        default_controller=config.default_controller,
        internal_marker=config.internal_marker,
    )
