"""Emit the client scaffolding: the controller aggregator, the transport
context, the ``createClient`` factory and the package index.
"""

from __future__ import annotations

from typing import Any

from sdkmaker.emitters.controllers import collect_models
from sdkmaker.emitters.render import render
from sdkmaker.emitters.typescript import DEFAULT_WRAPPER, pascal_case
from sdkmaker.models import ClientIR


def emit_aggregator(modules: list[str]) -> str:
    """Render ``API.ts``, re-exporting every controller module."""
    return render("api.ts.j2", modules=modules)


def emit_context(wrapper: str = DEFAULT_WRAPPER) -> str:
    return render("api_context.ts.j2", wrapper=wrapper)


def config_name(ir: ClientIR) -> str:
    """Name of the ``createClient`` options interface, e.g. ``SwaggerPetstoreConfig``."""
    return pascal_case(ir.name) + "Config"


def emit_client_factory(
    ir: ClientIR, methods: list[dict[str, Any]], wrapper: str = DEFAULT_WRAPPER
) -> str:
    """Render ``createClient.ts`` exposing every method bound to one context.

    The options interface is named by :func:`config_name` and the default
    ``baseURL`` is the first server of the document.
    """
    return render(
        "create_client.ts.j2",
        config_name=config_name(ir),
        base_url=ir.base_url.replace("\\", "\\\\").replace("'", "\\'"),
        models=collect_models(methods),
        methods=methods,
        wrapper=wrapper,
    )


def emit_index(package_name: str, version: str = "") -> str:
    return render("index.ts.j2", package_name=package_name, version=version)
