"""Jinja2 environment for the TypeScript templates.

Templates live in ``emitters/templates/`` next to this module. Autoescape is
disabled for ``.ts.j2`` files (they produce TypeScript, not HTML), and block
trimming is enabled so template control lines leave no blank lines behind.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sdkmaker.emitters.typescript import (
    comment_text,
    jsdoc_lines,
    lower_first,
    property_key,
    safe_identifier,
)

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``emitters/templates/``)."""


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Return the shared template environment.

    Returns:
        A configured :class:`~jinja2.Environment` with the ``ident``,
        ``lower_first``, ``key``, ``comment`` and ``jsdoc`` filters registered.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("ts.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["ident"] = safe_identifier
    env.filters["lower_first"] = lower_first
    env.filters["key"] = property_key
    env.filters["comment"] = comment_text
    env.filters["jsdoc"] = jsdoc_lines
    return env


def render(template_name: str, **context: Any) -> str:
    """Render *template_name* with *context* and return the text."""
    return get_environment().get_template(template_name).render(**context)
