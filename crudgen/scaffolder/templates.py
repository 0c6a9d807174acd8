"""Jinja2 template rendering for CRUD scaffolding.

Provides the TemplateRenderer class which loads skeleton templates from an
ordered search path (a theme directory followed by its fallback theme) and
renders them with entity-specific context data.  Supports file-based and
string-based rendering.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    select_autoescape,
)

from .errors import ResourceNotFoundError


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 skeleton templates.

    A template name is looked up in each directory of the search path in
    turn, so a custom theme only has to ship the templates it changes.
    ``{% include %}`` and ``{% extends %}`` inside a template follow the same
    search path.  One Jinja2 environment is kept per distinct search path.
    """

    def __init__(self, search_path: Sequence[str | Path] = ()) -> None:
        self.search_path = [Path(p) for p in search_path]
        self._environments: dict[tuple[str, ...], Environment] = {}

    def environment(self, search_path: Sequence[str | Path] | None = None) -> Environment:
        """Return the (cached) environment for *search_path*."""
        dirs = [Path(p) for p in search_path] if search_path is not None else self.search_path
        key = tuple(str(d) for d in dirs)
        env = self._environments.get(key)
        if env is None:
            env = _build_environment(dirs)
            self._environments[key] = env
        return env

    # -- Rendering -----------------------------------------------------------

    def render(
        self,
        template_name: str,
        context: dict[str, Any],
        search_path: Sequence[str | Path] | None = None,
    ) -> str:
        """Render a single template with the provided context.

        Args:
            template_name: Path relative to the search directories (e.g.
                ``"views/list.html.j2"``).
            context: Dictionary of variables available inside the template.
            search_path: Ordered template directories.  Defaults to the
                renderer's own search path.

        Returns:
            The rendered template content as a string.

        Raises:
            ResourceNotFoundError: If no directory contains the template.
        """
        env = self.environment(search_path)
        try:
            template = env.get_template(template_name)
        except TemplateNotFound as exc:
            searched = search_path if search_path is not None else self.search_path
            raise ResourceNotFoundError(exc.name or template_name, searched) from exc
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.environment().from_string(template_string)
        return template.render(**context)

    # -- Utility -------------------------------------------------------------

    def list_templates(self, search_path: Sequence[str | Path] | None = None) -> list[str]:
        """Return a sorted list of all ``.j2`` template names on the search path."""
        return sorted(
            self.environment(search_path).list_templates(
                filter_func=lambda name: name.endswith(".j2")
            )
        )


def _build_environment(dirs: Sequence[Path]) -> Environment:
    env = Environment(
        loader=FileSystemLoader([str(d) for d in dirs]),
        autoescape=select_autoescape([]),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["slugify"] = _slugify_filter
    env.filters["pascal_case"] = _pascal_case_filter
    env.filters["snake_case"] = _snake_case_filter
    env.filters["camel_case"] = _camel_case_filter
    return env


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


def _snake_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""
