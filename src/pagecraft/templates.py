"""Jinja2 template engine for page rendering.

Templates are identified by their path relative to the engine's search
path, the working directory by default, so the same string declared as a
render dependency also names the template. Jinja2's loader caches
compiled templates and reloads them when the file's mtime changes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import jinja2

from pagecraft.context import identity
from pagecraft.exceptions import RenderError, TemplateNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from pagecraft.renderable import Renderable
    from pagecraft.types import Context, ContextManipulation

__all__ = [
    "TemplateEngine",
    "default_engine",
    "render_and_concat",
]

logger = logging.getLogger(__name__)


class TemplateEngine:
    """Renders contexts through Jinja2 templates loaded by path.

    Fields missing from a context render as empty strings. Output is not
    autoescaped: context values such as ``body`` already hold HTML.

    Args:
        search_path: Directory template paths are resolved against. A
            relative search path follows the current working directory.
    """

    def __init__(self, search_path: str | Path = ".") -> None:
        self.search_path = Path(search_path)
        self._loader = jinja2.FileSystemLoader(str(self.search_path))
        self._env = jinja2.Environment(
            loader=self._loader,
            autoescape=False,
            undefined=jinja2.Undefined,
            keep_trailing_newline=True,
            auto_reload=True,
        )

    def render(self, template_path: str, context: Context) -> str:
        """Render a template with the given context.

        Raises:
            TemplateNotFoundError: If the template file does not exist.
            RenderError: If the template cannot be compiled or rendered.
        """
        try:
            template = self._env.get_template(template_path)
        except jinja2.TemplateNotFound as e:
            raise TemplateNotFoundError(f"Template not found: {template_path}") from e
        except jinja2.TemplateSyntaxError as e:
            raise RenderError(f"Invalid template {template_path}: {e}") from e

        try:
            # Mapping, not keywords: context keys may be ``self``.
            return template.render(context)
        except jinja2.TemplateError as e:
            raise RenderError(f"Failed to render template {template_path}: {e}") from e

    def render_with(
        self,
        manipulation: ContextManipulation,
        template_path: str,
        context: Context,
    ) -> Context:
        """Render ``manipulation(context)`` and return it with ``body`` replaced."""
        manipulated = manipulation(context)
        result = dict(manipulated)
        result["body"] = self.render(template_path, manipulated)
        return result

    def render_chain(
        self,
        manipulation: ContextManipulation,
        templates: Iterable[str],
        context: Context,
    ) -> Context:
        """Apply ``manipulation`` once, then every template in order."""
        context = manipulation(context)
        for template_path in templates:
            context = self.render_with(identity, template_path, context)
        return context


default_engine = TemplateEngine()


def render_and_concat(
    manipulation: ContextManipulation,
    templates: Sequence[str],
    items: Sequence[Renderable],
    engine: TemplateEngine | None = None,
) -> Callable[[], str]:
    """Defer rendering every item through ``templates`` and concatenating the bodies.

    Items are rendered in the given order. An empty item list renders to
    the empty string.
    """
    templates = tuple(templates)
    items = tuple(items)

    def concatenation() -> str:
        active = engine or default_engine
        chunks: list[str] = []
        for item in items:
            rendered = active.render_chain(manipulation, templates, item.context())
            chunks.append(rendered.get("body", ""))
        logger.debug("Rendered %d item(s) through %s", len(chunks), ", ".join(templates))
        return "".join(chunks)

    return concatenation
