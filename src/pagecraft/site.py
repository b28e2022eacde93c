"""Render driver — writes render actions to the output directory.

For each action the driver resolves the destination, skips the page when
the output file is newer than every dependency (templates included),
and otherwise builds the context, runs it through the template chain and
writes the resulting ``body``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pagecraft.config import PagecraftConfig, default_config
from pagecraft.context import identity, union
from pagecraft.exceptions import DestinationError, RenderError
from pagecraft.files import is_file_more_recent, to_destination
from pagecraft.renderable import renderable_action
from pagecraft.templates import TemplateEngine, default_engine

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from pagecraft.action import RenderAction
    from pagecraft.renderable import Renderable
    from pagecraft.types import ContextManipulation

__all__ = ["Site"]

logger = logging.getLogger(__name__)


class Site:
    """Writes pages described by render actions.

    Usage::

        site = Site(load_config(Path("pagecraft.toml")))
        site.render_chain(["templates/default.html"], about_page)
    """

    def __init__(
        self,
        config: PagecraftConfig | None = None,
        engine: TemplateEngine | None = None,
    ) -> None:
        self.config = config or default_config()
        self.engine = engine or default_engine

    @property
    def output_dir(self) -> str:
        return self.config.site.output_dir

    def render_chain(
        self,
        templates: Sequence[str],
        action: RenderAction,
        manipulation: ContextManipulation = identity,
        *,
        force: bool = False,
    ) -> Path | None:
        """Render ``action`` through ``templates`` and write it.

        Args:
            templates: Template paths, applied in order.
            action: Page to render. Must designate a destination.
            manipulation: Applied to the built context before the first template.
            force: Write even when the output is up to date.

        Returns:
            Path of the written file, under ``output_dir`` as configured
            (relative to the working directory unless ``output_dir`` is
            absolute), or None when it was up to date.

        Raises:
            DestinationError: If the action has no destination.
            RenderError: If rendering or writing fails.
        """
        if action.destination is None:
            raise DestinationError("Cannot write a render action without a destination")

        url = action.destination()
        destination = to_destination(url, self.output_dir)
        dependencies = [*action.dependencies, *templates]

        if not force and is_file_more_recent(destination, dependencies):
            logger.debug("Up to date: %s", destination)
            return None

        context = action.build()
        if self.config.site.base_url:
            context = union(context, {"base_url": self.config.site.base_url})

        rendered = self.engine.render_chain(manipulation, templates, context)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(rendered.get("body", ""), encoding="utf-8")
        except OSError as e:
            raise RenderError(f"Failed to write {destination}: {e}") from e

        logger.info("Rendered %s", destination)
        return destination

    def render_renderable(
        self,
        templates: Sequence[str],
        renderable: Renderable,
        manipulation: ContextManipulation = identity,
        *,
        force: bool = False,
    ) -> Path | None:
        """Render a :class:`~pagecraft.renderable.Renderable` at its own URL."""
        return self.render_chain(templates, renderable_action(renderable), manipulation, force=force)
