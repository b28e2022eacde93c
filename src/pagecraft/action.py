"""Render actions — the unit every page builder returns.

A :class:`RenderAction` bundles what a render driver needs to decide
staleness and produce output: the declared dependency paths, an optional
destination URL, and a deferred context-producing computation.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from pagecraft.context import compose
from pagecraft.types import Context, ContextManipulation

__all__ = [
    "RenderAction",
    "chain",
    "create_manipulation_action",
    "create_render_action",
    "create_simple_render_action",
]


@dataclass(frozen=True)
class RenderAction:
    """Dependencies, optional destination and a deferred context build.

    ``build`` must be safe to call more than once: a single action may be
    combined into several larger ones. Nothing here caches its result.

    ``dependencies`` are compared by exact string equality; no path
    normalization is applied.
    """

    build: Callable[[], Context]
    dependencies: tuple[str, ...] = field(default=())
    destination: Callable[[], str] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    def with_manipulation(self, manipulation: ContextManipulation) -> RenderAction:
        """Return an action whose context is passed through ``manipulation``."""
        build = self.build
        return RenderAction(
            build=lambda: manipulation(build()),
            dependencies=self.dependencies,
            destination=self.destination,
        )


def create_render_action(
    build: Callable[[], Context],
    dependencies: Iterable[str] = (),
    destination: Callable[[], str] | None = None,
) -> RenderAction:
    """Create a render action from its three parts."""
    return RenderAction(build=build, dependencies=tuple(dependencies), destination=destination)


def create_simple_render_action(
    url: str,
    build: Callable[[], Context],
    dependencies: Iterable[str] = (),
) -> RenderAction:
    """Create a render action with a fixed destination URL."""
    return create_render_action(build, dependencies, lambda: url)


def create_manipulation_action(
    action: RenderAction,
    manipulation: ContextManipulation,
) -> RenderAction:
    """Apply ``manipulation`` to the context ``action`` builds."""
    return action.with_manipulation(manipulation)


def chain(action: RenderAction, *manipulations: ContextManipulation) -> RenderAction:
    """Apply several manipulations to ``action``, left to right."""
    return action.with_manipulation(compose(*manipulations))
