"""Page builders and combinators.

Builders aggregate dependency lists eagerly, when the page is defined, and
defer all context computation to the returned action's ``build``.

Usage::

    posts = [create_page_path(p) for p in sorted(post_files, reverse=True)]
    index = create_listing(
        "index.html",
        "templates/postitem.html",
        posts,
        [("title", "Home")],
    )
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TypeAlias

from pagecraft.action import RenderAction
from pagecraft.context import first_present, identity, union
from pagecraft.renderable import CombinedRenderable, Renderable
from pagecraft.templates import TemplateEngine, render_and_concat
from pagecraft.types import (
    Context,
    ContextManipulation,
    Deferred,
    FieldValue,
    Literal,
    resolve_value,
)

__all__ = [
    "combine",
    "combine_with_url",
    "create_custom_page",
    "create_listing",
    "create_listing_with",
]

Association: TypeAlias = (
    Mapping[str, FieldValue | str | Callable[[], str]]
    | Iterable[tuple[str, FieldValue | str | Callable[[], str]]]
)

Fields: TypeAlias = Mapping[str, str] | Iterable[tuple[str, str]]


def _pairs(association: Mapping | Iterable) -> tuple[tuple, ...]:
    if isinstance(association, Mapping):
        return tuple(association.items())
    return tuple(association)


def create_custom_page(
    url: str,
    dependencies: Iterable[str],
    association: Association,
) -> RenderAction:
    """Create a page from explicit fields.

    Args:
        url: Destination URL of the page.
        dependencies: Paths the page depends on, kept verbatim.
        association: Field name → :class:`Literal`, :class:`Deferred`, plain
            string or zero-argument callable. Deferred values are computed
            when the page is built; use them for anything read from disk.

    Returns:
        RenderAction whose build resolves every field. A failing deferred
        value fails the whole build.
    """
    pairs = _pairs(association)

    def build() -> Context:
        return {key: resolve_value(value) for key, value in pairs}

    return RenderAction(
        build=build,
        dependencies=tuple(dependencies),
        destination=lambda: url,
    )


def create_listing(
    url: str,
    template: str,
    renderables: Sequence[Renderable],
    additional: Fields = (),
    *,
    engine: TemplateEngine | None = None,
) -> RenderAction:
    """Create a listing page.

    Every renderable is rendered through ``template`` and the results are
    concatenated, in order, into the ``body`` field. ``additional`` fields
    are added as literal strings. Items render through ``engine``, or the
    shared default engine when none is given.
    """
    return create_listing_with(identity, url, template, renderables, additional, engine=engine)


def create_listing_with(
    manipulation: ContextManipulation,
    url: str,
    template: str,
    renderables: Sequence[Renderable],
    additional: Fields = (),
    *,
    engine: TemplateEngine | None = None,
) -> RenderAction:
    """Like :func:`create_listing`, applying ``manipulation`` to every item's context."""
    renderables = tuple(renderables)
    dependencies = [template]
    for renderable in renderables:
        dependencies.extend(renderable.dependencies())

    body = Deferred(render_and_concat(manipulation, [template], renderables, engine))
    association: list[tuple[str, FieldValue]] = [("body", body)]
    association.extend((key, Literal(value)) for key, value in _pairs(additional))

    return create_custom_page(url, dependencies, association)


def combine(x: RenderAction, y: RenderAction) -> RenderAction:
    """Combine two render actions.

    Dependencies are concatenated. The destination of ``x`` is used when it
    has one, otherwise that of ``y``. Contexts are merged with ``x`` winning
    on key collisions.
    """

    def build() -> Context:
        return union(x.build(), y.build())

    return RenderAction(
        build=build,
        dependencies=x.dependencies + y.dependencies,
        destination=first_present(x.destination, y.destination),
    )


def combine_with_url(url: str, a: Renderable, b: Renderable) -> CombinedRenderable:
    """Combine two renderables under a fixed URL.

    Behaves like a plain combination except that the URL, and the ``url``
    context field, are always ``url``.
    """
    return CombinedRenderable(a, b, explicit_url=url)
