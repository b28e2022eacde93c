"""Renderable values — anything that can report dependencies, a URL and a context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pagecraft.action import RenderAction
from pagecraft.context import union
from pagecraft.exceptions import DestinationError
from pagecraft.files import to_url
from pagecraft.page import page_to_context, read_page

if TYPE_CHECKING:
    from pagecraft.types import Context

__all__ = [
    "ActionPage",
    "CombinedRenderable",
    "PagePath",
    "Renderable",
    "combine_renderables",
    "create_page_path",
    "renderable_action",
]


@runtime_checkable
class Renderable(Protocol):
    """A page-like value.

    ``url`` and ``context`` are the deferred computations: calling them
    performs the work (possibly reading files) and may fail.
    """

    def dependencies(self) -> list[str]: ...

    def url(self) -> str: ...

    def context(self) -> Context: ...


@dataclass(frozen=True, order=True)
class PagePath:
    """A source file rendered without reading it up front.

    Loading and caching are left to :func:`pagecraft.page.read_page`.
    """

    path: str

    def dependencies(self) -> list[str]:
        return [self.path]

    def url(self) -> str:
        return to_url(self.path)

    def context(self) -> Context:
        return page_to_context(read_page(self.path))

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path}

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> PagePath:
        return cls(path=str(data["path"]))


def create_page_path(path: str) -> PagePath:
    """Create a :class:`PagePath` for a source file."""
    return PagePath(path)


@dataclass(frozen=True)
class CombinedRenderable:
    """Two renderables merged into one.

    Without ``explicit_url`` the URL comes from ``a``. With it, the URL is
    always ``explicit_url`` and the context's ``url`` field is forced to it.
    On any other key collision ``a`` wins.
    """

    a: Renderable
    b: Renderable
    explicit_url: str | None = None

    def dependencies(self) -> list[str]:
        return [*self.a.dependencies(), *self.b.dependencies()]

    def url(self) -> str:
        if self.explicit_url is not None:
            return self.explicit_url
        return self.a.url()

    def context(self) -> Context:
        combined = union(self.a.context(), self.b.context())
        if self.explicit_url is None:
            return combined
        return union({"url": self.explicit_url}, combined)


def combine_renderables(a: Renderable, b: Renderable) -> CombinedRenderable:
    """Combine two renderables, taking the URL from ``a``."""
    return CombinedRenderable(a, b)


def renderable_action(renderable: Renderable) -> RenderAction:
    """Wrap a renderable in a render action with the same three parts."""
    return RenderAction(
        build=renderable.context,
        dependencies=tuple(renderable.dependencies()),
        destination=renderable.url,
    )


@dataclass(frozen=True)
class ActionPage:
    """Exposes a :class:`~pagecraft.action.RenderAction` as a renderable."""

    action: RenderAction

    def dependencies(self) -> list[str]:
        return list(self.action.dependencies)

    def url(self) -> str:
        if self.action.destination is None:
            raise DestinationError("Render action has no destination")
        return self.action.destination()

    def context(self) -> Context:
        return self.action.build()
