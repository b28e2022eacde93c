"""Shared fixtures for pagecraft tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pytest

from pagecraft.page import default_reader

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from pagecraft.types import Context


@dataclass
class StubPage:
    """In-memory renderable for algebra tests."""

    deps: list[str] = field(default_factory=list)
    page_url: str = "stub.html"
    fields: dict[str, str] = field(default_factory=dict)

    def dependencies(self) -> list[str]:
        return list(self.deps)

    def url(self) -> str:
        return self.page_url

    def context(self) -> Context:
        return dict(self.fields)


@pytest.fixture(autouse=True)
def _clear_page_cache() -> None:
    """The shared page cache is keyed by relative path; reset per test."""
    default_reader.clear()


@pytest.fixture
def make_page() -> Callable[..., StubPage]:
    """Factory for in-memory renderables."""

    def factory(
        deps: list[str] | None = None,
        url: str = "stub.html",
        **fields: str,
    ) -> StubPage:
        return StubPage(deps=deps or [], page_url=url, fields=fields)

    return factory


@pytest.fixture
def site_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A temporary site root (the working directory) with sources and templates."""
    monkeypatch.chdir(tmp_path)

    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "default.html").write_text(
        "<html><title>{{ title }}</title>{{ body }}</html>",
        encoding="utf-8",
    )
    (templates / "item.html").write_text("<li>{{ title }}</li>\n", encoding="utf-8")

    posts = tmp_path / "posts"
    posts.mkdir()
    (posts / "2010-01-31-first.md").write_text(
        "---\ntitle: First\nauthor: Ada\n---\n# First\n\nHello *world*.\n",
        encoding="utf-8",
    )
    (posts / "2010-02-14-second.md").write_text(
        "---\ntitle: Second\n---\nSecond post.\n",
        encoding="utf-8",
    )
    (tmp_path / "about.md").write_text(
        "---\ntitle: About\n---\nAbout this site.\n",
        encoding="utf-8",
    )
    return tmp_path
