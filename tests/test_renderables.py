"""Tests for pagecraft.renderables — custom pages, listings and combinations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pagecraft.action import RenderAction
from pagecraft.context import change_value
from pagecraft.renderables import (
    combine,
    combine_with_url,
    create_custom_page,
    create_listing,
    create_listing_with,
)
from pagecraft.templates import TemplateEngine
from pagecraft.types import Deferred, Literal

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture
def item_template(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Template rendering one list item per page, relative to the working directory."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "item.html").write_text("[{{ title }}]", encoding="utf-8")
    return "item.html"


def _action(
    fields: dict[str, str],
    deps: tuple[str, ...] = (),
    destination: str | None = None,
) -> RenderAction:
    return RenderAction(
        build=lambda: dict(fields),
        dependencies=deps,
        destination=(lambda: destination) if destination is not None else None,
    )


# ── create_custom_page ─────────────────────────────────────────────


class TestCreateCustomPage:
    def test_resolves_literal_and_deferred(self):
        page = create_custom_page(
            "about.html",
            [],
            [("title", Literal("About")), ("body", Deferred(lambda: "<p>hi</p>"))],
        )
        assert page.build() == {"title": "About", "body": "<p>hi</p>"}

    def test_accepts_mapping_and_bare_values(self):
        page = create_custom_page("a.html", [], {"title": "A", "count": lambda: "3"})
        assert page.build() == {"title": "A", "count": "3"}

    def test_dependencies_verbatim(self):
        page = create_custom_page("a.html", ["b.md", "./b.md", "b.md"], [])
        assert page.dependencies == ("b.md", "./b.md", "b.md")

    def test_destination_always_url(self):
        page = create_custom_page("feed.xml", ["x.md"], [("a", Deferred(lambda: "z"))])
        assert page.destination is not None
        assert page.destination() == "feed.xml"
        assert page.destination() == "feed.xml"

    def test_empty_association(self):
        assert create_custom_page("a.html", [], []).build() == {}

    def test_deferred_invoked_once_per_build(self):
        calls: list[int] = []

        def compute() -> str:
            calls.append(1)
            return "v"

        page = create_custom_page("a.html", [], [("k", Deferred(compute))])
        assert calls == []
        page.build()
        assert len(calls) == 1

    def test_failure_propagates_unchanged(self):
        error = OSError("cannot read posts/missing.md")

        def fail() -> str:
            raise error

        page = create_custom_page("a.html", [], [("title", Literal("x")), ("body", Deferred(fail))])
        with pytest.raises(OSError) as excinfo:
            page.build()
        assert excinfo.value is error

    def test_build_is_idempotent(self):
        page = create_custom_page("a.html", [], [("a", Literal("1")), ("b", Deferred(lambda: "2"))])
        assert page.build() == page.build()


# ── create_listing / create_listing_with ───────────────────────────


class TestCreateListing:
    def test_dependencies_template_then_items(
        self, make_page: Callable[..., object], item_template: str
    ):
        items = [make_page(["a.md"]), make_page(["b.md", "a.md"])]
        listing = create_listing("index.html", item_template, items)
        assert listing.dependencies == (item_template, "a.md", "b.md", "a.md")

    def test_body_concatenates_in_order(
        self, make_page: Callable[..., object], item_template: str
    ):
        items = [make_page(title="one"), make_page(title="two"), make_page(title="three")]
        listing = create_listing("index.html", item_template, items)
        assert listing.build()["body"] == "[one][two][three]"

    def test_empty_listing_has_empty_body(self, item_template: str):
        listing = create_listing("index.html", item_template, [], [("title", "Home")])
        assert listing.build() == {"body": "", "title": "Home"}

    def test_additional_fields_are_literal(
        self, make_page: Callable[..., object], item_template: str
    ):
        listing = create_listing(
            "index.html", item_template, [make_page(title="x")], {"title": "Home", "lang": "en"}
        )
        context = listing.build()
        assert context["title"] == "Home"
        assert context["lang"] == "en"

    def test_destination(self, item_template: str):
        listing = create_listing("posts/index.html", item_template, [])
        assert listing.destination is not None
        assert listing.destination() == "posts/index.html"

    def test_with_manipulation(self, make_page: Callable[..., object], item_template: str):
        items = [make_page(title="one"), make_page(title="two")]
        listing = create_listing_with(change_value("title", str.upper), "i.html", item_template, items)
        assert listing.build()["body"] == "[ONE][TWO]"

    def test_item_failure_fails_listing(self, item_template: str):
        class Broken:
            def dependencies(self) -> list[str]:
                return ["broken.md"]

            def url(self) -> str:
                return "broken.html"

            def context(self) -> dict[str, str]:
                raise OSError("broken.md unreadable")

        listing = create_listing("index.html", item_template, [Broken()])
        assert listing.dependencies == (item_template, "broken.md")
        with pytest.raises(OSError, match="unreadable"):
            listing.build()

    def test_item_field_named_self(self, make_page: Callable[..., object], item_template: str):
        listing = create_listing("index.html", item_template, [make_page(title="x", self="me")])
        assert listing.build()["body"] == "[x]"

    def test_renders_through_given_engine(self, make_page: Callable[..., object], tmp_path: Path):
        templates = tmp_path / "layouts"
        templates.mkdir()
        (templates / "row.html").write_text("<{{ title }}>", encoding="utf-8")
        engine = TemplateEngine(templates)

        listing = create_listing("index.html", "row.html", [make_page(title="a")], engine=engine)
        assert listing.build()["body"] == "<a>"

        listing = create_listing_with(
            change_value("title", str.upper), "i.html", "row.html", [make_page(title="b")], engine=engine
        )
        assert listing.build()["body"] == "<B>"


# ── combine ────────────────────────────────────────────────────────


class TestCombine:
    def test_dependencies_concatenated(self):
        x = _action({}, ("a.md", "b.md"))
        y = _action({}, ("b.md", "c.md"))
        assert combine(x, y).dependencies == ("a.md", "b.md", "b.md", "c.md")

    @pytest.mark.parametrize(
        ("x_dest", "y_dest", "expected"),
        [
            ("x.html", "y.html", "x.html"),
            ("x.html", None, "x.html"),
            (None, "y.html", "y.html"),
            (None, None, None),
        ],
    )
    def test_destination_first_present(
        self, x_dest: str | None, y_dest: str | None, expected: str | None
    ):
        combined = combine(_action({}, destination=x_dest), _action({}, destination=y_dest))
        if expected is None:
            assert combined.destination is None
        else:
            assert combined.destination is not None
            assert combined.destination() == expected

    def test_context_left_biased(self):
        x = _action({"title": "x", "only_x": "1"})
        y = _action({"title": "y", "only_y": "2"})
        assert combine(x, y).build() == {"title": "x", "only_x": "1", "only_y": "2"}

    def test_failure_in_either_side_fails(self):
        def fail() -> dict[str, str]:
            raise ValueError("boom")

        good = _action({"a": "1"})
        bad = RenderAction(build=fail)
        with pytest.raises(ValueError, match="boom"):
            combine(good, bad).build()
        with pytest.raises(ValueError, match="boom"):
            combine(bad, good).build()

    def test_nested_combination(self):
        inner = combine(_action({"a": "1"}, ("a",)), _action({"a": "2"}, ("b",)))
        combined = combine(inner, _action({"c": "3"}, ("c",)))
        assert combined.dependencies == ("a", "b", "c")
        assert combined.build() == {"a": "1", "c": "3"}

    def test_build_is_idempotent(self):
        combined = combine(_action({"a": "1"}), _action({"b": "2"}))
        assert combined.build() == combined.build()


# ── combine_with_url ───────────────────────────────────────────────


class TestCombineWithUrl:
    def test_url_is_literal(self, make_page: Callable[..., object]):
        combined = combine_with_url("custom.html", make_page(url="a.html"), make_page(url="b.html"))
        assert combined.url() == "custom.html"

    def test_url_field_overrides_both(self, make_page: Callable[..., object]):
        a = make_page(url="a.html", title="A")
        a.fields["url"] = "a.html"
        b = make_page(url="b.html")
        b.fields["url"] = "b.html"
        combined = combine_with_url("custom.html", a, b)
        assert combined.context()["url"] == "custom.html"

    def test_context_union_left_biased(self, make_page: Callable[..., object]):
        a = make_page(title="A")
        b = make_page(title="B", extra="e")
        context = combine_with_url("c.html", a, b).context()
        assert context == {"url": "c.html", "title": "A", "extra": "e"}

    def test_dependencies_concatenated(self, make_page: Callable[..., object]):
        combined = combine_with_url("c.html", make_page(["a.md"]), make_page(["a.md", "b.md"]))
        assert combined.dependencies() == ["a.md", "a.md", "b.md"]
