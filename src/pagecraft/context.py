"""Context merging and manipulation.

Every combination in pagecraft goes through :func:`union` (left-biased
merge of contexts) and :func:`first_present` (first non-``None`` wins),
so the two-action and two-renderable combinators share one precedence
rule.

Manipulations are pure ``Context -> Context`` functions. They never
mutate their argument.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from pagecraft.types import Context, ContextManipulation

__all__ = [
    "change_url",
    "change_value",
    "compose",
    "copy_value",
    "first_present",
    "identity",
    "render_date",
    "render_value",
    "union",
]

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_DATE_PREFIX_LENGTH = 10  # "YYYY-MM-DD"


def union(*contexts: Context) -> Context:
    """Merge contexts; on key collision the earliest context wins.

    Keys of the first context come first, followed by keys that only
    later contexts contribute.
    """
    merged: Context = {}
    for context in contexts:
        for key, value in context.items():
            merged.setdefault(key, value)
    return merged


def first_present(*options: _T | None) -> _T | None:
    """Return the first option that is not ``None``."""
    for option in options:
        if option is not None:
            return option
    return None


def identity(context: Context) -> Context:
    return context


def compose(*manipulations: ContextManipulation) -> ContextManipulation:
    """Compose manipulations, applying them left to right."""

    def composed(context: Context) -> Context:
        for manipulation in manipulations:
            context = manipulation(context)
        return context

    return composed


def render_value(
    source: str,
    destination: str,
    fn: Callable[[str], str],
) -> ContextManipulation:
    """Set ``destination`` to ``fn(context[source])`` when ``source`` is present."""

    def manipulation(context: Context) -> Context:
        if source not in context:
            return context
        result = dict(context)
        result[destination] = fn(context[source])
        return result

    return manipulation


def change_value(key: str, fn: Callable[[str], str]) -> ContextManipulation:
    """Replace the value of ``key`` with ``fn(value)``."""
    return render_value(key, key, fn)


def copy_value(source: str, destination: str) -> ContextManipulation:
    """Copy the value of ``source`` into ``destination``."""
    return render_value(source, destination, lambda value: value)


def change_url(fn: Callable[[str], str]) -> ContextManipulation:
    """Rewrite the ``url`` field."""
    return change_value("url", fn)


def render_date(key: str, fmt: str, default: str) -> ContextManipulation:
    """Format the date encoded in the page's file name into ``key``.

    The file name of the ``path`` field must start with ``YYYY-MM-DD``
    (e.g. ``posts/2010-01-31-hello.md``). ``default`` is used when there
    is no ``path`` field or no parseable date.
    """

    def manipulation(context: Context) -> Context:
        result = dict(context)
        result[key] = _format_path_date(context.get("path"), fmt, default)
        return result

    return manipulation


def _format_path_date(path: str | None, fmt: str, default: str) -> str:
    if path is None:
        return default
    prefix = PurePosixPath(path).name[:_DATE_PREFIX_LENGTH]
    try:
        date = datetime.strptime(prefix, "%Y-%m-%d")
    except ValueError:
        logger.debug("No date prefix in %s, using default", path)
        return default
    return date.strftime(fmt)
