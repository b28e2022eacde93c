"""Path and URL helpers.

Source paths and URLs are POSIX-style strings relative to the site root
(e.g. ``posts/2010-01-31-hello.md`` → ``posts/2010-01-31-hello.html``).
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from pagecraft.exceptions import PageReadError

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = [
    "DEFAULT_OUTPUT_DIR",
    "SOURCE_EXTENSIONS",
    "is_file_more_recent",
    "to_destination",
    "to_root",
    "to_url",
]

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "_site"

# Source formats that are published as .html
SOURCE_EXTENSIONS: frozenset[str] = frozenset(
    {".md", ".markdown", ".txt", ".text", ".rst", ".html", ".htm"}
)


def to_url(path: str) -> str:
    """Translate a source path into the URL it is published at."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    pure = PurePosixPath(normalized.lstrip("/"))
    if pure.suffix.lower() in SOURCE_EXTENSIONS:
        pure = pure.with_suffix(".html")
    return str(pure)


def to_destination(url: str, output_dir: str | Path = DEFAULT_OUTPUT_DIR) -> Path:
    """Return the output file path for a URL."""
    return Path(output_dir) / url.lstrip("/")


def to_root(url: str) -> str:
    """Relative path from the directory of ``url`` back to the site root."""
    depth = len(PurePosixPath(url.lstrip("/")).parent.parts)
    if depth == 0:
        return "."
    return "/".join([".."] * depth)


def is_file_more_recent(target: Path, dependencies: Iterable[str | Path]) -> bool:
    """Check whether ``target`` exists and is at least as new as every dependency.

    Raises:
        PageReadError: If a dependency does not exist.
    """
    if not target.exists():
        return False

    target_mtime = target.stat().st_mtime
    for dependency in dependencies:
        try:
            dependency_mtime = Path(dependency).stat().st_mtime
        except OSError as e:
            raise PageReadError(f"Cannot stat dependency {dependency}: {e}") from e
        if dependency_mtime > target_mtime:
            logger.debug("%s is newer than %s", dependency, target)
            return False
    return True
