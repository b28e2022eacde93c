"""Page loading — front-matter extraction and Markdown rendering.

Reads source files, extracts YAML front-matter metadata and renders
Markdown bodies to HTML. Loaded pages are cached in memory and reloaded
when the source file's mtime changes.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import yaml
from markdown_it import MarkdownIt

from pagecraft.exceptions import PageReadError
from pagecraft.files import to_root, to_url
from pagecraft.types import Context, Page

__all__ = [
    "MARKDOWN_EXTENSIONS",
    "PageReader",
    "default_reader",
    "page_to_context",
    "read_page",
]

logger = logging.getLogger(__name__)

MAX_FILE_SIZE: int = 50 * 1024 * 1024  # 50 MB

MARKDOWN_EXTENSIONS: frozenset[str] = frozenset({".md", ".markdown"})


class PageReader:
    """Loads :class:`Page` objects from disk with an mtime-checked cache.

    Usage::

        reader = PageReader()
        page = reader.read("posts/2010-01-31-hello.md")
    """

    def __init__(self) -> None:
        self._markdown = MarkdownIt("commonmark", {"html": True})
        self._cache: dict[str, tuple[float, Page]] = {}
        self._lock = threading.Lock()

    def read(self, path: str) -> Page:
        """Read and parse a source page.

        Args:
            path: Source path relative to the working directory.

        Returns:
            Page with rendered body and front-matter metadata.

        Raises:
            PageReadError: If the file is missing, not a file, too large or unreadable.
        """
        source = Path(path)
        try:
            stat = source.stat()
        except OSError as e:
            raise PageReadError(f"Page not found: {path}") from e

        if not source.is_file():
            raise PageReadError(f"Not a file: {path}")

        with self._lock:
            cached = self._cache.get(path)
        if cached is not None and cached[0] == stat.st_mtime:
            logger.debug("Page cache hit: %s", path)
            return cached[1]

        if stat.st_size > MAX_FILE_SIZE:
            raise PageReadError(
                f"Page {path} ({stat.st_size} bytes) exceeds maximum size ({MAX_FILE_SIZE} bytes)"
            )

        page = self._load(source, path)
        with self._lock:
            self._cache[path] = (stat.st_mtime, page)
        return page

    def clear(self) -> None:
        """Drop every cached page."""
        with self._lock:
            self._cache.clear()

    def _load(self, source: Path, path: str) -> Page:
        logger.debug("Reading page: %s", path)
        try:
            raw = source.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.warning("UTF-8 decode failed for %s, retrying with replacement", path)
            raw = source.read_bytes().decode("utf-8", errors="replace")
        except OSError as e:
            raise PageReadError(f"Cannot read page {path}: {e}") from e

        # Strip BOM if present
        if raw.startswith("\ufeff"):
            raw = raw[1:]

        frontmatter, body = _split_frontmatter(raw)
        metadata = _parse_frontmatter(frontmatter, path) if frontmatter is not None else {}

        if source.suffix.lower() in MARKDOWN_EXTENSIONS:
            body = self._markdown.render(body)

        return Page(path=path, body=body, metadata=tuple(metadata.items()))


default_reader = PageReader()


def read_page(path: str) -> Page:
    """Read a page through the shared :data:`default_reader`."""
    return default_reader.read(path)


def page_to_context(page: Page) -> Context:
    """Convert a page into a template context.

    ``url``, ``path`` and ``root`` are derived from the page path and may
    be overridden by front-matter fields. ``body`` always comes last.
    """
    url = to_url(page.path)
    context: Context = {
        "url": url,
        "path": page.path,
        "root": to_root(url),
    }
    for key, value in page.metadata:
        context[key] = value
    context["body"] = page.body
    return context


# ── Module-level helpers ────────────────────────────────────────────


def _split_frontmatter(text: str) -> tuple[str | None, str]:
    """Separate a leading ``---`` block from the page body.

    Both delimiters must sit on their own line; line endings may be ``\\n``
    or ``\\r\\n``. Without a closing delimiter the whole text is the body.

    Returns:
        (frontmatter_text or None, body_text)
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != "---":
        return None, text

    for index, line in enumerate(lines[1:], start=1):
        if line.rstrip() == "---":
            return "".join(lines[1:index]), "".join(lines[index + 1 :])

    return None, text


def _parse_frontmatter(fm_text: str, path: str) -> dict[str, str]:
    """Parse YAML front-matter into string key-value pairs.

    Invalid YAML or a non-mapping document yields no metadata.
    """
    try:
        data = yaml.safe_load(fm_text)
    except yaml.YAMLError:
        logger.warning("Invalid YAML front-matter in %s, ignoring it", path)
        return {}

    if not isinstance(data, dict):
        return {}

    return {str(k): "" if v is None else str(v) for k, v in data.items()}
