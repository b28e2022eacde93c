"""CLI interface for pagecraft.

Typer-based command-line interface with Rich output formatting.
"""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from pagecraft import __version__
from pagecraft.config import PagecraftConfig, default_config, find_config, load_config
from pagecraft.exceptions import PagecraftError
from pagecraft.renderable import create_page_path
from pagecraft.renderables import create_listing
from pagecraft.site import Site

__all__ = ["app"]

app = typer.Typer(
    name="pagecraft",
    help="pagecraft — compose static pages from sources, listings and templates.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_site_config() -> PagecraftConfig:
    """Load pagecraft.toml from the current directory tree, or defaults."""
    path = find_config()
    if path is None:
        return default_config()
    try:
        return load_config(path)
    except PagecraftError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1) from e


def _parse_fields(fields: list[str]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for item in fields:
        key, sep, value = item.partition("=")
        if not sep or not key:
            console.print(f"[red]Invalid field[/red] {item!r}, expected key=value")
            raise typer.Exit(code=1)
        pairs.append((key, value))
    return pairs


@app.command()
def version() -> None:
    """Show pagecraft version."""
    console.print(f"pagecraft {__version__}")


@app.command()
def page(
    sources: Annotated[
        list[str],
        typer.Argument(help="Source page(s) to render"),
    ],
    templates: Annotated[
        list[str] | None,
        typer.Option("--template", "-t", help="Template to apply (repeatable, in order)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Rewrite pages that are up to date"),
    ] = False,
) -> None:
    """Render source pages through templates into the output directory."""
    config = _load_site_config()
    site = Site(config)
    chain = templates or config.templates.default

    written = 0
    failed = 0
    for source in sources:
        try:
            result = site.render_renderable(chain, create_page_path(source), force=force)
        except PagecraftError as e:
            console.print(f"  [red]Error rendering {source}:[/red] {e}")
            failed += 1
            continue

        if result is None:
            console.print(f"  [dim]Skipped {source} (up to date)[/dim]")
        else:
            console.print(f"  [green]Wrote[/green] {result}")
            written += 1

    console.print(f"\n[green]Rendered {written} page(s)[/green]")
    if failed:
        raise typer.Exit(code=1)


@app.command()
def listing(
    url: Annotated[str, typer.Argument(help="Destination URL of the listing")],
    item_template: Annotated[str, typer.Argument(help="Template applied to every item")],
    sources: Annotated[
        list[str],
        typer.Argument(help="Source pages listed, in order"),
    ],
    templates: Annotated[
        list[str] | None,
        typer.Option("--template", "-t", help="Page template (repeatable, in order)"),
    ] = None,
    fields: Annotated[
        list[str] | None,
        typer.Option("--field", "-f", help="Extra context field as key=value"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Rewrite the listing even if up to date"),
    ] = False,
) -> None:
    """Render a listing page from many sources."""
    config = _load_site_config()
    site = Site(config)
    additional = _parse_fields(fields or [])
    items = [create_page_path(source) for source in sources]
    action = create_listing(url, item_template, items, additional, engine=site.engine)

    try:
        result = site.render_chain(templates or config.templates.default, action, force=force)
    except PagecraftError as e:
        console.print(f"[red]Error rendering listing {url}:[/red] {e}")
        raise typer.Exit(code=1) from e

    if result is None:
        console.print(f"[dim]Skipped {url} (up to date)[/dim]")
    else:
        console.print(f"[green]Wrote[/green] {result} ({len(items)} items)")
