"""Command line interface for inspecting resolved content."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from content_resolver.config.settings import HttpSettings, ResolverSettings
from content_resolver.exceptions import ConfigurationError
from content_resolver.logging_setup import configure_logging, console
from content_resolver.resolver import ContentResolver
from content_resolver.types import Document

logger = logging.getLogger(__name__)

T = TypeVar("T")

app = typer.Typer(
    name="content-resolver",
    help="Resolve post and page slugs into Markdown documents served over HTTP",
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    origin: Annotated[
        str | None,
        typer.Option("--origin", "-o", help="Origin serving the content (overrides settings)"),
    ] = None,
    site_root: Annotated[
        Path | None,
        typer.Option("--site-root", help="Directory holding .content-resolver.toml"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (default: CONTENT_RESOLVER_LOG_LEVEL or INFO)"),
    ] = None,
) -> None:
    """Load settings shared by every command."""
    configure_logging(log_level)
    try:
        settings = ResolverSettings.load(site_root)
        if origin:
            http = HttpSettings(**{**settings.http.model_dump(), "origin": origin})
            settings = settings.model_copy(update={"http": http})
    except (ConfigurationError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(2) from exc
    ctx.obj = settings


def _run(settings: ResolverSettings, action: Callable[[ContentResolver], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with ContentResolver(settings) as resolver:
            return await action(resolver)

    return asyncio.run(runner())


def _show_document(document: Document, *, show_body: bool) -> None:
    lines = [
        f"[bold]Title:[/bold] {escape(document.title)}",
        f"[bold]Slug:[/bold] {escape(document.slug)}",
        f"[bold]Date:[/bold] {document.date or '-'}",
        f"[bold]Path:[/bold] {escape(document.path)}",
    ]
    lines.extend(
        f"[bold]{escape(str(key))}:[/bold] {escape(str(value))}" for key, value in document.metadata.extra.items()
    )
    console.print(Panel("\n".join(lines), title=escape(document.title), border_style="blue"))
    if show_body:
        console.print(document.body, markup=False, highlight=False)


@app.command()
def posts(ctx: typer.Context) -> None:
    """List every post, newest first."""
    settings: ResolverSettings = ctx.obj

    async def action(resolver: ContentResolver) -> tuple[list[Document], list[str]]:
        documents = await resolver.load_all_posts()
        return documents, resolver.skipped_paths

    documents, skipped = _run(settings, action)
    if not documents:
        console.print(f"[yellow]No posts found at {settings.http.origin}[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"Posts ({len(documents)})", header_style="bold magenta")
    table.add_column("Date", style="blue", no_wrap=True)
    table.add_column("Slug", style="cyan")
    table.add_column("Title", style="green")
    for document in documents:
        table.add_row(document.date or "-", document.slug, document.title)
    console.print(table)

    for path in skipped:
        console.print(f"[dim]Skipped {path}[/dim]")


@app.command()
def post(
    ctx: typer.Context,
    slug: Annotated[str, typer.Argument(help="Post slug")],
    *,
    body: Annotated[bool, typer.Option("--body/--no-body", help="Print the Markdown body")] = True,
) -> None:
    """Show one post."""
    document = _run(ctx.obj, lambda resolver: resolver.load_post(slug))
    if document is None:
        console.print(f"[red]Post not found: {slug}[/red]")
        raise typer.Exit(1)
    _show_document(document, show_body=body)


@app.command()
def page(
    ctx: typer.Context,
    slug: Annotated[str, typer.Argument(help="Page slug")],
    *,
    body: Annotated[bool, typer.Option("--body/--no-body", help="Print the Markdown body")] = True,
) -> None:
    """Show one page."""
    document = _run(ctx.obj, lambda resolver: resolver.load_page(slug))
    if document is None:
        console.print(f"[red]Page not found: {slug}[/red]")
        raise typer.Exit(1)
    _show_document(document, show_body=body)


@app.command()
def discover(ctx: typer.Context) -> None:
    """Print the base location serving posts."""
    settings: ResolverSettings = ctx.obj
    base = _run(settings, lambda resolver: resolver.discover())
    if base is None:
        console.print(f"[red]No content base found at {settings.http.origin}[/red]")
        raise typer.Exit(1)
    console.print(base)
